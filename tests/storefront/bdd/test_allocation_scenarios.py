"""BDD tests for score-driven wand allocation."""

from pytest_bdd import scenarios

scenarios("features/wand_allocation.feature")
