"""BDD tests for the order lifecycle."""

from pytest_bdd import scenarios

scenarios("features/order_lifecycle.feature")
