"""Tests for score-driven wand allocation and RecordAnswer."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from storefront.answer.answer import Answer
from storefront.answer.recording import RecordAnswer
from storefront.exceptions import NoInventory, NotFound, SelectionFailed
from storefront.wand.allocation import WandAllocator, allocate
from storefront.wand.management import deactivate_wand
from storefront.wand.wand import Wand


class TestAllocate:
    def test_score_modulo_inventory(self, three_wands):
        # 7 mod 3 == 1 -> the second wand in identifier order
        assert allocate(7).id == "wand-b"
        assert allocate(0).id == "wand-a"
        assert allocate(2).id == "wand-c"

    @pytest.mark.parametrize("score", [1, 4, 7, 10, 12345])
    def test_score_and_score_plus_n_select_same_wand(self, three_wands, score):
        assert allocate(score).id == allocate(score + len(three_wands)).id

    def test_order_of_registration_does_not_matter(self, register_wand):
        register_wand("wand-c")
        register_wand("wand-a")
        register_wand("wand-b")
        assert allocate(7).id == "wand-b"

    def test_allocation_takes_no_reservation(self, three_wands):
        allocate(7)
        wand = current_domain.repository_for(Wand).get("wand-b")
        assert wand.is_allocatable

    def test_no_inventory(self):
        with pytest.raises(NoInventory) as exc:
            allocate(5)
        assert exc.value.kind == "no_inventory"

    def test_negative_score_rejected(self, three_wands):
        with pytest.raises(ValidationError):
            allocate(-1)

    def test_deactivated_wands_never_allocated(self, three_wands):
        deactivate_wand("wand-b")
        chosen = {allocate(score).id for score in range(10)}
        assert chosen == {"wand-a", "wand-c"}

    def test_claimed_wands_skipped(self, three_wands, place_order):
        place_order("wand-a")
        assert allocate(0).id == "wand-b"
        assert allocate(1).id == "wand-c"

    def test_all_wands_claimed_means_no_inventory(self, register_wand, place_order):
        place_order(register_wand("wand-only"))
        with pytest.raises(NoInventory):
            allocate(3)


class _ShrinkingRepository:
    """Counts one more wand than it can return, as if one vanished in between."""

    def __init__(self, wands):
        self.wands = wands

    def count_allocatable(self):
        return len(self.wands) + 1

    def allocatable_at(self, offset):
        return self.wands[offset] if offset < len(self.wands) else None


class TestSelectionFailed:
    def test_vanished_wand_raises_selection_failed(self, three_wands):
        wands = current_domain.repository_for(Wand).find_allocatable()
        allocator = WandAllocator(repository=_ShrinkingRepository(wands))
        with pytest.raises(SelectionFailed) as exc:
            allocator.allocate(3)
        assert exc.value.retryable is True


class TestRecordAnswer:
    def test_records_answer_with_allocated_wand(self, wizard_id, three_wands):
        answer_id = current_domain.process(
            RecordAnswer(wizard_id=wizard_id, quiz_id="quiz-1", score=7),
            asynchronous=False,
        )
        answer = current_domain.repository_for(Answer).get(answer_id)
        assert answer.wand_id == "wand-b"
        assert answer.score == 7
        assert answer.wizard_id == wizard_id

    def test_unknown_wizard(self, three_wands):
        with pytest.raises(NotFound):
            current_domain.process(RecordAnswer(wizard_id="ghost", score=3), asynchronous=False)

    def test_zero_score_rejected(self, wizard_id, three_wands):
        with pytest.raises(ValidationError):
            RecordAnswer(wizard_id=wizard_id, score=0)

    def test_no_inventory(self, wizard_id):
        with pytest.raises(NoInventory):
            current_domain.process(RecordAnswer(wizard_id=wizard_id, score=3), asynchronous=False)

    def test_selection_retried_once(self, wizard_id, three_wands, monkeypatch):
        calls = []
        original = WandAllocator.allocate

        def flaky(self, score):
            calls.append(score)
            if len(calls) == 1:
                raise SelectionFailed("Inventory changed while selecting a wand, try again")
            return original(self, score)

        monkeypatch.setattr(WandAllocator, "allocate", flaky)
        answer_id = current_domain.process(RecordAnswer(wizard_id=wizard_id, score=7), asynchronous=False)

        assert calls == [7, 7]
        assert current_domain.repository_for(Answer).get(answer_id).wand_id == "wand-b"

    def test_second_selection_failure_surfaces(self, wizard_id, three_wands, monkeypatch):
        def always_failing(self, score):
            raise SelectionFailed("Inventory changed while selecting a wand, try again")

        monkeypatch.setattr(WandAllocator, "allocate", always_failing)
        with pytest.raises(SelectionFailed):
            current_domain.process(RecordAnswer(wizard_id=wizard_id, score=7), asynchronous=False)
        assert current_domain.repository_for(Answer)._dao.query.all().items == []
