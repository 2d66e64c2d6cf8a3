"""RecordAnswer — store a quiz result and allocate a wand from its score.

Allocation is retried once when the inventory shifts between counting and
selecting; a second failure surfaces as ``SelectionFailed``.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.answer.answer import Answer
from storefront.domain import storefront
from storefront.exceptions import SelectionFailed
from storefront.utils.lookup import find_by_id
from storefront.wand.allocation import WandAllocator
from storefront.wizard.wizard import Wizard

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Answer")
class RecordAnswer:
    wizard_id = Identifier(required=True)
    quiz_id = Identifier()
    score = Integer(required=True, min_value=1)


@storefront.command_handler(part_of=Answer)
class RecordAnswerHandler:
    @handle(RecordAnswer)
    def record_answer(self, command):
        find_by_id(Wizard, command.wizard_id)

        allocator = WandAllocator()
        try:
            wand = allocator.allocate(command.score)
        except SelectionFailed:
            logger.info("Retrying wand allocation", score=command.score)
            wand = allocator.allocate(command.score)

        answer = Answer.record(
            wizard_id=command.wizard_id,
            score=command.score,
            wand_id=wand.id,
            quiz_id=command.quiz_id,
        )
        current_domain.repository_for(Answer).add(answer)
        return str(answer.id)
