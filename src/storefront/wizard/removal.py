"""Wizard removal — cascades through everything that refers to the wizard.

The plan always runs in the same order: the wizard's orders go first (each
through the order lifecycle, so their wands are released under lock), then
the quiz answers, then the wizard itself. A failure part-way leaves the
remaining steps undone and can be retried.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.answer.answer import Answer
from storefront.domain import storefront
from storefront.order import lifecycle
from storefront.utils.lookup import find_by_id
from storefront.wizard.wizard import Wizard

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Wizard")
class RemoveWizard:
    """Delete the wizard and their answers. Orders must already be gone."""

    wizard_id = Identifier(required=True)


@storefront.command_handler(part_of=Wizard)
class RemoveWizardHandler:
    @handle(RemoveWizard)
    def remove_wizard(self, command):
        wizard = find_by_id(Wizard, command.wizard_id)

        answer_repo = current_domain.repository_for(Answer)
        answers = answer_repo._dao.query.filter(wizard_id=str(wizard.id)).all().items
        for answer in answers:
            answer_repo._dao.delete(answer)

        current_domain.repository_for(Wizard)._dao.delete(wizard)
        return len(answers)


def remove_wizard(wizard_id) -> dict:
    """Run the removal plan for ``wizard_id`` and report what was deleted."""
    find_by_id(Wizard, wizard_id)

    orders = lifecycle.list_orders(wizard_id=wizard_id)
    for order in orders:
        lifecycle.remove(order.id)

    answers_removed = current_domain.process(RemoveWizard(wizard_id=wizard_id), asynchronous=False)

    summary = {"orders": len(orders), "answers": answers_removed, "wizard": 1}
    logger.info("Wizard removed", wizard_id=str(wizard_id), **summary)
    return summary
