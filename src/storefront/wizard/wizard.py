"""Wizard aggregate — the customer account orders and quiz answers refer to.

Accounts, credentials and schools are managed elsewhere; the storefront only
keeps what it needs to verify references and ship wands.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, String

from storefront.domain import storefront
from storefront.wizard.events import WizardRegistered


@storefront.aggregate
class Wizard:
    name = String(required=True, max_length=100)
    last_name = String(max_length=100)
    email = String(required=True, max_length=254)
    address = String(max_length=500)
    school_id = String(max_length=100)
    created_at = DateTime()

    @classmethod
    def register(cls, name, email, last_name=None, address=None, school_id=None, wizard_id=None):
        now = datetime.now(UTC)
        kwargs = {"id": wizard_id} if wizard_id else {}
        wizard = cls(
            name=name,
            last_name=last_name,
            email=email.strip().lower(),
            address=address,
            school_id=school_id,
            created_at=now,
            **kwargs,
        )
        wizard.raise_(
            WizardRegistered(
                wizard_id=str(wizard.id),
                email=wizard.email,
                registered_at=now,
            )
        )
        return wizard
