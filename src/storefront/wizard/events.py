"""Domain events for the Wizard aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Wizard")
class WizardRegistered:
    __version__ = 1

    wizard_id = Identifier(required=True)
    email = String(required=True)
    registered_at = DateTime(required=True)
