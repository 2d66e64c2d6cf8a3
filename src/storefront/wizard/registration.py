"""Wizard registration — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.wizard.wizard import Wizard


@storefront.command(part_of="Wizard")
class RegisterWizard:
    wizard_id = Identifier()
    name = String(required=True, max_length=100)
    last_name = String(max_length=100)
    email = String(required=True, max_length=254)
    address = String(max_length=500)
    school_id = String(max_length=100)


@storefront.command_handler(part_of=Wizard)
class RegisterWizardHandler:
    @handle(RegisterWizard)
    def register_wizard(self, command):
        repo = current_domain.repository_for(Wizard)

        email = command.email.strip().lower()
        if repo._dao.query.filter(email=email).all().items:
            raise ValidationError({"email": ["A wizard with this email already exists"]})

        wizard = Wizard.register(
            name=command.name,
            email=email,
            last_name=command.last_name,
            address=command.address,
            school_id=command.school_id,
            wizard_id=command.wizard_id,
        )
        repo.add(wizard)
        return str(wizard.id)
