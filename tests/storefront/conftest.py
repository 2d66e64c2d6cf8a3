from uuid import uuid4

import pytest
from protean import current_domain

from storefront.delivery import set_scheduler
from storefront.delivery.manual_scheduler import ManualDeliveryScheduler
from storefront.moderation import set_classifier
from storefront.moderation.fake_adapter import FakeClassifier
from storefront.order import lifecycle
from storefront.wand.management import RegisterWand
from storefront.wizard.registration import RegisterWizard


@pytest.fixture(autouse=True)
def scheduler():
    manual = ManualDeliveryScheduler()
    set_scheduler(manual)
    return manual


@pytest.fixture(autouse=True)
def classifier():
    fake = FakeClassifier()
    set_classifier(fake)
    return fake


@pytest.fixture()
def register_wizard():
    def _register(email=None, name="Harry", last_name="Potter", address="4 Privet Drive, Little Whinging"):
        return current_domain.process(
            RegisterWizard(
                name=name,
                last_name=last_name,
                email=email or f"wizard-{uuid4().hex[:8]}@hogwarts.example",
                address=address,
            ),
            asynchronous=False,
        )

    return _register


@pytest.fixture()
def wizard_id(register_wizard):
    return register_wizard(email="harry@hogwarts.example")


@pytest.fixture()
def register_wand():
    def _register(wand_id=None, name="Holly", total_price=7.0):
        return current_domain.process(
            RegisterWand(
                wand_id=wand_id,
                name=name,
                length=11.0,
                description="Holly and phoenix feather, nice and supple",
                image="https://images.example.com/wands/holly.png",
                wood="holly",
                core="phoenix feather",
                profit_margin=0.2,
                total_price=total_price,
            ),
            asynchronous=False,
        )

    return _register


@pytest.fixture()
def three_wands(register_wand):
    """Wands A, B and C, enumerated in that order by the allocator."""
    return [
        register_wand("wand-a", name="Alder"),
        register_wand("wand-b", name="Blackthorn"),
        register_wand("wand-c", name="Cedar"),
    ]


@pytest.fixture()
def place_order(wizard_id):
    def _place(wand_id, payment_reference=None, payment_provider="stripe", wizard=None):
        return lifecycle.create_order(
            wizard_id=wizard or wizard_id,
            wand_id=wand_id,
            payment_reference=payment_reference or f"pay-{uuid4().hex[:12]}",
            payment_provider=payment_provider,
            shipping_address="4 Privet Drive, Little Whinging",
        )

    return _place


@pytest.fixture()
def paid_order(place_order, register_wand):
    wand_id = register_wand("wand-paid")
    order_id = place_order(wand_id)
    lifecycle.pay(order_id)
    return order_id


@pytest.fixture()
def completed_order(paid_order, scheduler):
    lifecycle.dispatch(paid_order)
    scheduler.fire(paid_order)
    lifecycle.complete(paid_order)
    return paid_order
