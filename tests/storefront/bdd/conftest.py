"""Shared BDD fixtures and step definitions for the Storefront."""

import re

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then, when

from storefront.answer.answer import Answer
from storefront.answer.recording import RecordAnswer
from storefront.exceptions import StorefrontError
from storefront.order import lifecycle
from storefront.wand.allocation import allocate
from storefront.wand.management import deactivate_wand
from storefront.wand.wand import Wand


@pytest.fixture()
def context():
    """Carries the current order, recorded answers and the last failure between steps."""
    return {"order_id": None, "answers": [], "error": None}


def _attempt(context, operation):
    context["error"] = None
    try:
        return operation()
    except StorefrontError as exc:
        context["error"] = exc
        return None


def _order(context):
    return lifecycle.get(context["order_id"])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered wizard")
def _(wizard_id):
    assert wizard_id


@given(parsers.cfparse('a wand "{wand_id}" in the inventory'))
def _(register_wand, wand_id):
    register_wand(wand_id)


@given(parsers.cfparse('wands "{wand_ids}" in the inventory'))
def _(register_wand, wand_ids):
    for wand_id in wand_ids.split(","):
        register_wand(wand_id.strip())


@given(parsers.cfparse('wand "{wand_id}" is deactivated'))
def _(wand_id):
    deactivate_wand(wand_id)


@given(parsers.cfparse('the wizard ordered wand "{wand_id}"'))
def _(context, place_order, wand_id):
    context["order_id"] = place_order(wand_id)


@given("the order was paid")
def _(context):
    lifecycle.pay(context["order_id"])


@given("the order was dispatched")
def _(context):
    lifecycle.dispatch(context["order_id"])


@given("the delivery timer fired")
def _(context, scheduler):
    scheduler.fire(context["order_id"])


@given("the order was cancelled")
def _(context):
    lifecycle.cancel(context["order_id"])


@given("the order was completed")
def _(context):
    lifecycle.complete(context["order_id"])


@given(parsers.cfparse('the review classifier answers "{verdict}"'))
def _(classifier, verdict):
    classifier.configure(verdict=verdict)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse("the wizard scores {score:d}"))
def _(context, wizard_id, score):
    answer_id = _attempt(
        context,
        lambda: current_domain.process(RecordAnswer(wizard_id=wizard_id, score=score), asynchronous=False),
    )
    if answer_id:
        context["answers"].append(answer_id)


@when("the order is paid")
def _(context):
    _attempt(context, lambda: lifecycle.pay(context["order_id"]))


@when("the order is dispatched")
def _(context):
    _attempt(context, lambda: lifecycle.dispatch(context["order_id"]))


@when("the order is cancelled")
def _(context):
    _attempt(context, lambda: lifecycle.cancel(context["order_id"]))


@when("the order is completed")
def _(context):
    _attempt(context, lambda: lifecycle.complete(context["order_id"]))


@when("the order is refunded")
def _(context):
    _attempt(context, lambda: lifecycle.refund(context["order_id"]))


@when("the delivery timer fires")
def _(context, scheduler):
    scheduler.fire(context["order_id"])


@when(parsers.cfparse('the wizard reviews the order with "{review}"'))
def _(context, review):
    _attempt(context, lambda: lifecycle.submit_review(context["order_id"], review))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(context, status):
    assert _order(context).status == status


@then(parsers.cfparse('wand "{wand_id}" is "{status}"'))
def _(wand_id, status):
    assert current_domain.repository_for(Wand).get(wand_id).status == status


@then(parsers.cfparse('wand "{wand_id}" can be allocated again'))
def _(wand_id):
    assert allocate(0).id == wand_id


@then("the order has a tracking id")
def _(context):
    assert re.fullmatch(r"TRK-[A-Z0-9]{8}", _order(context).tracking_id)


@then("the order is flagged completed")
def _(context):
    assert _order(context).completed is True


@then("the order is not flagged completed")
def _(context):
    assert _order(context).completed is False


@then("the order has no review")
def _(context):
    assert _order(context).review is None


@then(parsers.cfparse('the order review is "{review}"'))
def _(context, review):
    assert _order(context).review == review


@then(parsers.cfparse('the operation fails with "{kind}"'))
def _(context, kind):
    assert context["error"] is not None
    assert context["error"].kind == kind


@then(parsers.cfparse('the allocated wand is "{wand_id}"'))
def _(context, wand_id):
    assert context["error"] is None
    answer = current_domain.repository_for(Answer).get(context["answers"][-1])
    assert answer.wand_id == wand_id


@then(parsers.cfparse('every answer was allocated "{wand_id}"'))
def _(context, wand_id):
    answers = [current_domain.repository_for(Answer).get(answer_id) for answer_id in context["answers"]]
    assert len(answers) > 1
    assert {answer.wand_id for answer in answers} == {wand_id}
