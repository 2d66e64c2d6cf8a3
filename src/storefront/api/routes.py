"""FastAPI routes for the Storefront — wizards, wands, quiz answers and orders."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from storefront.answer.answer import Answer
from storefront.answer.recording import RecordAnswer
from storefront.api.schemas import (
    AnswerResponse,
    CreateOrderRequest,
    DispatchResponse,
    OrderIdResponse,
    OrderResponse,
    RecordAnswerRequest,
    RegisterWandRequest,
    RegisterWizardRequest,
    ReviewOrderRequest,
    StatusResponse,
    UpdateOrderRequest,
    WandIdResponse,
    WandResponse,
    WizardIdResponse,
    WizardRemovalResponse,
    WizardResponse,
)
from storefront.exceptions import NotFound
from storefront.order import lifecycle
from storefront.utils.lookup import find_by_id
from storefront.wand.management import RegisterWand, deactivate_wand
from storefront.wand.wand import Wand
from storefront.wizard.registration import RegisterWizard
from storefront.wizard.removal import remove_wizard
from storefront.wizard.wizard import Wizard


def _wizard_response(wizard) -> WizardResponse:
    return WizardResponse(
        wizard_id=str(wizard.id),
        name=wizard.name,
        last_name=wizard.last_name,
        email=wizard.email,
        address=wizard.address,
        school_id=wizard.school_id,
    )


def _wand_response(wand) -> WandResponse:
    return WandResponse(
        wand_id=str(wand.id),
        name=wand.name,
        length=wand.length,
        description=wand.description,
        image=wand.image,
        wood=wand.wood,
        core=wand.core,
        profit_margin=wand.profit_margin,
        total_price=wand.total_price,
        status=wand.status,
    )


def _answer_response(answer) -> AnswerResponse:
    return AnswerResponse(
        answer_id=str(answer.id),
        wizard_id=str(answer.wizard_id),
        quiz_id=str(answer.quiz_id) if answer.quiz_id else None,
        wand_id=str(answer.wand_id),
        score=answer.score,
    )


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        wizard_id=str(order.wizard_id),
        wand_id=str(order.wand_id),
        payment_reference=order.payment_reference,
        payment_provider=order.payment_provider,
        shipping_address=order.shipping_address,
        tracking_id=order.tracking_id,
        status=order.status,
        completed=bool(order.completed),
        review=order.review,
        created_at=order.created_at,
    )


# ---------------------------------------------------------------------------
# Wizard Router
# ---------------------------------------------------------------------------
wizard_router = APIRouter(prefix="/wizards", tags=["wizards"])


@wizard_router.post("", status_code=201, response_model=WizardIdResponse)
async def register_wizard(body: RegisterWizardRequest) -> WizardIdResponse:
    command = RegisterWizard(
        name=body.name,
        last_name=body.last_name,
        email=body.email,
        address=body.address,
        school_id=body.school_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return WizardIdResponse(wizard_id=result)


@wizard_router.get("/{wizard_id}", response_model=WizardResponse)
async def get_wizard(wizard_id: str) -> WizardResponse:
    return _wizard_response(find_by_id(Wizard, wizard_id))


@wizard_router.delete("/{wizard_id}", response_model=WizardRemovalResponse)
async def delete_wizard(wizard_id: str) -> WizardRemovalResponse:
    """Remove the wizard together with their orders and quiz answers."""
    summary = remove_wizard(wizard_id)
    return WizardRemovalResponse(orders=summary["orders"], answers=summary["answers"])


# ---------------------------------------------------------------------------
# Wand Router
# ---------------------------------------------------------------------------
wand_router = APIRouter(prefix="/wands", tags=["wands"])


@wand_router.post("", status_code=201, response_model=WandIdResponse)
async def register_wand(body: RegisterWandRequest) -> WandIdResponse:
    command = RegisterWand(
        name=body.name,
        length=body.length,
        description=body.description,
        image=body.image,
        wood=body.wood,
        core=body.core,
        profit_margin=body.profit_margin,
        total_price=body.total_price,
    )
    result = current_domain.process(command, asynchronous=False)
    return WandIdResponse(wand_id=result)


@wand_router.get("", response_model=list[WandResponse])
async def list_wands(status: str | None = None) -> list[WandResponse]:
    repo = current_domain.repository_for(Wand)
    wands = repo.find_by_status(status) if status else repo.find_all()
    return [_wand_response(wand) for wand in wands]


@wand_router.get("/{wand_id}", response_model=WandResponse)
async def get_wand(wand_id: str) -> WandResponse:
    return _wand_response(find_by_id(Wand, wand_id))


@wand_router.patch("/{wand_id}/deactivate", response_model=StatusResponse)
async def deactivate(wand_id: str) -> StatusResponse:
    deactivate_wand(wand_id)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Answer Router
# ---------------------------------------------------------------------------
answer_router = APIRouter(prefix="/answers", tags=["answers"])


@answer_router.post("", status_code=201, response_model=AnswerResponse)
async def record_answer(body: RecordAnswerRequest) -> AnswerResponse:
    """Store a quiz result and return the wand allocated for its score."""
    command = RecordAnswer(wizard_id=body.wizard_id, quiz_id=body.quiz_id, score=body.score)
    answer_id = current_domain.process(command, asynchronous=False)
    return _answer_response(find_by_id(Answer, answer_id))


@answer_router.get("/{answer_id}", response_model=AnswerResponse)
async def get_answer(answer_id: str) -> AnswerResponse:
    return _answer_response(find_by_id(Answer, answer_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def create_order(body: CreateOrderRequest) -> OrderIdResponse:
    order_id = lifecycle.create_order(
        wizard_id=body.wizard_id,
        wand_id=body.wand_id,
        payment_reference=body.payment_reference,
        payment_provider=body.payment_provider,
        shipping_address=body.shipping_address,
    )
    return OrderIdResponse(order_id=order_id)


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(
    status: str | None = None,
    wizard_id: str | None = None,
    wand_id: str | None = None,
) -> list[OrderResponse]:
    orders = lifecycle.list_orders(status=status, wizard_id=wizard_id, wand_id=wand_id)
    return [_order_response(order) for order in orders]


@order_router.get("/payment/{payment_reference}", response_model=OrderResponse)
async def get_order_by_payment_reference(payment_reference: str) -> OrderResponse:
    order = lifecycle.find_by_payment_reference(payment_reference)
    if order is None:
        raise NotFound("Order", payment_reference)
    return _order_response(order)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _order_response(lifecycle.get(order_id))


@order_router.put("/{order_id}", response_model=OrderResponse)
async def update_order(order_id: str, body: UpdateOrderRequest) -> OrderResponse:
    lifecycle.update_details(
        order_id,
        shipping_address=body.shipping_address,
        payment_reference=body.payment_reference,
        payment_provider=body.payment_provider,
    )
    return _order_response(lifecycle.get(order_id))


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(order_id: str) -> StatusResponse:
    lifecycle.remove(order_id)
    return StatusResponse()


@order_router.patch("/{order_id}/pay", response_model=StatusResponse)
async def pay_order(order_id: str) -> StatusResponse:
    lifecycle.pay(order_id)
    return StatusResponse()


@order_router.patch("/{order_id}/dispatch", response_model=DispatchResponse)
async def dispatch_order(order_id: str) -> DispatchResponse:
    tracking_id = lifecycle.dispatch(order_id)
    return DispatchResponse(tracking_id=tracking_id)


@order_router.patch("/{order_id}/complete", response_model=StatusResponse)
async def complete_order(order_id: str) -> StatusResponse:
    lifecycle.complete(order_id)
    return StatusResponse()


@order_router.patch("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str) -> StatusResponse:
    lifecycle.cancel(order_id)
    return StatusResponse()


@order_router.patch("/{order_id}/refund", response_model=StatusResponse)
async def refund_order(order_id: str) -> StatusResponse:
    lifecycle.refund(order_id)
    return StatusResponse()


@order_router.patch("/{order_id}/review", response_model=OrderResponse)
async def review_order(order_id: str, body: ReviewOrderRequest) -> OrderResponse:
    lifecycle.submit_review(order_id, body.review)
    return _order_response(lifecycle.get(order_id))
