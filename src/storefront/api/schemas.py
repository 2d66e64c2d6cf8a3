"""Pydantic request/response schemas for the Storefront API.

These are external contracts, kept separate from the internal Protean
commands and aggregates.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

PaymentProviderName = Literal["stripe", "paypal", "wire_transfer", "credit_card", "debit_card"]


# ---------------------------------------------------------------------------
# Wizards
# ---------------------------------------------------------------------------
class RegisterWizardRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    email: str = Field(min_length=3, max_length=254)
    address: str | None = Field(default=None, max_length=500)
    school_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Harry",
                    "last_name": "Potter",
                    "email": "harry@hogwarts.example",
                    "address": "4 Privet Drive, Little Whinging",
                }
            ]
        }
    }


class WizardResponse(BaseModel):
    wizard_id: str
    name: str
    last_name: str | None = None
    email: str
    address: str | None = None
    school_id: str | None = None


class WizardIdResponse(BaseModel):
    wizard_id: str


class WizardRemovalResponse(BaseModel):
    status: str = "ok"
    orders: int
    answers: int


# ---------------------------------------------------------------------------
# Wands
# ---------------------------------------------------------------------------
class RegisterWandRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    length: float = Field(gt=0)
    description: str = Field(min_length=1)
    image: str = Field(min_length=1, max_length=500)
    wood: str | None = None
    core: str | None = None
    profit_margin: float = Field(default=0.0, ge=0)
    total_price: float = Field(ge=0)


class WandResponse(BaseModel):
    wand_id: str
    name: str
    length: float | None = None
    description: str | None = None
    image: str | None = None
    wood: str | None = None
    core: str | None = None
    profit_margin: float | None = None
    total_price: float | None = None
    status: str


class WandIdResponse(BaseModel):
    wand_id: str


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------
class RecordAnswerRequest(BaseModel):
    wizard_id: str
    quiz_id: str | None = None
    score: int = Field(ge=1)


class AnswerResponse(BaseModel):
    answer_id: str
    wizard_id: str
    quiz_id: str | None = None
    wand_id: str
    score: int


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    wizard_id: str
    wand_id: str
    payment_reference: str = Field(min_length=1, max_length=255)
    payment_provider: PaymentProviderName
    shipping_address: str = Field(min_length=1, max_length=500)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "wizard_id": "wiz-001",
                    "wand_id": "wand-001",
                    "payment_reference": "pi_3NqXYZ",
                    "payment_provider": "stripe",
                    "shipping_address": "4 Privet Drive, Little Whinging",
                }
            ]
        }
    }


class UpdateOrderRequest(BaseModel):
    shipping_address: str | None = Field(default=None, min_length=1, max_length=500)
    payment_reference: str | None = Field(default=None, min_length=1, max_length=255)
    payment_provider: PaymentProviderName | None = None


class ReviewOrderRequest(BaseModel):
    review: str = Field(min_length=1)


class OrderResponse(BaseModel):
    order_id: str
    wizard_id: str
    wand_id: str
    payment_reference: str
    payment_provider: str
    shipping_address: str
    tracking_id: str | None = None
    status: str
    completed: bool
    review: str | None = None
    created_at: datetime | None = None


class OrderIdResponse(BaseModel):
    order_id: str


class DispatchResponse(BaseModel):
    status: str = "ok"
    tracking_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
