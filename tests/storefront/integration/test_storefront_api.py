"""Integration tests for the Storefront API endpoints via TestClient."""

import re

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from protean import current_domain

from storefront.api.errors import register_exception_handlers
from storefront.api.routes import answer_router, order_router, wand_router, wizard_router
from storefront.answer.answer import Answer
from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus
from storefront.wand.wand import Wand, WandStatus


@pytest.fixture()
def client():
    app = FastAPI()

    @app.middleware("http")
    async def domain_context(request: Request, call_next):
        with storefront.domain_context():
            return await call_next(request)

    app.include_router(wizard_router)
    app.include_router(wand_router)
    app.include_router(answer_router)
    app.include_router(order_router)
    register_exception_handlers(app)
    return TestClient(app)


def _register_wizard(client, email="harry@hogwarts.example"):
    response = client.post(
        "/wizards",
        json={"name": "Harry", "last_name": "Potter", "email": email, "address": "4 Privet Drive"},
    )
    assert response.status_code == 201
    return response.json()["wizard_id"]


def _register_wand(client, name="Holly", total_price=7.0):
    response = client.post(
        "/wands",
        json={
            "name": name,
            "length": 11.0,
            "description": "Holly and phoenix feather",
            "image": "https://images.example.com/wands/holly.png",
            "wood": "holly",
            "core": "phoenix feather",
            "total_price": total_price,
        },
    )
    assert response.status_code == 201
    return response.json()["wand_id"]


def _create_order(client, wizard_id, wand_id, payment_reference="pi_api_001"):
    response = client.post(
        "/orders",
        json={
            "wizard_id": wizard_id,
            "wand_id": wand_id,
            "payment_reference": payment_reference,
            "payment_provider": "stripe",
            "shipping_address": "4 Privet Drive, Little Whinging",
        },
    )
    assert response.status_code == 201
    return response.json()["order_id"]


class TestWizardEndpoints:
    def test_register_and_get(self, client):
        wizard_id = _register_wizard(client)
        response = client.get(f"/wizards/{wizard_id}")
        assert response.status_code == 200
        assert response.json()["email"] == "harry@hogwarts.example"
        assert response.json()["last_name"] == "Potter"

    def test_delete_cascades(self, client):
        wizard_id = _register_wizard(client)
        wand_id = _register_wand(client)
        assert client.post("/answers", json={"wizard_id": wizard_id, "score": 3}).status_code == 201
        _create_order(client, wizard_id, wand_id)

        response = client.delete(f"/wizards/{wizard_id}")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "orders": 1, "answers": 1}
        assert client.get(f"/wizards/{wizard_id}").status_code == 404
        assert current_domain.repository_for(Wand).get(wand_id).order_id is None


class TestWandEndpoints:
    def test_register_and_list(self, client):
        first = _register_wand(client, "Alder")
        second = _register_wand(client, "Birch")

        response = client.get("/wands")
        assert response.status_code == 200
        assert {w["wand_id"] for w in response.json()} == {first, second}

        response = client.get(f"/wands/{first}")
        assert response.json()["name"] == "alder"
        assert response.json()["status"] == WandStatus.AVAILABLE.value

    def test_deactivate_and_filter(self, client):
        kept = _register_wand(client, "Alder")
        retired = _register_wand(client, "Birch")

        response = client.patch(f"/wands/{retired}/deactivate")
        assert response.status_code == 200

        listed = client.get("/wands", params={"status": "Available"}).json()
        assert [w["wand_id"] for w in listed] == [kept]


class TestAnswerEndpoints:
    def test_record_answer_allocates_wand(self, client):
        wizard_id = _register_wizard(client)
        wand_ids = sorted(_register_wand(client, name) for name in ("Alder", "Birch", "Cedar"))

        response = client.post("/answers", json={"wizard_id": wizard_id, "score": 7})
        assert response.status_code == 201
        body = response.json()
        assert body["wand_id"] == wand_ids[7 % 3]
        assert body["score"] == 7

        stored = current_domain.repository_for(Answer).get(body["answer_id"])
        assert stored.wand_id == wand_ids[1]
        assert client.get(f"/answers/{body['answer_id']}").json() == body


class TestOrderEndpoints:
    def test_full_lifecycle(self, client):
        wizard_id = _register_wizard(client)
        wand_id = _register_wand(client)
        order_id = _create_order(client, wizard_id, wand_id)

        response = client.get(f"/orders/{order_id}")
        assert response.status_code == 200
        assert response.json()["status"] == OrderStatus.PENDING.value
        assert response.json()["completed"] is False

        assert client.patch(f"/orders/{order_id}/pay").status_code == 200
        assert current_domain.repository_for(Wand).get(wand_id).status == WandStatus.SOLD.value

        response = client.patch(f"/orders/{order_id}/dispatch")
        assert response.status_code == 200
        assert re.fullmatch(r"TRK-[A-Z0-9]{8}", response.json()["tracking_id"])

        assert client.patch(f"/orders/{order_id}/cancel").status_code == 200
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert current_domain.repository_for(Wand).get(wand_id).status == WandStatus.AVAILABLE.value

        assert client.patch(f"/orders/{order_id}/refund").status_code == 200
        assert client.get(f"/orders/{order_id}").json()["status"] == OrderStatus.REFUNDED.value

    def test_complete_and_review(self, client, scheduler):
        wizard_id = _register_wizard(client)
        order_id = _create_order(client, wizard_id, _register_wand(client))
        client.patch(f"/orders/{order_id}/pay")
        client.patch(f"/orders/{order_id}/dispatch")
        scheduler.fire(order_id)

        assert client.patch(f"/orders/{order_id}/complete").status_code == 200

        response = client.patch(f"/orders/{order_id}/review", json={"review": "It chose me"})
        assert response.status_code == 200
        assert response.json()["review"] == "It chose me"
        assert response.json()["completed"] is True

    def test_list_and_lookup(self, client):
        wizard_id = _register_wizard(client)
        first = _create_order(client, wizard_id, _register_wand(client, "Alder"), "pi_one")
        second = _create_order(client, wizard_id, _register_wand(client, "Birch"), "pi_two")
        client.patch(f"/orders/{second}/pay")

        listed = client.get("/orders", params={"wizard_id": wizard_id}).json()
        assert {o["order_id"] for o in listed} == {first, second}

        paid = client.get("/orders", params={"status": "Paid"}).json()
        assert [o["order_id"] for o in paid] == [second]

        response = client.get("/orders/payment/pi_one")
        assert response.status_code == 200
        assert response.json()["order_id"] == first

    def test_update_and_delete(self, client):
        wizard_id = _register_wizard(client)
        wand_id = _register_wand(client)
        order_id = _create_order(client, wizard_id, wand_id)

        response = client.put(f"/orders/{order_id}", json={"shipping_address": "The Burrow"})
        assert response.status_code == 200
        assert response.json()["shipping_address"] == "The Burrow"

        assert client.delete(f"/orders/{order_id}").status_code == 200
        assert client.get(f"/orders/{order_id}").status_code == 404
        assert current_domain.repository_for(Wand).get(wand_id).order_id is None
