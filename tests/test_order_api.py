import re

from api.main import create_app
from fastapi.testclient import TestClient
from services.order_service import OrderService

ORDER = {"name": "Ana", "email": "a@x.com", "max": "10", "time": "1h"}


def test_create_order(client, order_service):
    r = client.post("/api/createOrder", json=ORDER)

    assert r.status_code == 200
    body = r.json()
    assert re.match(r"^[A-Z0-9]{5}$", body["orderId"])
    assert {k: body[k] for k in ORDER} == ORDER

    order = order_service.lookup(body["orderId"])
    assert order.model_dump(by_alias=True) == body


def test_lookup_endpoint(client):
    order_id = client.post("/api/createOrder", json=ORDER).json()["orderId"]

    r = client.get(f"/api/orders/{order_id}")

    assert r.status_code == 200
    assert r.json() == {"orderId": order_id, **ORDER}


def test_lookup_endpoint_unknown_id(client):
    r = client.get("/api/orders/NOPE1")

    assert r.status_code == 404
    assert r.json()["detail"] == "Order not found"


def test_get_on_create_order_is_method_not_allowed(client, order_service):
    r = client.get("/api/createOrder")

    assert r.status_code == 405
    assert order_service.order_count() == 0


def test_malformed_json_is_bad_request(client, order_service):
    r = client.post(
        "/api/createOrder",
        content=b'{"name": "Ana",',
        headers={"Content-Type": "application/json"},
    )

    assert r.status_code == 400
    assert "Invalid JSON" in r.json()["detail"]
    assert order_service.order_count() == 0


def test_wrong_field_type_is_bad_request(client, order_service):
    r = client.post("/api/createOrder", json={**ORDER, "max": 10})

    assert r.status_code == 400
    assert "max" in r.json()["detail"]
    assert order_service.order_count() == 0


def test_missing_fields_default_to_empty(client):
    r = client.post("/api/createOrder", json={"name": "Ana", "extra": "ignored"})

    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Ana"
    assert body["email"] == "" and body["max"] == "" and body["time"] == ""
    assert "extra" not in body


def test_id_exhaustion_is_server_error(order_repo, scripted_rng):
    service = OrderService(order_repo, max_retries=2, rng=scripted_rng("QQQQQ" * 3))
    with TestClient(create_app(order_service=service)) as c:
        assert c.post("/api/createOrder", json=ORDER).status_code == 200

        r = c.post("/api/createOrder", json=ORDER)

    assert r.status_code == 500
    assert service.order_count() == 1


def test_health_reports_order_count(client):
    client.post("/api/createOrder", json=ORDER)

    r = client.get("/health")

    assert r.status_code == 200
    assert r.json() == {"status": "ok", "orders": 1}


def test_json_body_accepted_without_json_content_type(client, order_service):
    r = client.post(
        "/api/createOrder",
        content=b'{"name": "Ana", "email": "a@x.com", "max": "10", "time": "1h"}',
        headers={"Content-Type": "text/plain;charset=UTF-8"},
    )

    assert r.status_code == 200
    body = r.json()
    assert {k: body[k] for k in ORDER} == ORDER
    assert order_service.lookup(body["orderId"]).name == "Ana"


def test_empty_body_is_bad_request(client, order_service):
    r = client.post("/api/createOrder", content=b"", headers={"Content-Type": "application/json"})

    assert r.status_code == 400
    assert order_service.order_count() == 0


def test_non_object_body_is_bad_request(client, order_service):
    r = client.post("/api/createOrder", json=["Ana"])

    assert r.status_code == 400
    assert order_service.order_count() == 0


def test_null_fields_become_empty(client):
    r = client.post("/api/createOrder", json={"name": None, "email": "a@x.com", "max": None, "time": "1h"})

    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "" and body["max"] == ""
    assert body["email"] == "a@x.com" and body["time"] == "1h"
