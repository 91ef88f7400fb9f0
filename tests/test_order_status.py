import pytest

from conftest import order_payload
from chapa_quente.models import OrderStatus
from chapa_quente.services.order_status import is_active, next_status


@pytest.mark.parametrize("status", ["received", "preparing", "ready", "delivered", "cancelled"])
def test_admin_can_set_any_valid_status(client, admin_headers, make_order, status):
    order_id = make_order()
    r = client.patch(f"/api/orders/{order_id}/status", json={"status": status}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["id"] == order_id
    assert r.json()["status"] == status
    assert client.get(f"/api/orders/{order_id}").json()["status"] == status


@pytest.mark.parametrize("status", ["pronto", "READY", "", "shipped"])
def test_unknown_status_is_rejected(client, admin_headers, make_order, status):
    order_id = make_order()
    r = client.patch(f"/api/orders/{order_id}/status", json={"status": status}, headers=admin_headers)
    assert r.status_code == 400
    assert client.get(f"/api/orders/{order_id}").json()["status"] == "received"


def test_missing_status_is_rejected(client, admin_headers, make_order):
    order_id = make_order()
    r = client.patch(f"/api/orders/{order_id}/status", json={}, headers=admin_headers)
    assert r.status_code == 400


def test_sequence_is_not_enforced(client, admin_headers, make_order):
    order_id = make_order(status="delivered")
    r = client.patch(f"/api/orders/{order_id}/status", json={"status": "received"}, headers=admin_headers)
    assert r.status_code == 200


def test_status_change_requires_admin(client, customer_headers, make_order):
    order_id = make_order()
    assert client.patch(f"/api/orders/{order_id}/status", json={"status": "ready"}).status_code == 401
    r = client.patch(f"/api/orders/{order_id}/status", json={"status": "ready"}, headers=customer_headers)
    assert r.status_code == 403


def test_unknown_order_status_update_is_404(client, admin_headers):
    r = client.patch("/api/orders/ZZZZZZZ/status", json={"status": "ready"}, headers=admin_headers)
    assert r.status_code == 404


def test_cancelling_leaves_stock_and_loyalty_alone(
    client, admin_headers, customer, customer_headers, make_product, stock_of, points_of
):
    pid = make_product(quantity=10)
    items = [{"product_id": pid, "product_name": "Clássico Imperial", "quantity": 2, "unit_price": 28.9}]
    order = client.post("/api/orders", json=order_payload(items=items, total=57.8), headers=customer_headers).json()

    client.patch(f"/api/orders/{order['id']}/status", json={"status": "cancelled"}, headers=admin_headers)
    assert stock_of(pid) == 8
    assert points_of(customer.id) == 1


def test_status_change_frees_a_queue_slot(client, admin_headers):
    first = client.post("/api/orders", json=order_payload()).json()
    client.post("/api/orders", json=order_payload())
    client.patch(f"/api/orders/{first['id']}/status", json={"status": "ready"}, headers=admin_headers)
    third = client.post("/api/orders", json=order_payload()).json()
    assert third["queue_position"] == 2


def test_next_status_walks_the_forward_sequence():
    assert next_status("received") is OrderStatus.PREPARING
    assert next_status(OrderStatus.PREPARING) is OrderStatus.READY
    assert next_status("ready") is OrderStatus.DELIVERED
    assert next_status("delivered") is None
    assert next_status("cancelled") is None


def test_active_statuses():
    assert is_active("received")
    assert is_active(OrderStatus.PREPARING)
    assert not is_active("ready")
    assert not is_active("cancelled")
