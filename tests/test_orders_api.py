"""Integration tests for the order and payment endpoints via TestClient."""

from datetime import datetime, timedelta

from order_service.models import Order, OrderStatus


def _create_order(client, customer, items=None):
    """Helper: POST /api/orders and return the response body."""
    response = client.post(
        "/api/orders",
        json={"items": items if items is not None else [{"id": 1, "quantity": 2}], "customer": customer},
    )
    assert response.status_code == 200
    return response.json()


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_products_are_listed(client):
    response = client.get("/api/products")
    assert response.status_code == 200
    products = response.json()
    assert len(products) == 9
    assert products[0] == {"id": 1, "name": "Mechanical RGB Keyboard", "unit_price": 10499}


class TestCreateOrder:
    def test_total_is_computed_from_catalog(self, client, customer):
        body = _create_order(client, customer)
        assert body["total"] == 20998
        assert body["orderId"].startswith("EK-")

    def test_unknown_products_contribute_nothing(self, client, customer):
        body = _create_order(client, customer, items=[{"id": 3, "quantity": 1}, {"id": 999, "quantity": 4}])
        assert body["total"] == 6499

    def test_client_prices_are_ignored(self, client, customer):
        body = _create_order(client, customer, items=[{"id": 9, "quantity": 3, "price": 1000000}])
        assert body["total"] == 3

    def test_empty_cart_is_accepted(self, client, customer):
        body = _create_order(client, customer, items=[])
        assert body["total"] == 0

    def test_order_is_persisted_as_pending(self, client, store, customer):
        body = _create_order(client, customer)
        order = store.get_order(body["orderId"])
        assert order.status == OrderStatus.PENDING.value
        assert order.customer_name == "Asha Verma"
        assert order.email == "asha@example.com"
        assert order.address == "12 MG Road, Bengaluru"
        assert order.total == 20998
        assert order.transaction_id is None

    def test_order_ids_are_unique(self, client, customer):
        ids = {_create_order(client, customer)["orderId"] for _ in range(25)}
        assert len(ids) == 25

    def test_missing_customer_is_rejected(self, client):
        response = client.post("/api/orders", json={"items": [{"id": 1, "quantity": 1}]})
        assert response.status_code == 422


class TestReadOrders:
    def test_single_order(self, client, customer):
        order_id = _create_order(client, customer)["orderId"]
        response = client.get(f"/api/orders/{order_id}")
        assert response.status_code == 200
        assert response.json()["id"] == order_id
        assert response.json()["status"] == "pending"

    def test_unknown_order(self, client):
        response = client.get("/api/orders/EK-does-not-exist")
        assert response.status_code == 404
        assert response.json()["detail"] == "Order not found"

    def test_admin_orders_newest_first(self, client, store):
        now = datetime(2026, 1, 15, 12, 0, 0)
        for offset, order_id in enumerate(["EK-1", "EK-2", "EK-3"]):
            store.create_order(Order(
                id=order_id,
                customer_name="Test Customer",
                email="test@example.com",
                address="Somewhere",
                total=100,
                status=OrderStatus.PENDING.value,
                created_at=now + timedelta(minutes=offset),
            ))

        response = client.get("/api/admin/orders")
        assert response.status_code == 200
        assert [order["id"] for order in response.json()] == ["EK-3", "EK-2", "EK-1"]

    def test_admin_orders_via_api_are_newest_first(self, client, customer):
        order_ids = [_create_order(client, customer)["orderId"] for _ in range(3)]
        listed = [order["id"] for order in client.get("/api/admin/orders").json()]
        assert listed == list(reversed(order_ids))

    def test_admin_orders_with_equal_timestamps(self, client, store):
        created_at = datetime(2026, 1, 15, 12, 0, 0)
        for order_id in ["EK-a", "EK-b", "EK-c"]:
            store.create_order(Order(
                id=order_id,
                customer_name="Test Customer",
                email="test@example.com",
                address="Somewhere",
                total=100,
                status=OrderStatus.PENDING.value,
                created_at=created_at,
            ))

        response = client.get("/api/admin/orders")
        assert [order["id"] for order in response.json()] == ["EK-c", "EK-b", "EK-a"]


class TestVerifyPayment:
    def test_accepted_transaction_marks_order_paid(self, client, store, notifier, customer):
        order_id = _create_order(client, customer)["orderId"]

        response = client.post("/api/verify-payment", json={"orderId": order_id, "transactionId": "202600000001"})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        order = store.get_order(order_id)
        assert order.status == OrderStatus.PAID.value
        assert order.transaction_id == "202600000001"
        assert len(notifier.sent_messages) == 1
        assert notifier.sent_messages[0]["Subject"] == f"Order Confirmed - {order_id}"
        assert notifier.sent_messages[0]["To"] == "asha@example.com"

    def test_rejected_transaction_keeps_order_pending(self, client, store, notifier, customer):
        order_id = _create_order(client, customer)["orderId"]

        response = client.post("/api/verify-payment", json={"orderId": order_id, "transactionId": "202500000001"})

        assert response.status_code == 400
        assert "2026" in response.json()["detail"]
        order = store.get_order(order_id)
        assert order.status == OrderStatus.PENDING.value
        assert order.transaction_id is None
        assert notifier.sent_messages[0]["Subject"] == f"Order Payment Failed - {order_id}"

    def test_rejected_order_can_be_retried(self, client, store, customer):
        order_id = _create_order(client, customer)["orderId"]
        client.post("/api/verify-payment", json={"orderId": order_id, "transactionId": "111111111111"})

        response = client.post("/api/verify-payment", json={"orderId": order_id, "transactionId": "202612345678"})

        assert response.status_code == 200
        assert store.get_order(order_id).status == OrderStatus.PAID.value

    def test_malformed_transaction_id_for_existing_order(self, client, store, notifier, customer):
        order_id = _create_order(client, customer)["orderId"]
        for transaction_id in ["2026", "2026000000011", "2026abcdefgh", "", "202600000001\n"]:
            response = client.post("/api/verify-payment", json={"orderId": order_id, "transactionId": transaction_id})
            assert response.status_code == 400
            assert response.json()["detail"] == "Invalid Transaction ID. Must be 12 digits."
        assert store.get_order(order_id).status == OrderStatus.PENDING.value
        assert notifier.sent_messages == []

    def test_malformed_transaction_id_for_missing_order(self, client):
        response = client.post("/api/verify-payment", json={"orderId": "EK-0", "transactionId": "12"})
        assert response.status_code == 400

    def test_non_string_transaction_id_is_a_bad_request(self, client, store, customer):
        order_id = _create_order(client, customer)["orderId"]
        bodies = [
            {"orderId": order_id, "transactionId": None},
            {"orderId": order_id},
            {"orderId": order_id, "transactionId": 202600000001},
            {"orderId": "EK-0", "transactionId": None},
            {"orderId": "EK-0"},
            {"orderId": "EK-0", "transactionId": 202600000001},
        ]
        for body in bodies:
            response = client.post("/api/verify-payment", json=body)
            assert response.status_code == 400
            assert response.json()["detail"] == "Invalid Transaction ID. Must be 12 digits."
        assert store.get_order(order_id).status == OrderStatus.PENDING.value

    def test_missing_order_with_well_formed_id(self, client):
        for transaction_id in ["202600000001", "199900000001"]:
            response = client.post("/api/verify-payment", json={"orderId": "EK-0", "transactionId": transaction_id})
            assert response.status_code == 404

    def test_paid_order_is_not_paid_twice(self, client, store, customer):
        order_id = _create_order(client, customer)["orderId"]
        client.post("/api/verify-payment", json={"orderId": order_id, "transactionId": "202600000001"})

        response = client.post("/api/verify-payment", json={"orderId": order_id, "transactionId": "202600000002"})

        assert response.status_code == 409
        assert store.get_order(order_id).transaction_id == "202600000001"

    def test_email_failure_does_not_fail_verification(self, client, store, notifier, customer):
        notifier.should_succeed = False
        order_id = _create_order(client, customer)["orderId"]

        response = client.post("/api/verify-payment", json={"orderId": order_id, "transactionId": "202600000001"})

        assert response.status_code == 200
        assert store.get_order(order_id).status == OrderStatus.PAID.value
