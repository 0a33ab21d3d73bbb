"""API endpoint tests over the fake-backed container."""

from frontdesk.services.receipt_service import RECEIPTS_TABLE

API = "/api/v1"
MUSA = "musa-yaradua"
ADELEKE = "adeleke-adedoyin"


def receipt_payload(**overrides):
    payload = {
        "customerName": "Ada Obi",
        "roomNumber": "5",
        "location": MUSA,
        "numberOfDays": 2,
        "dailyRate": "25000",
        "receptionistName": "Front Desk",
        "date": "2026-03-01",
    }
    payload.update(overrides)
    return payload


class TestHealth:

    def test_health_reports_sync_state(self, client):
        """Test health includes connectivity and the queued count."""
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["online"] is True
        assert body["queued"] == 0


class TestLocationEndpoints:

    def test_list_locations(self, client):
        response = client.get(f"{API}/locations/")
        assert response.status_code == 200
        assert [loc["id"] for loc in response.json()["items"]] == [MUSA, ADELEKE]

    def test_location_detail(self, client):
        """Test a branch lists its room numbers."""
        response = client.get(f"{API}/locations/{MUSA}")
        assert response.status_code == 200
        assert "11/13" in response.json()["rooms"]

    def test_unknown_location(self, client):
        assert client.get(f"{API}/locations/ikoyi").status_code == 404


class TestRoomEndpoints:

    def test_rooms_seeded_on_startup(self, client):
        """Test both branches have rooms after startup."""
        assert client.get(f"{API}/rooms/{MUSA}").json()["total"] == 23
        assert client.get(f"{API}/rooms/{ADELEKE}").json()["total"] == 30

    def test_check_in_and_out_combined_room(self, client):
        """Test rooms with a slash in their number are addressed by query."""
        response = client.post(
            f"{API}/rooms/{MUSA}/check-in",
            params={"number": "11/13"},
            json={"guest_name": "Chidi Okeke", "check_in": "2026-03-01"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["synced"] is True
        assert body["room"]["status"] == "occupied"
        assert body["room"]["guestName"] == "Chidi Okeke"

        response = client.get(f"{API}/rooms/{MUSA}", params={"status": "occupied"})
        assert [room["number"] for room in response.json()["items"]] == ["11/13"]

        response = client.post(f"{API}/rooms/{MUSA}/check-out", params={"number": "11/13"}, json={})
        assert response.json()["room"]["status"] == "available"

    def test_manager_room_transition_rejected(self, client):
        """Test a locked room returns 422 with the offending field."""
        response = client.post(f"{API}/rooms/{ADELEKE}/maintenance", params={"number": "2"})
        assert response.status_code == 422
        assert response.json()["field"] == "status"

    def test_unknown_room(self, client):
        response = client.get(f"{API}/rooms/{MUSA}/room", params={"number": "99"})
        assert response.status_code == 404

    def test_stats_and_floor_filter(self, client):
        client.post(f"{API}/rooms/{ADELEKE}/maintenance", params={"number": "15"})
        stats = client.get(f"{API}/rooms/{ADELEKE}/stats").json()
        assert stats["maintenance"] == 1
        floor_two = client.get(f"{API}/rooms/{ADELEKE}", params={"floor": 2}).json()
        assert floor_two["total"] == 10

        response = client.delete(f"{API}/rooms/{ADELEKE}/maintenance", params={"number": "15"})
        assert response.json()["room"]["status"] == "available"


class TestReceiptEndpoints:

    def test_create_receipt(self, client, remote):
        """Test issuing a receipt returns it in camelCase and syncs it."""
        response = client.post(f"{API}/receipts/", json=receipt_payload(includeTax=True))
        assert response.status_code == 201
        body = response.json()
        assert body["synced"] is True
        assert body["queued"] is False
        receipt = body["receipt"]
        assert receipt["serialNumber"] == "AH-1001"
        assert receipt["amountWords"] == "Fifty Six Thousand Two Hundred and Fifty Naira Only"
        assert len(remote.rows(RECEIPTS_TABLE)) == 1

        fetched = client.get(f"{API}/receipts/{receipt['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["customerName"] == "Ada Obi"

    def test_validation_error_shape(self, client):
        """Test domain validation errors carry the field name."""
        response = client.post(f"{API}/receipts/", json=receipt_payload(paymentMode="BTC"))
        assert response.status_code == 422
        assert response.json()["field"] == "company_name"

    def test_receipt_queued_when_cloud_down(self, client, remote):
        """Test the receipt is kept and queued when the insert fails."""
        remote.fail(RECEIPTS_TABLE)
        response = client.post(f"{API}/receipts/", json=receipt_payload())
        assert response.status_code == 201
        assert response.json()["synced"] is False
        assert response.json()["queued"] is True

        status = client.get(f"{API}/sync/status").json()
        assert status["queued"]["receipts"] == 1

        remote.recover()
        drained = client.post(f"{API}/sync/drain").json()
        assert drained["total_queued"] == 0
        assert drained["last_result"]["receipts"]["success"] == 1

    def test_list_search_and_stats(self, client):
        client.post(f"{API}/receipts/", json=receipt_payload())
        client.post(f"{API}/receipts/", json=receipt_payload(roomNumber="6", customerName="Bola Ade"))

        assert client.get(f"{API}/receipts/", params={"location": MUSA}).json()["total"] == 2
        assert client.get(f"{API}/receipts/search", params={"q": "bola"}).json()["total"] == 1
        stats = client.get(f"{API}/receipts/stats/{MUSA}").json()
        assert stats["count"] == 2

    def test_missing_receipt(self, client):
        assert client.get(f"{API}/receipts/does-not-exist").status_code == 404


class TestCheckoutAndInvoiceEndpoints:

    def test_guest_lifecycle(self, client):
        """Test receipt, room bill, invoice and checkout for one stay."""
        client.post(f"{API}/receipts/", json=receipt_payload(includeTax=True))
        bill = client.post(
            f"{API}/bills/",
            json={
                "items": [{"menu_item_id": "suya", "name": "Suya", "quantity": 2, "price_per_unit": "2500"}],
                "room_number": "5",
                "room_location": MUSA,
                "guest_name": "Ada Obi",
            },
        )
        assert bill.status_code == 201

        invoice = client.post(
            f"{API}/invoices/",
            json={"location": MUSA, "room_numbers": ["5"], "guest_name": "Ada Obi"},
        )
        assert invoice.status_code == 200
        body = invoice.json()
        assert body["vat_amount"] == "3750.00"
        assert body["restaurant_subtotal"] == "5000.00"
        assert body["grand_total"] == "61250.00"

        checkout = client.post(f"{API}/checkout/", json={"location": MUSA, "room_number": "5"})
        assert checkout.status_code == 200
        assert checkout.json()["guest_name"] == "Ada Obi"
        assert checkout.json()["receipts"][0]["checkedOut"] is True

        after = client.post(
            f"{API}/invoices/",
            json={"location": MUSA, "room_numbers": ["5"], "guest_name": "Ada Obi"},
        )
        assert after.json()["receipt_ids"] == []

    def test_checkout_empty_room(self, client):
        response = client.post(f"{API}/checkout/", json={"location": MUSA, "room_number": "7"})
        assert response.status_code == 422


class TestMenuEndpoints:

    def test_manage_menu(self, client):
        """Test creating an item shows it in the cached menu."""
        created = client.post(f"{API}/menu/items", json={"name": "Pepper Soup", "category": "Food", "price": "4500"})
        assert created.status_code == 201
        item_id = created.json()["id"]

        menu = client.get(f"{API}/menu/").json()
        assert [item["name"] for item in menu["items"]] == ["Pepper Soup"]
        assert client.get(f"{API}/menu/categories").json() == ["All", "Food"]

        hidden = client.post(f"{API}/menu/items/{item_id}/availability", json={"available": False})
        assert hidden.json()["available"] is False
        assert client.delete(f"{API}/menu/items/{item_id}").status_code == 204

    def test_menu_edits_offline(self, client):
        """Test edits return 503 while offline."""
        client.post(f"{API}/sync/connectivity", json={"online": False})
        response = client.post(f"{API}/menu/items", json={"name": "Suya", "price": "2500"})
        assert response.status_code == 503


class TestBankAccountEndpoints:

    def test_create_and_fetch(self, client):
        assert client.get(f"{API}/bank-accounts/", params={"location": MUSA}).status_code == 404
        created = client.post(
            f"{API}/bank-accounts/",
            json={"bank_name": "GTBank", "account_number": "0123456789", "account_name": "Atlantic Hotel"},
        )
        assert created.status_code == 201
        fetched = client.get(f"{API}/bank-accounts/", params={"location": MUSA})
        assert fetched.json()["bankName"] == "GTBank"


class TestAuthEndpoints:

    def test_login_me_logout(self, client):
        """Test the session lifecycle."""
        assert client.get(f"{API}/auth/me").status_code == 401
        response = client.post(f"{API}/auth/login", json={"username": "receptionist", "password": "recept123"})
        assert response.status_code == 200
        assert response.json()["role"] == "Receptionist"
        assert client.get(f"{API}/auth/me").json()["username"] == "receptionist"
        assert client.post(f"{API}/auth/logout").status_code == 204
        assert client.get(f"{API}/auth/me").status_code == 401

    def test_bad_login(self, client):
        response = client.post(f"{API}/auth/login", json={"username": "admin", "password": "wrong"})
        assert response.status_code == 401


class TestSyncEndpoints:

    def test_reconnect_drains(self, client, remote):
        """Test reporting connectivity back drains queued records."""
        client.post(f"{API}/sync/connectivity", json={"online": False})
        client.post(f"{API}/receipts/", json=receipt_payload())
        status = client.get(f"{API}/sync/status").json()
        assert status["online"] is False
        assert status["queued"]["receipts"] == 1
        assert status["queued"]["rooms"] == 1

        status = client.post(f"{API}/sync/connectivity", json={"online": True}).json()
        assert status["online"] is True
        assert status["total_queued"] == 0
        assert len(remote.rows(RECEIPTS_TABLE)) == 1
