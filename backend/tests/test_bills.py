"""Tests for restaurant bills."""

import datetime as dt
from decimal import Decimal

import pytest

from frontdesk.core.exceptions import ValidationError
from frontdesk.schemas.bill import BillCreate, BillItemCreate, bill_from_row
from frontdesk.services.bill_service import BILLS_TABLE

MUSA = "musa-yaradua"


def make_bill(**overrides) -> BillCreate:
    data = {
        "items": [
            BillItemCreate(menu_item_id="jollof", name="Jollof Rice", quantity=2, price_per_unit=Decimal("3500")),
            BillItemCreate(menu_item_id="chapman", name="Chapman", quantity=1, price_per_unit=Decimal("2000")),
        ],
        "staff_name": "Waiter",
    }
    data.update(overrides)
    return BillCreate(**data)


class TestCreateBill:

    @pytest.mark.asyncio
    async def test_totals_and_item_subtotals(self, container, remote):
        """Test line subtotals and the bill total."""
        result = await container.bills.create(make_bill())

        bill = result.payload
        assert result.success
        assert bill.total == Decimal("9000.00")
        assert [item.subtotal for item in bill.items] == [Decimal("7000.00"), Decimal("2000.00")]
        assert bill.synced is True
        assert bill.vat_amount is None
        assert remote.rows(BILLS_TABLE)[0]["total"] == 9000.0

    @pytest.mark.asyncio
    async def test_tax_inclusive_bill(self, container):
        """Test a taxed bill totals the tax-inclusive amount."""
        result = await container.bills.create(make_bill(include_tax=True))
        bill = result.payload
        assert bill.subtotal == Decimal("9000.00")
        assert bill.vat_amount == Decimal("675.00")
        assert bill.consumption_tax_amount == Decimal("450.00")
        assert bill.total == Decimal("10125.00")
        assert bill.charged_total == Decimal("10125.00")

    @pytest.mark.asyncio
    async def test_bill_numbers_are_daily_sequence(self, container):
        """Test bill numbers count up within the day."""
        first = await container.bills.create(make_bill())
        second = await container.bills.create(make_bill())
        prefix = f"REST-{dt.date.today():%Y%m%d}"
        assert first.payload.bill_number == f"{prefix}-0001"
        assert second.payload.bill_number == f"{prefix}-0002"
        assert container.bills.next_bill_number(dt.date(2020, 1, 1)) == "REST-20200101-0001"

    @pytest.mark.asyncio
    async def test_empty_bill_rejected(self, container):
        """Test a bill needs at least one item."""
        with pytest.raises(ValidationError):
            await container.bills.create(make_bill(items=[]))

    @pytest.mark.asyncio
    async def test_room_charge_needs_location(self, container):
        """Test a room charge must name the branch."""
        with pytest.raises(ValidationError):
            await container.bills.create(make_bill(room_number="5"))

    @pytest.mark.asyncio
    async def test_failed_insert_is_queued(self, container, remote):
        """Test bills use the same queue as receipts when the cloud is down."""
        remote.fail(BILLS_TABLE)
        result = await container.bills.create(make_bill())
        assert result.success is False
        assert result.queued is True
        assert container.bills.unsynced_count() == 1

        remote.recover()
        drained = await container.bills.queue.drain()
        assert drained.success == 1
        assert container.bills.get(result.payload.id).synced is True

    @pytest.mark.asyncio
    async def test_row_round_trip(self, container, remote):
        """Test items survive the JSON text column."""
        result = await container.bills.create(make_bill(room_number="5", room_location=MUSA, guest_name="Ada"))
        rebuilt = bill_from_row(remote.rows(BILLS_TABLE)[0])
        assert rebuilt.items == result.payload.items
        assert rebuilt.guest_name == "Ada"


class TestBillsForRoom:

    @pytest.mark.asyncio
    async def test_matches_guest_case_insensitively(self, container):
        """Test only the current guest's bills are returned."""
        await container.bills.create(make_bill(room_number="5", room_location=MUSA, guest_name="Ada Obi"))
        await container.bills.create(make_bill(room_number="5", room_location=MUSA, guest_name="Previous Guest"))
        await container.bills.create(make_bill(room_number="5", room_location=MUSA))

        bills = await container.bills.fetch_for_room("5", MUSA, " ada obi")

        assert len(bills) == 1
        assert bills[0].guest_name == "Ada Obi"

    @pytest.mark.asyncio
    async def test_includes_remote_bills_from_other_devices(self, container, remote):
        """Test bills only present in the cloud are found."""
        remote.tables[BILLS_TABLE] = {
            "other-device": {
                "id": "other-device",
                "bill_number": "REST-20260301-0001",
                "room_number": "5",
                "room_location": MUSA,
                "guest_name": "Ada Obi",
                "items": "[]",
                "total": 4000,
                "date": "2026-03-01",
                "timestamp": 5,
            }
        }
        bills = await container.bills.fetch_for_room("5", MUSA, "Ada Obi")
        assert [b.id for b in bills] == ["other-device"]

    @pytest.mark.asyncio
    async def test_falls_back_to_local_bills(self, container, remote, connectivity):
        """Test unsynced local bills are found offline and on remote failure."""
        remote.fail(BILLS_TABLE)
        await container.bills.create(make_bill(room_number="5", room_location=MUSA, guest_name="Ada Obi"))

        assert len(await container.bills.fetch_for_room("5", MUSA, "Ada Obi")) == 1
        await connectivity.set_online(False)
        assert len(await container.bills.fetch_for_room("5", MUSA, "Ada Obi")) == 1

    @pytest.mark.asyncio
    async def test_malformed_remote_row_is_skipped(self, container, remote):
        """Test a cloud row missing required columns does not break the lookup."""
        await container.bills.create(make_bill(room_number="5", room_location=MUSA, guest_name="Ada Obi"))
        remote.tables[BILLS_TABLE]["broken"] = {
            "id": "broken",
            "room_number": "5",
            "room_location": MUSA,
            "guest_name": "Ada Obi",
            "total": "not-a-number",
        }

        bills = await container.bills.fetch_for_room("5", MUSA, "Ada Obi")

        assert len(bills) == 1
        assert bills[0].id != "broken"
