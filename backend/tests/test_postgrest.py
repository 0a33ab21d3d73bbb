"""Tests for the PostgREST remote data client."""

import json

import httpx
import pytest

from frontdesk.core.exceptions import RemoteDataError
from frontdesk.services.remote.base import Filter
from frontdesk.services.remote.postgrest import PostgrestDataService, encode_filters, encode_order


class Recorder:
    """MockTransport handler that records requests and replays a response."""

    def __init__(self, status_code=200, body=None, raises=None):
        self.status_code = status_code
        self.body = body
        self.raises = raises
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raises is not None:
            raise self.raises
        if self.body is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.body)


def make_service(handler) -> PostgrestDataService:
    return PostgrestDataService("https://db.example.com/", "anon-key", transport=httpx.MockTransport(handler))


class TestEncoding:

    def test_filters(self):
        """Test each predicate maps to its query parameter."""
        params = encode_filters([
            Filter.eq("room_number", "11/13"),
            Filter.eq("available", True),
            Filter.in_("id", ["a", "b"]),
            Filter.or_eq("location", ["musa-yaradua", "all"]),
        ])
        assert params == [
            ("room_number", "eq.11/13"),
            ("available", "eq.true"),
            ("id", "in.(a,b)"),
            ("or", "(location.eq.musa-yaradua,location.eq.all)"),
        ]

    def test_reserved_characters_are_quoted(self):
        """Test values with commas are quoted inside lists."""
        assert encode_filters([Filter.in_("name", ["a,b"])]) == [("name", 'in.("a,b")')]

    def test_order(self):
        """Test order clauses join with commas."""
        assert encode_order([("category", True), ("name", True)]) == "category.asc,name.asc"
        assert encode_order([("timestamp", False)]) == "timestamp.desc"
        assert encode_order(None) is None


class TestRequests:

    @pytest.mark.asyncio
    async def test_select_builds_query(self):
        """Test select sends filters, order, limit and auth headers."""
        handler = Recorder(body=[{"id": "1"}])
        rows = await make_service(handler).select(
            "bank_accounts", filters=[Filter.eq("location", "all")], order=[("created_at", False)], limit=1
        )

        assert rows == [{"id": "1"}]
        request = handler.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/bank_accounts"
        assert request.url.params["location"] == "eq.all"
        assert request.url.params["order"] == "created_at.desc"
        assert request.url.params["limit"] == "1"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["authorization"] == "Bearer anon-key"

    @pytest.mark.asyncio
    async def test_upsert_merges_duplicates(self):
        """Test upsert asks the server to merge on the conflict column."""
        handler = Recorder(status_code=201, body=[{"id": "musa-yaradua-1"}])
        await make_service(handler).upsert("rooms", [{"id": "musa-yaradua-1"}])

        request = handler.requests[0]
        assert request.method == "POST"
        assert request.url.params["on_conflict"] == "id"
        assert "resolution=merge-duplicates" in request.headers["prefer"]
        assert json.loads(request.content) == [{"id": "musa-yaradua-1"}]

    @pytest.mark.asyncio
    async def test_update_sends_patch(self):
        """Test update sends one PATCH with the filter."""
        handler = Recorder(body=[])
        await make_service(handler).update("receipts", {"checked_out": True}, [Filter.in_("id", ["a", "b"])])
        request = handler.requests[0]
        assert request.method == "PATCH"
        assert request.url.params["id"] == "in.(a,b)"

    @pytest.mark.asyncio
    async def test_empty_body(self):
        """Test a 204 response yields no rows."""
        handler = Recorder(status_code=204)
        assert await make_service(handler).delete("menu_items", [Filter.eq("id", "1")]) is None

    @pytest.mark.asyncio
    async def test_unfiltered_writes_refused(self):
        """Test update and delete without filters never reach the network."""
        handler = Recorder(body=[])
        service = make_service(handler)
        with pytest.raises(ValueError):
            await service.update("receipts", {"checked_out": True}, [])
        with pytest.raises(ValueError):
            await service.delete("receipts", [])
        assert handler.requests == []


class TestErrors:

    @pytest.mark.asyncio
    async def test_rejected_request(self):
        """Test an error status becomes a RemoteDataError with the server message."""
        handler = Recorder(status_code=409, body={"message": "duplicate key value"})
        with pytest.raises(RemoteDataError) as exc:
            await make_service(handler).insert("receipts", [{"id": "1"}])
        assert exc.value.status_code == 409
        assert exc.value.detail == "duplicate key value"
        assert exc.value.table == "receipts"

    @pytest.mark.asyncio
    async def test_rejected_request_with_list_body(self):
        """Test an error body that is a JSON list still maps to RemoteDataError."""
        handler = Recorder(status_code=400, body=[{"code": "PGRST100"}])
        with pytest.raises(RemoteDataError) as exc:
            await make_service(handler).select("rooms")
        assert exc.value.status_code == 400
        assert "PGRST100" in exc.value.detail

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        """Test network errors are wrapped."""
        handler = Recorder(raises=httpx.ConnectError("connection refused"))
        with pytest.raises(RemoteDataError):
            await make_service(handler).select("rooms")

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        """Test a non-JSON success body is reported as an error."""
        service = make_service(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(RemoteDataError):
            await service.select("rooms")

    @pytest.mark.asyncio
    async def test_ping(self):
        """Test reachability follows the transport."""
        assert await make_service(Recorder(body={})).ping() is True
        assert await make_service(Recorder(raises=httpx.ConnectError("down"))).ping() is False
