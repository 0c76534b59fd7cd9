import httpx
import pytest

from fundmanager.client import ApiError, FundManagerClient, GuestModeError, QueryCache
from tests.conftest import ADMIN_PASSWORD, ADMIN_USERNAME


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def api(client):
    return FundManagerClient(http=client, poll_interval=60)


@pytest.fixture
def admin_api(api):
    api.login(ADMIN_USERNAME, ADMIN_PASSWORD)
    return api


def test_query_cache_expires_after_poll_interval():
    clock = FakeClock()
    cache = QueryCache(poll_interval=5, clock=clock)
    cache.set("/api/members", [1])

    clock.now = 4.9
    assert cache.get("/api/members") == [1]
    clock.now = 5.0
    assert cache.get("/api/members") is None
    assert len(cache) == 0


def test_query_cache_invalidates_by_prefix():
    cache = QueryCache()
    cache.set("/api/orders", [])
    cache.set("/api/orders/board", {})
    cache.set("/api/members", [])

    assert cache.invalidate(["/api/orders"]) == 2
    assert cache.get("/api/members") == []


def test_cache_key_ignores_empty_params():
    assert QueryCache.key("/api/tasks", {"resource_id": None}) == "/api/tasks"
    assert QueryCache.key("/api/tasks", {"b": 2, "a": 1}) == "/api/tasks?a=1&b=2"


def test_guest_cannot_write(api):
    api.login_as_guest()

    assert api.is_guest
    assert not api.can_write
    with pytest.raises(GuestModeError):
        api.members.create(name="Carl")


def test_login_failure_surfaces_server_message(api):
    with pytest.raises(ApiError) as excinfo:
        api.login(ADMIN_USERNAME, "wrong")

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Invalid username or password"
    assert api.is_guest


def test_create_unwraps_row_and_invalidates_list(admin_api):
    assert admin_api.members.list() == []

    member = admin_api.members.create(name="Carl")

    assert member["name"] == "Carl"
    assert [m["id"] for m in admin_api.members.list()] == [member["id"]]


def test_dashboard_refreshes_after_write(admin_api):
    assert admin_api.dashboard()["members"] == 0

    admin_api.members.create(name="Carl")

    assert admin_api.dashboard()["members"] == 1


def test_strike_summary_follows_member_and_strike_writes(admin_api):
    member = admin_api.members.create(name="Ryder")
    assert admin_api.strike_summary()[0]["total_strike_points"] == 0

    admin_api.strikes.create(member_id=member["id"], points=4)

    assert admin_api.strike_summary()[0]["at_risk"] is True


def test_set_inventory_level_refreshes_current(admin_api):
    resource = admin_api.resources.create(name="Scrap")
    admin_api.set_inventory_level(resource["id"], 5)
    assert admin_api.current_inventory()[0]["quantity"] == 5

    admin_api.set_inventory_level(resource["id"], 8)

    assert admin_api.current_inventory()[0]["quantity"] == 8


def test_inventory_collection_has_no_delete(admin_api):
    with pytest.raises(ApiError):
        admin_api.inventory.delete("anything")


def test_update_and_delete_round_trip(admin_api):
    order = admin_api.orders.create(reference_id="ORD-001", items="Lockpicks", quantity=2, customer_name="Alice")

    updated = admin_api.orders.update(order["id"], status="completed")
    board = admin_api.order_board()

    assert updated["status"] == "completed"
    assert board["active"] == []
    assert [o["id"] for o in board["history"]] == [order["id"]]

    admin_api.orders.delete(order["id"])
    assert admin_api.orders.list() == []


def test_validation_error_message_reaches_caller(admin_api):
    with pytest.raises(ApiError) as excinfo:
        admin_api.members.create(name="")

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "name is required"


def test_get_retries_transport_errors():
    calls = {"count": 0}

    def handler(request):
        calls["count"] += 1
        if calls["count"] < 3:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, json=[])

    http = httpx.Client(base_url="http://fund.test", transport=httpx.MockTransport(handler))
    api = FundManagerClient(base_url="http://fund.test", http=http)

    assert api.members.list() == []
    assert calls["count"] == 3


def test_exhausted_retries_become_api_error():
    calls = {"count": 0}

    def handler(request):
        calls["count"] += 1
        raise httpx.ConnectError("refused", request=request)

    http = httpx.Client(base_url="http://fund.test", transport=httpx.MockTransport(handler))
    api = FundManagerClient(base_url="http://fund.test", http=http)

    with pytest.raises(ApiError) as excinfo:
        api.members.list()

    assert excinfo.value.status_code == 503
    assert excinfo.value.message.startswith("API unreachable")
    assert calls["count"] == 3
