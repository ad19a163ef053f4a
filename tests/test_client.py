import pytest
import responses

from renderaltdelete.client import Client, RenderError
from renderaltdelete.models import Owner, Postgres, Redis, Service

ENDPOINT = "api.example.com"
BASE = f"https://{ENDPOINT}/v1"


@pytest.fixture
def client():
    return Client(ENDPOINT, "token")


def test_list_services_builds_url_and_headers(client):
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET,
            f"{BASE}/services",
            json=[{"service": {"id": "srv-1", "name": "web"}, "cursor": "c1"}],
        )
        services = client.list_services("")
        request = rsps.calls[0].request
    assert services == [Service(id="srv-1", name="web")]
    assert request.url == f"{BASE}/services?type=&limit=20"
    assert request.headers["Authorization"] == "Bearer token"
    assert request.headers["Accept"] == "application/json"


def test_list_services_with_owner(client):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/services", json=[])
        services = client.list_services("own-1")
        url = rsps.calls[0].request.url
    assert services == []
    assert url == f"{BASE}/services?type=&limit=20&ownerId=own-1"


def test_list_postgres(client):
    body = [
        {
            "postgres": {
                "id": "pg-1",
                "name": "main",
                "owner": {"id": "own-1", "name": "team", "email": "a@example.com"},
            },
            "cursor": "c",
        }
    ]
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/postgres", json=body)
        dbs = client.list_postgres("own-1")
        url = rsps.calls[0].request.url
    assert url == f"{BASE}/postgres?limit=20&ownerId=own-1"
    assert dbs == [
        Postgres(id="pg-1", name="main", owner=Owner("own-1", "team", "a@example.com"))
    ]


def test_list_redis(client):
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET,
            f"{BASE}/redis",
            json=[{"redis": {"id": "red-1", "name": "cache"}}],
        )
        dbs = client.list_redis("")
        url = rsps.calls[0].request.url
    assert url == f"{BASE}/redis?limit=20"
    assert dbs == [Redis(id="red-1", name="cache")]


def test_list_authorized_owners(client):
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET,
            f"{BASE}/owners",
            json=[
                {"owner": {"id": "own-1", "name": "one", "email": "a@example.com"}},
                {"owner": {"id": "own-2", "name": "two", "email": "b@example.com"}},
            ],
        )
        owners = client.list_authorized_owners()
        url = rsps.calls[0].request.url
    assert url == f"{BASE}/owners?limit=20"
    assert [o.id for o in owners] == ["own-1", "own-2"]
    assert owners[1].email == "b@example.com"


def test_empty_body_gives_empty_list(client):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/owners", body="")
        assert client.list_authorized_owners() == []


@pytest.mark.parametrize(
    "method,resource,call",
    [
        ("services", "srv-1", "delete_service"),
        ("postgres", "pg-1", "delete_postgres"),
        ("redis", "red-1", "delete_redis"),
    ],
)
def test_delete_uses_resource_path(client, method, resource, call):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.DELETE, f"{BASE}/{method}/{resource}", status=204)
        result = getattr(client, call)(resource)
        request = rsps.calls[0].request
    assert result is None
    assert request.method == "DELETE"
    assert request.url == f"{BASE}/{method}/{resource}"


def test_delete_ignores_message_on_success(client):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.DELETE, f"{BASE}/services/srv-1", json={"message": "ok"})
        result = client.delete_service("srv-1")
        assert len(rsps.calls) == 1
    assert result is None


def test_non_2xx_raises_status(client):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.DELETE, f"{BASE}/redis/red-1", status=404)
        with pytest.raises(RenderError, match="^404 response$"):
            client.delete_redis("red-1")


def test_bad_json_raises(client):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/services", body="{not json")
        with pytest.raises(RenderError, match="failed to parse json"):
            client.list_services("")


def test_non_array_list_response_raises(client):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/redis", json={"redis": {}})
        with pytest.raises(RenderError, match="failed to parse json"):
            client.list_redis("")


def test_connection_failure_raises(client):
    with responses.RequestsMock(assert_all_requests_are_fired=False):
        with pytest.raises(RenderError, match="failed to send HTTP request"):
            client.list_postgres("")