import pytest
import requests

from clients.github_client import GithubApiError, GithubAuthError, GithubClient
from configs.config import Config


class FakeResponse:
    def __init__(self, status_code=200, payload=None, headers=None):
        self.status_code = status_code
        self._payload = payload if payload is not None else []
        self.headers = headers or {}

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self.headers = {}
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True


def _client(*responses, per_page=2):
    return GithubClient(token="t0ken", per_page=per_page, session=FakeSession(responses))


def test_paginates_until_short_page():
    client = _client(FakeResponse(payload=[{"sha": "a"}, {"sha": "b"}]), FakeResponse(payload=[{"sha": "c"}]))
    items = client.list_commits("octo", "app")
    assert [i["sha"] for i in items] == ["a", "b", "c"]
    url, params = client.session.calls[1]
    assert url.endswith("/repos/octo/app/commits")
    assert params == {"page": 2, "per_page": 2}
    assert client.session.headers["Authorization"] == "token t0ken"


def test_stops_at_limit():
    client = _client(FakeResponse(payload=[{"name": "v2"}, {"name": "v1"}]), FakeResponse(payload=[{"name": "v0"}]))
    assert len(client.list_tags("octo", "app", limit=2)) == 2
    assert len(client.session.calls) == 1


def test_auth_failure():
    client = _client(FakeResponse(status_code=401))
    with pytest.raises(GithubAuthError):
        client.list_releases("octo", "app")


@pytest.mark.parametrize(
    "response, code",
    [
        (FakeResponse(status_code=404), "NOT_FOUND"),
        (FakeResponse(status_code=403, headers={"X-RateLimit-Remaining": "0"}), "RATE_LIMIT"),
        (FakeResponse(status_code=500), "UNKNOWN"),
        (requests.Timeout("slow"), "TIMEOUT"),
        (requests.ConnectionError("down"), "NETWORK"),
    ],
)
def test_failures_map_to_codes(response, code):
    client = _client(response)
    with pytest.raises(GithubApiError) as exc:
        client.list_commits("octo", "app")
    assert exc.value.code == code


def test_token_required(monkeypatch):
    monkeypatch.setattr(Config, "GITHUB_TOKEN", None)
    with pytest.raises(GithubAuthError):
        GithubClient(session=FakeSession([]))


def test_close():
    client = _client()
    client.close()
    assert client.session.closed
