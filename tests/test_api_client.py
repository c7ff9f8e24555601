import pytest

from omnihr.api_client import run_in_batches
from omnihr.auth import OmniHRAuth
from omnihr.errors import ApiError, AuthenticationError, PaginationError

from conftest import FakeResponse, FakeSession


@pytest.mark.parametrize("field", ["access", "token", "access_token"])
def test_login_reads_any_token_field(credentials, field):
    session = FakeSession({"/auth/token/": FakeResponse(200, {field: "abc"})})
    auth = OmniHRAuth(credentials, session=session)
    assert auth.get_token() == "abc"

    call = session.calls[0]
    assert call["data"] == {"username": "hr@acme.test", "password": "secret"}
    assert call["headers"]["x-subdomain"] == "acme"
    assert call["headers"]["Content-Type"] == "application/x-www-form-urlencoded"


def test_token_is_cached(credentials):
    session = FakeSession({"/auth/token/": FakeResponse(200, {"access": "abc"})})
    auth = OmniHRAuth(credentials, session=session)
    auth.get_token()
    auth.get_token()
    assert len(session.calls) == 1


def test_auth_headers(credentials):
    auth = OmniHRAuth(credentials, session=FakeSession({"/auth/token/": FakeResponse(200, {"access": "abc"})}))
    assert auth.get_auth_headers() == {
        "Authorization": "Bearer abc",
        "x-subdomain": "acme",
        "Content-Type": "application/json",
    }


@pytest.mark.parametrize(
    "response",
    [FakeResponse(401, {"detail": "bad credentials"}), FakeResponse(200, {"refresh": "only"}), FakeResponse(200, [])],
)
def test_login_failures_raise(credentials, response):
    auth = OmniHRAuth(credentials, session=FakeSession({"/auth/token/": response}))
    with pytest.raises(AuthenticationError):
        auth.login()


def test_unauthorized_request_raises_authentication_error(make_client):
    client = make_client({"/employee/list/": FakeResponse(401, {"detail": "expired"})})
    with pytest.raises(AuthenticationError):
        client.get("/employee/list/")


def test_http_error_carries_status_and_body(make_client):
    client = make_client({"/employee/list/": FakeResponse(500, {"detail": "boom"})})
    with pytest.raises(ApiError) as excinfo:
        client.get("/employee/list/")
    assert excinfo.value.status == 500
    assert excinfo.value.body == {"detail": "boom"}


def test_no_content_returns_none(make_client):
    client = make_client({"/ping/": FakeResponse(204, None, content_type="")})
    assert client.get("/ping/") is None


def test_requests_carry_auth_headers(make_client):
    client = make_client({"/employee/list/": FakeResponse(200, [])})
    client.get("/employee/list/")
    request = client.session.calls[-1]
    assert request["headers"]["Authorization"] == "Bearer test-token"
    assert request["headers"]["x-subdomain"] == "acme"


def paged(pages):
    def _route(params):
        page = params["page"]
        return FakeResponse(200, {"results": pages[page - 1], "next": None if page == len(pages) else f"?page={page + 1}"})
    return _route


def test_pagination_concatenates_pages(make_client):
    client = make_client({"/employee/list/": paged([[{"id": 1}, {"id": 2}], [{"id": 3}]])})
    assert client.get_paginated("/employee/list/") == [{"id": 1}, {"id": 2}, {"id": 3}]
    params = [call["params"] for call in client.session.calls if call["path"] == "/employee/list/"]
    assert params == [{"page": 1, "page_size": 100}, {"page": 2, "page_size": 100}]


def test_pagination_accepts_bare_array(make_client):
    client = make_client({"/employee/list/": FakeResponse(200, [{"id": 7}])})
    assert client.get_paginated("/employee/list/") == [{"id": 7}]


def test_pagination_ceiling(make_client):
    def endless(params):
        return FakeResponse(200, {"results": [{"id": params["page"]}], "next": "more"})

    client = make_client({"/employee/list/": endless}, max_pages=3)
    with pytest.raises(PaginationError):
        client.get_paginated("/employee/list/")
    assert len([c for c in client.session.calls if c["path"] == "/employee/list/"]) == 3


def test_pagination_rejects_unexpected_shape(make_client):
    client = make_client({"/employee/list/": FakeResponse(200, {"data": []})})
    with pytest.raises(ApiError):
        client.get_paginated("/employee/list/")


def test_run_in_batches_keeps_order_and_captures_errors():
    progress = []

    def work(n):
        if n == 3:
            raise ValueError("three")
        return n * 10

    results = run_in_batches(range(1, 6), work, 2, on_progress=lambda done, total, last: progress.append((done, total, last)))
    assert [r.value for r in results] == [10, 20, None, 40, 50]
    assert not results[2].ok and isinstance(results[2].error, ValueError)
    assert progress == [(2, 5, 2), (4, 5, 4), (5, 5, 5)]
