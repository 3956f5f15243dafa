import pytest
from werkzeug.test import Client
from werkzeug.wrappers import Response

from oapiware.mux import Handler, Mux, ServeMux, default_not_found
from oapiware.router import RouterError


def format_params(params):
    return "[" + " ".join(f"{{{p.name} {p.value}}}" for p in params) + "]"


def echo_handler(request, params):
    return Response(
        f"method: {request.method}, path: {request.path}, params: {format_params(params)}"
    )


@pytest.fixture
def client():
    mux = Mux()
    app = mux.build([
        mux.get("/", echo_handler),
        mux.get("/user/:name", echo_handler),
        mux.post("/user/:name", echo_handler),
        mux.head("/user/:name", echo_handler),
        mux.put("/user/:name", echo_handler),
        mux.handler("GET", "/user/handler", echo_handler),
        mux.handler("POST", "/user/handler", echo_handler),
        mux.handler("PUT", "/user/inference", echo_handler),
    ])
    return Client(app)


@pytest.mark.parametrize("status, method, path, expected", [
    (200, "GET", "/", "method: GET, path: /, params: []"),
    (200, "GET", "/user/alice", "method: GET, path: /user/alice, params: [{name alice}]"),
    (200, "POST", "/user/bob", "method: POST, path: /user/bob, params: [{name bob}]"),
    (200, "HEAD", "/user/alice", ""),
    (200, "PUT", "/user/bob", "method: PUT, path: /user/bob, params: [{name bob}]"),
    (404, "POST", "/", "404 page not found\n"),
    (404, "GET", "/unknown", "404 page not found\n"),
    (404, "POST", "/user/alice/1", "404 page not found\n"),
    (200, "GET", "/user/handler", "method: GET, path: /user/handler, params: []"),
    (200, "POST", "/user/handler", "method: POST, path: /user/handler, params: []"),
    (200, "PUT", "/user/inference", "method: PUT, path: /user/inference, params: []"),
])
def test_mux(client, status, method, path, expected):
    response = client.open(path, method=method)
    assert response.status_code == status
    assert response.get_data(as_text=True) == expected


def test_custom_not_found():
    app = Mux().build([])

    def unavailable(request, params):
        return Response(
            f"method: {request.method}, path: {request.path}, params: {format_params(params)}",
            status=503,
        )

    app.not_found = unavailable
    response = Client(app).get("/")
    assert response.status_code == 503
    assert response.get_data(as_text=True) == "method: GET, path: /, params: []"


def test_handler_shorthands_set_method():
    mux = Mux()
    assert mux.get("/a", echo_handler) == Handler("GET", "/a", echo_handler)
    assert mux.post("/a", echo_handler).method == "POST"
    assert mux.put("/a", echo_handler).method == "PUT"
    assert mux.head("/a", echo_handler).method == "HEAD"


def test_default_not_found_response():
    response = default_not_found(None, [])
    assert response.status_code == 404
    assert response.get_data(as_text=True) == "404 page not found\n"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_build_returns_serve_mux_with_routers_per_method(client):
    mux = Mux()
    app = mux.build([mux.get("/x", echo_handler), mux.post("/y", echo_handler)])
    assert isinstance(app, ServeMux)
    assert sorted(app.routers) == ["GET", "POST"]


def test_build_propagates_router_errors():
    mux = Mux()
    with pytest.raises(RouterError):
        mux.build([mux.get("/:id/:id", echo_handler)])