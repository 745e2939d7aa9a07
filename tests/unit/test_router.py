"""
Unit tests for URL router.
"""

import json

from pageserver.http.router import Router
from pageserver.http.request import HTTPRequest
from pageserver.http.response import HTTPResponse, ResponseBuilder, HTTPStatus


def make_request(method: str, path: str) -> HTTPRequest:
    return HTTPRequest(method=method, path=path)


def echo_handler(request: HTTPRequest) -> HTTPResponse:
    return ResponseBuilder().json({"path": request.path, "params": request.path_params}).build()


def page_router() -> Router:
    """The page server's route table."""
    router = Router()
    router.add_route("/", echo_handler, method="GET", name="index")
    router.add_route("/style.css", echo_handler, method="GET", name="stylesheet")
    router.add_route("/*path", echo_handler, method="GET", name="page")
    return router


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        router = Router()
        router.add_route("/style.css", echo_handler, method="get")

        routes = router.routes()
        assert len(routes) == 1
        assert routes[0].path == "/style.css"
        assert routes[0].method == "GET"

    def test_root_route(self):
        match = page_router().match("GET", "/")
        assert match.route.name == "index"
        assert match.params == {}

    def test_static_route_before_wildcard(self):
        match = page_router().match("GET", "/style.css")
        assert match.route.name == "stylesheet"

    def test_static_route_is_escaped(self):
        match = page_router().match("GET", "/stylexcss")
        assert match.route.name == "page"

    def test_wildcard_captures_nested_path(self):
        match = page_router().match("GET", "/blog/post1")

        assert match.route.name == "page"
        assert match.params == {"path": "blog/post1"}

    def test_trailing_slash_is_normalized(self):
        match = page_router().match("GET", "/blog/")
        assert match.params == {"path": "blog"}

    def test_dotdot_reaches_the_handler(self):
        match = page_router().match("GET", "/../../etc/passwd")
        assert match.params == {"path": "../../etc/passwd"}

    def test_named_param(self):
        router = Router()
        router.add_route("/posts/:slug", echo_handler, method="GET")

        assert router.match("GET", "/posts/hello").params == {"slug": "hello"}
        assert router.match("GET", "/posts/hello/extra") is None

    def test_no_match_for_other_method(self):
        assert page_router().match("POST", "/about") is None

    def test_get_allowed_methods(self):
        assert page_router().get_allowed_methods("/about") == ["GET"]

    def test_any_method_route(self):
        router = Router()
        router.add_route("/any", echo_handler)

        assert router.match("DELETE", "/any") is not None
        assert "PUT" in router.get_allowed_methods("/any")

    def test_handle_sets_path_params(self):
        response = page_router().handle(make_request("GET", "/blog/post1"))

        assert response.status == HTTPStatus.OK
        assert json.loads(response.body)["params"] == {"path": "blog/post1"}

    def test_handle_method_not_allowed(self):
        response = page_router().handle(make_request("POST", "/about"))

        assert response.status == HTTPStatus.METHOD_NOT_ALLOWED
        assert response.headers["Allow"] == "GET"

    def test_handle_not_found(self):
        router = Router()
        router.add_route("/only", echo_handler, method="GET")

        response = router.handle(make_request("GET", "/other"))
        assert response.status == HTTPStatus.NOT_FOUND

    def test_decorator_registration(self):
        router = Router()

        @router.get("/hello")
        def hello(request):
            return ResponseBuilder().text("Hello!").build()

        response = router.handle(make_request("GET", "/hello"))
        assert response.body == b"Hello!"
        assert hello(make_request("GET", "/hello")).body == b"Hello!"
