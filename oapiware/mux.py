"""A WSGI multiplexer dispatching on HTTP method and routed path."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from werkzeug.wrappers import Request, Response

from .router import Params, Record, Router

__all__ = ["Handler", "HandlerFunc", "Mux", "ServeMux", "default_not_found"]

HandlerFunc = Callable[[Request, Params], Response]


def default_not_found(request: Request, params: Params) -> Response:
    """Reply with a plain 404 not found."""
    response = Response("404 page not found\n", status=404, mimetype="text/plain")
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


@dataclass(frozen=True)
class Handler:
    """A handler function bound to an HTTP method and a routing path."""

    method: str
    path: str
    func: HandlerFunc


class ServeMux:
    """WSGI application routing each request to the handler for its method and path."""

    def __init__(
        self,
        routers: Optional[dict[str, Router]] = None,
        not_found: HandlerFunc = default_not_found,
    ) -> None:
        self.routers: dict[str, Router] = routers if routers is not None else {}
        self.not_found = not_found

    def _resolve(self, method: str, path: str) -> tuple[HandlerFunc, Params]:
        router = self.routers.get(method)
        if router is not None:
            func, params, found = router.lookup(path)
            if found:
                return func, params
        return self.not_found, Params()

    def __call__(self, environ: dict[str, Any], start_response: Callable) -> Iterable[bytes]:
        request = Request(environ)
        func, params = self._resolve(request.method, request.path)
        response = func(request, params)
        return response(environ, start_response)


class Mux:
    """Collects handlers and builds a :class:`ServeMux` from them."""

    def get(self, path: str, handler: HandlerFunc) -> Handler:
        """Shorthand for ``handler("GET", path, handler)``."""
        return self.handler("GET", path, handler)

    def post(self, path: str, handler: HandlerFunc) -> Handler:
        """Shorthand for ``handler("POST", path, handler)``."""
        return self.handler("POST", path, handler)

    def put(self, path: str, handler: HandlerFunc) -> Handler:
        """Shorthand for ``handler("PUT", path, handler)``."""
        return self.handler("PUT", path, handler)

    def head(self, path: str, handler: HandlerFunc) -> Handler:
        """Shorthand for ``handler("HEAD", path, handler)``."""
        return self.handler("HEAD", path, handler)

    def handler(self, method: str, path: str, handler: HandlerFunc) -> Handler:
        """Return a handler for ``method`` and ``path``."""
        return Handler(method, path, handler)

    def build(self, handlers: Iterable[Handler]) -> ServeMux:
        """Build a WSGI application; raises RouterError on a bad routing table."""
        records: dict[str, list[Record]] = {}
        for h in handlers:
            records.setdefault(h.method, []).append(Record(h.path, h.func))
        routers: dict[str, Router] = {}
        for method, method_records in records.items():
            router = Router()
            router.build(method_records)
            routers[method] = router
        return ServeMux(routers)