"""WSGI middlewares serving RapiDoc and Redoc documentation sites for a spec."""

from __future__ import annotations

import html
import json
import posixpath
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Optional

from werkzeug.wrappers import Request, Response

__all__ = [
    "RAPIDOC_LATEST",
    "REDOC_LATEST",
    "RapiDocOpts",
    "RedocOpts",
    "rapidoc",
    "redoc",
]

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]

RAPIDOC_LATEST = "https://unpkg.com/rapidoc/dist/rapidoc-min.js"
REDOC_LATEST = "https://cdn.jsdelivr.net/npm/redoc/bundles/redoc.standalone.js"

_RAPIDOC_TEMPLATE = """<!doctype html>
<html>
<head>
  <title>{title}</title>
  <meta charset="utf-8"> <!-- Important: rapi-doc uses utf8 charecters -->
  <script type="module" src="{rapidoc_url}"></script>
</head>
<body>
  <rapi-doc spec-url="{spec_url}"></rapi-doc>
</body>
</html>
"""

_REDOC_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <title>{title}</title>
\t\t<!-- needed for adaptive design -->
\t\t<meta charset="utf-8"/>
\t\t<meta name="viewport" content="width=device-width, initial-scale=1">
\t\t<link href="https://fonts.googleapis.com/css?family=Montserrat:300,400,700|Roboto:300,400,700" rel="stylesheet">

    <!--
    ReDoc doesn't change outer page styles
    -->
    <style>
      body {{
        margin: 0;
        padding: 0;
      }}
    </style>
  </head>
  <body>
    <redoc spec-url='{spec_url}'></redoc>
    <script src="{redoc_url}"> </script>
  </body>
</html>
"""


@dataclass
class RapiDocOpts:
    """Options for the RapiDoc middleware."""

    base_path: str = ""
    path: str = ""
    spec_url: str = ""
    rapidoc_url: str = ""
    title: str = ""

    def ensure_defaults(self) -> None:
        """Fill in every option left empty."""
        self.base_path = self.base_path or "/"
        self.path = self.path or "docs"
        self.spec_url = self.spec_url or "/swagger.json"
        self.rapidoc_url = self.rapidoc_url or RAPIDOC_LATEST
        self.title = self.title or "API documentation"


@dataclass
class RedocOpts:
    """Options for the Redoc middleware."""

    base_path: str = ""
    path: str = ""
    spec_url: str = ""
    redoc_url: str = ""
    title: str = ""

    def ensure_defaults(self) -> None:
        """Fill in every option left empty."""
        self.base_path = self.base_path or "/"
        self.path = self.path or "docs"
        self.spec_url = self.spec_url or "/swagger.json"
        self.redoc_url = self.redoc_url or REDOC_LATEST
        self.title = self.title or "API documentation"


def _join(*parts: str) -> str:
    joined = "/".join(p for p in parts if p)
    if not joined:
        return ""
    cleaned = posixpath.normpath(joined)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _esc(value: str) -> str:
    return html.escape(value, quote=True)


def _serve_page(page: bytes, path: str, next_app: Optional[WSGIApp]) -> WSGIApp:
    def app(environ: dict, start_response: Callable) -> Iterable[bytes]:
        request = Request(environ)
        if request.path == path:
            response = Response(page, status=200)
            response.headers["Content-Type"] = "text/html; charset=utf-8"
            return response(environ, start_response)
        if next_app is None:
            response = Response(f"{json.dumps(path)} not found", status=404)
            response.headers["Content-Type"] = "text/plain"
            return response(environ, start_response)
        return next_app(environ, start_response)

    return app


def rapidoc(opts: RapiDocOpts, next_app: Optional[WSGIApp] = None) -> WSGIApp:
    """Return a WSGI app serving a RapiDoc page, delegating other paths to ``next_app``."""
    opts = replace(opts)
    opts.ensure_defaults()
    page = _RAPIDOC_TEMPLATE.format(
        title=_esc(opts.title),
        rapidoc_url=_esc(opts.rapidoc_url),
        spec_url=_esc(opts.spec_url),
    ).encode("utf-8")
    return _serve_page(page, _join(opts.base_path, opts.path), next_app)


def redoc(opts: RedocOpts, next_app: Optional[WSGIApp] = None) -> WSGIApp:
    """Return a WSGI app serving a Redoc page, delegating other paths to ``next_app``."""
    opts = replace(opts)
    opts.ensure_defaults()
    page = _REDOC_TEMPLATE.format(
        title=_esc(opts.title),
        redoc_url=_esc(opts.redoc_url),
        spec_url=_esc(opts.spec_url),
    ).encode("utf-8")
    return _serve_page(page, _join(opts.base_path, opts.path), next_app)