"""WSGI building blocks for OpenAPI services: header parsing, negotiation, routing, parameter binding, responders and documentation pages."""

__version__ = "0.1.0"