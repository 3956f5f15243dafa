"""Responders that write a status, headers and a produced body to a response."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Callable, Iterable, Mapping, Union

from werkzeug.wrappers import Response

__all__ = ["Producer", "Responder", "ErrorResponder", "error", "not_implemented"]

logger = logging.getLogger(__name__)

Producer = Callable[[BinaryIO, Any], None]
"""Serialises a value onto a writable binary stream, raising on failure."""

HeaderValues = Union[str, Iterable[str]]


class Responder(ABC):
    """Something that knows how to write itself as an HTTP response."""

    @abstractmethod
    def write_response(self, response: Response, producer: Producer) -> None:
        """Write status, headers and body to ``response`` using ``producer``."""


@dataclass
class ErrorResponder(Responder):
    """Writes an error status with a body serialised by the request's producer."""

    code: int
    response: Any = None
    headers: dict[str, list[str]] = field(default_factory=dict)

    def write_response(self, response: Response, producer: Producer) -> None:
        """Add the headers, set the status (500 when unset) and produce the body."""
        for name, values in self.headers.items():
            for value in values:
                response.headers.add(name, value)
        response.status_code = self.code if self.code > 0 else 500
        try:
            producer(response.stream, self.response)
        except Exception as exc:  # the status is already sent; only report it
            logger.error("failed to write error response: %s", exc)


def _as_list(values: HeaderValues) -> list[str]:
    if isinstance(values, str):
        return [values]
    return list(values)


def error(code: int, data: Any, *args: Mapping[str, HeaderValues]) -> Responder:
    """Create a responder for an error; later header mappings override earlier keys."""
    headers: dict[str, list[str]] = {}
    for mapping in args:
        for name, values in mapping.items():
            headers[name] = _as_list(values)
    return ErrorResponder(code=code, response=data, headers=headers)


def not_implemented(message: Any) -> Responder:
    """The error responder for an operation that is not implemented (501)."""
    return error(501, message)