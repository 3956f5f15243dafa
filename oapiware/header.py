"""Parsing of HTTP header values: lists, media types, Accept headers and dates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

__all__ = [
    "AcceptSpec",
    "copy_headers",
    "parse_time",
    "parse_list",
    "parse_value_and_params",
    "parse_accept",
    "parse_accept2",
]

_SEPARATORS = frozenset(' \t"(),/:;<=>?@[]\\{}')
_SPACES = " \t\r\n"

_TIME_LAYOUTS = (
    "%a, %d %b %Y %H:%M:%S GMT",
    "%A, %d-%b-%y %H:%M:%S %Z",
    "%a %b %d %H:%M:%S %Y",
)


@dataclass(frozen=True)
class AcceptSpec:
    """One entry of an Accept* header: a value and its quality factor."""

    value: str
    q: float = 1.0


def _is_token(c: str) -> bool:
    return 32 < ord(c) < 127 and c not in _SEPARATORS


def _values(header: Any, key: str) -> list[str]:
    """All values stored under ``key``, matched case-insensitively."""
    if header is None:
        return []
    getlist = getattr(header, "getlist", None)
    if callable(getlist):
        return list(getlist(key))
    lowered = key.lower()
    found: list[str] = []
    for name, value in header.items():
        if name.lower() == lowered:
            if isinstance(value, str):
                found.append(value)
            else:
                found.extend(value)
    return found


def _first(header: Any, key: str) -> str:
    values = _values(header, key)
    return values[0] if values else ""


def copy_headers(header: Any) -> dict[str, list[str]]:
    """Return a shallow copy of ``header`` as a dict of value lists."""
    getlist = getattr(header, "getlist", None)
    if callable(getlist):
        return {name: list(getlist(name)) for name in header.keys()}
    return dict(header)


def parse_time(header: Any, key: str) -> datetime | None:
    """Parse the header as an HTTP date in UTC; None if absent or invalid."""
    text = _first(header, key)
    if not text:
        return None
    for layout in _TIME_LAYOUTS:
        try:
            parsed = datetime.strptime(text, layout)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc)
    return None


def parse_list(header: Any, key: str) -> list[str]:
    """Split comma separated header values, ignoring commas inside quotes.

    Quoted values are kept as they are; surrounding whitespace is trimmed.
    """
    result: list[str] = []
    for s in _values(header, key):
        begin = end = 0
        escape = quote = False
        for i, c in enumerate(s):
            if escape:
                escape = False
                end = i + 1
            elif quote:
                if c == "\\":
                    escape = True
                elif c == '"':
                    quote = False
                end = i + 1
            elif c == '"':
                quote = True
                end = i + 1
            elif c in _SPACES:
                if begin == end:
                    begin = end = i + 1
            elif c == ",":
                if begin < end:
                    result.append(s[begin:end])
                begin = end = i + 1
            else:
                end = i + 1
        if begin < end:
            result.append(s[begin:end])
    return result


def parse_value_and_params(header: Any, key: str) -> tuple[str, dict[str, str]]:
    """Parse a value with ``;``-separated parameters, as in Content-Type."""
    return _parse_value_and_params(_first(header, key))


def _parse_value_and_params(s: str) -> tuple[str, dict[str, str]]:
    params: dict[str, str] = {}
    value, s = _expect_token_slash(s)
    if not value:
        return value, params
    value = value.lower()
    s = _skip_space(s)
    while s.startswith(";"):
        pkey, s = _expect_token(_skip_space(s[1:]))
        if not pkey or not s.startswith("="):
            break
        pvalue, s = _expect_token_or_quoted(s[1:])
        if not pvalue:
            break
        params[pkey.lower()] = pvalue
        s = _skip_space(s)
    return value, params


def parse_accept2(header: Any, key: str) -> list[AcceptSpec]:
    """Parse an Accept* header through the generic list and parameter parser."""
    specs: list[AcceptSpec] = []
    for entry in parse_list(header, key):
        value, params = _parse_value_and_params(entry)
        q = 1.0
        if "q" in params:
            q, _ = _expect_quality(params["q"])
        if q < 0.0:
            continue
        specs.append(AcceptSpec(value, q))
    return specs


def parse_accept(header: Any, key: str) -> list[AcceptSpec]:
    """Parse Accept* headers into value and quality pairs.

    A malformed entry ends the parsing of the header value it appears in.
    """
    specs: list[AcceptSpec] = []
    for s in _values(header, key):
        while True:
            value, s = _expect_token_slash(s)
            if not value:
                break
            q = 1.0
            s = _skip_space(s)
            if s.startswith(";"):
                s = _skip_space(s[1:])
                while s and not s.startswith("q=") and not s.startswith(","):
                    s = _skip_space(s[1:])
                if s.startswith("q="):
                    q, s = _expect_quality(s[2:])
                    if q < 0.0:
                        break
            specs.append(AcceptSpec(value, q))
            s = _skip_space(s)
            if not s.startswith(","):
                break
            s = _skip_space(s[1:])
    return specs


def _skip_space(s: str) -> str:
    return s.lstrip(_SPACES)


def _expect_token(s: str) -> tuple[str, str]:
    for i, c in enumerate(s):
        if not _is_token(c):
            return s[:i], s[i:]
    return s, ""


def _expect_token_slash(s: str) -> tuple[str, str]:
    for i, c in enumerate(s):
        if not _is_token(c) and c != "/":
            return s[:i], s[i:]
    return s, ""


def _expect_quality(s: str) -> tuple[float, str]:
    if not s:
        return -1.0, ""
    head = s[0]
    if head == "0":
        q, s = 0.0, s[1:]
    elif head == "1":
        q, s = 1.0, s[1:]
    elif head == ".":
        q = 0.0
    else:
        return -1.0, ""
    if not s.startswith("."):
        return q, s
    s = s[1:]
    digits = ""
    for c in s:
        if not "0" <= c <= "9":
            break
        digits += c
    if digits:
        q += int(digits) / 10 ** len(digits)
    return q, s[len(digits):]


def _expect_token_or_quoted(s: str) -> tuple[str, str]:
    if not s.startswith('"'):
        return _expect_token(s)
    s = s[1:]
    out: list[str] = []
    escape = False
    for i, c in enumerate(s):
        if escape:
            escape = False
            out.append(c)
        elif c == "\\":
            escape = True
        elif c == '"':
            return "".join(out), s[i + 1:]
        else:
            out.append(c)
    return "", ""