"""Binding of request data to OpenAPI parameter definitions."""

from __future__ import annotations

import base64
import binascii
import io
import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Mapping, NamedTuple, Optional
from urllib.parse import parse_qs

from werkzeug.datastructures import FileStorage
from werkzeug.http import parse_options_header
from werkzeug.wrappers import Request

__all__ = [
    "ValidationError",
    "Items",
    "Parameter",
    "ParamBinder",
    "split_by_format",
]

MULTIPART_FORM = "multipart/form-data"
URLENCODED_FORM = "application/x-www-form-urlencoded"
_FORM_TYPES = [MULTIPART_FORM, URLENCODED_FORM]
_DEFAULT_MIME = "application/octet-stream"

_FLOAT32_MAX = 3.4028234663852886e38
_INT_BITS = {"int8": 8, "int16": 16, "int32": 32, "int64": 64}
_TRUTHY = frozenset({"true", "1", "yes", "ok", "y", "on", "selected", "checked", "t", "enabled"})

_INT_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)
_INF_LITERALS = frozenset({"inf", "infinity"})
_MEDIA_PART = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_MEDIA_TYPE_RE = re.compile(_MEDIA_PART + "/" + _MEDIA_PART)
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")

_SEPARATORS = {"ssv": " ", "tsv": "\t", "pipes": "|"}


class ValidationError(Exception):
    """A request value that could not be bound to its parameter."""

    def __init__(
        self,
        code: int,
        message: str,
        *,
        name: str = "",
        in_: str = "",
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.name = name
        self.in_ = in_
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationError):
            return NotImplemented
        return (self.code, self.message, self.name, self.in_, self.value) == (
            other.code,
            other.message,
            other.name,
            other.in_,
            other.value,
        )

    __hash__ = Exception.__hash__

    def __repr__(self) -> str:
        return f"ValidationError({self.code}, {self.message!r})"

    @classmethod
    def required(cls, name: str, in_: str, value: Any) -> ValidationError:
        """A required parameter is missing or empty."""
        return cls(422, f"{name} in {in_} is required", name=name, in_=in_, value=value)

    @classmethod
    def invalid_type(cls, name: str, in_: str, type_name: str, value: Any) -> ValidationError:
        """A value cannot be read as the parameter's type."""
        message = f"{name} in {in_} must be of type {type_name}"
        if value is not None:
            message += f": {value!r}"
        return cls(422, message, name=name, in_=in_, value=value)

    @classmethod
    def invalid_collection_format(cls, name: str, in_: str, collection_format: str) -> ValidationError:
        """The collection format is not allowed for the parameter's location."""
        return cls(
            422,
            f'the collection format "{collection_format}" is not supported '
            f'for the {in_} param "{name}"',
            name=name,
            in_=in_,
            value=collection_format,
        )

    @classmethod
    def invalid_content_type(cls, value: str, allowed: list[str]) -> ValidationError:
        """The request's media type is not one of ``allowed``."""
        return cls(
            415,
            f'unsupported media type "{value}", only {allowed} are allowed',
            name="Content-Type",
            in_="header",
            value=value,
        )

    @classmethod
    def parse_error(cls, name: str, in_: str, value: str, reason: object) -> ValidationError:
        """The request data for a parameter could not be parsed."""
        label = f"{name} {in_}" if name else in_
        return cls(
            400,
            f'parsing {label} from "{value}" failed, because {reason}',
            name=name,
            in_=in_,
            value=value,
        )


@dataclass
class Items:
    """Type description of the elements of an array parameter."""

    type: str = ""
    format: str = ""
    items: Optional[Items] = None
    collection_format: str = ""


@dataclass
class Parameter:
    """A non-schema OpenAPI parameter."""

    name: str
    in_: str
    type: str = ""
    format: str = ""
    items: Optional[Items] = None
    collection_format: str = ""
    required: bool = False
    allow_empty_value: bool = False
    default: Any = None


class _Format(NamedTuple):
    type: type
    parse: Callable[[str], Any]


def _parse_date_time(text: str) -> datetime:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


_DEFAULT_FORMATS: dict[str, _Format] = {
    "date": _Format(date, date.fromisoformat),
    "date-time": _Format(datetime, _parse_date_time),
}


def split_by_format(data: str, collection_format: str) -> list[str]:
    """Split ``data`` by a collection format, dropping blank entries."""
    if not data or collection_format == "multi":
        return []
    sep = _SEPARATORS.get(collection_format, ",")
    return [part.strip() for part in data.split(sep) if part.strip()]


def _get_ok(values: Any, name: str) -> tuple[list[str], bool, bool]:
    """Return the values for ``name``, whether the key exists and whether it has a value."""
    if values is None:
        return [], False, False
    if isinstance(values, list):
        for entry in values:
            if entry[0] == name:
                return [entry[1]], True, entry[1] != ""
        return [], False, False
    getlist = getattr(values, "getlist", None)
    if callable(getlist):
        found = list(getlist(name))
        return found, bool(found), bool(found)
    if name not in values:
        return [], False, False
    raw = values[name]
    found = [raw] if isinstance(raw, str) else list(raw)
    return found, True, bool(found)


def _parse_content_type(request: Request) -> tuple[str, dict[str, str]]:
    raw = request.headers.get("Content-Type", "") or _DEFAULT_MIME
    media_type, options = parse_options_header(raw)
    if not _MEDIA_TYPE_RE.fullmatch(media_type):
        raise ValueError(f"malformed media type {raw!r}")
    return media_type.lower(), options


class ParamBinder:
    """Reads, converts and checks the request value of one parameter."""

    def __init__(
        self,
        parameter: Parameter,
        formats: Optional[Mapping[str, tuple[type, Callable[[str], Any]]]] = None,
    ) -> None:
        self.parameter = parameter
        self.name = parameter.name
        source = _DEFAULT_FORMATS if formats is None else formats
        self._formats = {key: _Format(*spec) for key, spec in source.items()}

    def type(self) -> Optional[Any]:
        """Return the Python type the parameter binds to, or None if unknown."""
        p = self.parameter
        return self._type_for(p.type, p.format, p.items)

    def _type_for(self, tpe: str, fmt: str, items: Optional[Items]) -> Optional[Any]:
        if tpe == "boolean":
            return bool
        if tpe == "string":
            if fmt == "byte":
                return bytes
            if fmt in self._formats:
                return self._formats[fmt].type
            return str
        if tpe == "integer":
            return int
        if tpe == "number":
            return float if fmt in ("float", "double") else None
        if tpe == "array":
            if items is None:
                return None
            item_type = self._type_for(items.type, items.format, items.items)
            return None if item_type is None else list[item_type]
        if tpe == "file":
            return FileStorage
        if tpe == "object":
            return dict
        return None

    def _allows_multi(self) -> bool:
        return self.parameter.in_ in ("query", "formData")

    def read_value(self, values: Any) -> tuple[list[str], bool]:
        """Return the raw values for the parameter and whether its key was present."""
        p = self.parameter
        if p.type == "array":
            if p.collection_format == "multi":
                if not self._allows_multi():
                    raise ValidationError.invalid_collection_format(p.name, p.in_, p.collection_format)
                found, has_key, _ = _get_ok(values, p.name)
                return found, has_key
            found, has_key, has_value = _get_ok(values, p.name)
            if not has_value:
                return [], has_key
            return split_by_format(found[-1], p.collection_format), has_key
        found, has_key, _ = _get_ok(values, p.name)
        return found, has_key

    def bind_value(self, data: list[str], has_key: bool) -> Any:
        """Convert raw values to the parameter's type, applying its default."""
        p = self.parameter
        if p.type == "array":
            return self._set_slice(data, p.default, has_key)
        last = data[-1] if data else ""
        return self._set_field(last, p.default, has_key, p.type, p.format)

    def bind(self, request: Request, route_params: Any = None, consumer: Optional[Callable[[Any], Any]] = None) -> Any:
        """Read the parameter from ``request`` and return its bound value.

        ``route_params`` holds the path parameters; ``consumer`` reads a
        binary stream into a value and is used for body parameters.
        """
        p = self.parameter
        if p.in_ == "query":
            return self.bind_value(*self.read_value(request.args))
        if p.in_ == "header":
            return self.bind_value(*self.read_value(request.headers))
        if p.in_ == "path":
            return self.bind_value(*self.read_value(route_params))
        if p.in_ == "formData":
            return self._bind_form(request)
        if p.in_ == "body":
            return self._bind_body(request, consumer)
        raise ValidationError(500, f'invalid parameter location "{p.in_}"', name=p.name, in_=p.in_)

    def _bind_form(self, request: Request) -> Any:
        p = self.parameter
        try:
            media_type, options = _parse_content_type(request)
        except ValueError as exc:
            raise ValidationError.invalid_content_type("", list(_FORM_TYPES)) from exc
        if media_type not in _FORM_TYPES:
            raise ValidationError.invalid_content_type(media_type, list(_FORM_TYPES))

        if media_type == MULTIPART_FORM:
            if not options.get("boundary"):
                raise ValidationError.parse_error(
                    p.name, p.in_, "", "no multipart boundary param in Content-Type"
                )
            form: Any = request.form
            files: Any = request.files
        else:
            body = request.get_data(cache=True).decode("utf-8", "replace")
            bad = _BAD_ESCAPE_RE.search(body)
            if bad is not None:
                raise ValidationError.parse_error(
                    p.name, p.in_, "", f'invalid URL escape "{body[bad.start():bad.start() + 3]}"'
                )
            form = parse_qs(body, keep_blank_values=True)
            files = {}

        if p.type == "file":
            storage = files.get(p.name)
            if storage is None:
                if p.required:
                    raise ValidationError.parse_error(p.name, p.in_, "", "no such file")
                return None
            return storage
        return self.bind_value(*self.read_value(form))

    def _bind_body(self, request: Request, consumer: Optional[Callable[[Any], Any]]) -> Any:
        p = self.parameter
        payload = request.get_data(cache=True)
        if not payload:
            return p.default
        if consumer is None:
            raise ValidationError(500, f"no consumer to read {p.name} in {p.in_}", name=p.name, in_=p.in_)
        type_name = p.format or p.type
        try:
            return consumer(io.BytesIO(payload))
        except EOFError as exc:
            if p.default is not None:
                return p.default
            raise ValidationError.invalid_type(p.name, p.in_, type_name, None) from exc
        except Exception as exc:
            raise ValidationError.invalid_type(p.name, p.in_, type_name, None) from exc

    def _set_slice(self, data: list[str], default: Any, has_key: bool) -> list[Any]:
        p = self.parameter
        empty = not data or (len(data) == 1 and data[0] == "")
        if (not has_key or (not p.allow_empty_value and empty)) and p.required and default is None:
            raise ValidationError.required(p.name, p.in_, data)
        if not data:
            return list(default) if default is not None else []
        items = p.items
        item_type = items.type if items is not None and items.type else "string"
        item_format = items.format if items is not None else ""
        return [self._set_field(item, None, has_key, item_type, item_format) for item in data]

    def _set_field(self, data: str, default: Any, has_key: bool, tpe: str, fmt: str) -> Any:
        p = self.parameter
        type_name = p.format or p.type
        if (not has_key or (not p.allow_empty_value and data == "")) and p.required and p.default is None:
            raise ValidationError.required(p.name, p.in_, data)

        def invalid() -> ValidationError:
            return ValidationError.invalid_type(p.name, p.in_, type_name, data)

        if tpe == "string" and fmt in self._formats:
            if data == "":
                return default
            try:
                return self._formats[fmt].parse(data)
            except (ValueError, TypeError) as exc:
                raise invalid() from exc

        if tpe == "string" and fmt == "byte":
            if data == "":
                return bytes(default) if default is not None else b""
            return self._decode_base64(data, invalid)

        if tpe == "boolean":
            if data == "":
                return bool(default) if default is not None else False
            return data.lower() in _TRUTHY

        if tpe == "integer":
            if data == "":
                return int(default) if default is not None else 0
            if not _INT_RE.fullmatch(data):
                raise invalid()
            value = int(data)
            bits = _INT_BITS.get(fmt, 64)
            if not -(1 << (bits - 1)) <= value < (1 << (bits - 1)):
                raise invalid()
            return value

        if tpe == "number":
            if data == "":
                return float(default) if default is not None else 0.0
            if "_" in data or data != data.strip():
                raise invalid()
            try:
                value = float(data)
            except ValueError as exc:
                raise invalid() from exc
            if math.isinf(value) and data.lstrip("+-").lower() not in _INF_LITERALS:
                raise invalid()
            if fmt == "float" and abs(value) > _FLOAT32_MAX and not math.isinf(value):
                raise invalid()
            return value

        if tpe == "string":
            if data == "":
                return "" if default is None else str(default)
            return data

        raise invalid()

    @staticmethod
    def _decode_base64(data: str, invalid: Callable[[], ValidationError]) -> bytes:
        for altchars in (None, b"-_"):
            try:
                return base64.b64decode(data, altchars=altchars, validate=True)
            except (binascii.Error, ValueError):
                continue
        raise invalid()