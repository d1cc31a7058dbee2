"""Body decoding: content type to dataclass, in two steps.

1. A *strategy*, chosen by the primary media type of the Content-Type
   header, turns raw bytes into a neutral ``name -> value`` mapping.
2. ``bind()`` copies the recognized keys into a dataclass, converting
   each value to the field's annotated type.

Built-in strategies:

    application/json                    -> object members
    application/x-www-form-urlencoded   -> first value per key
    multipart/form-data                 -> fields and UploadFile parts
    application/xml, text/xml           -> child elements of the root

Usage::

    @dataclass
    class RegisterRequest:
        username: str = ""
        password: str = ""
        name: str = ""

    decoders = BodyDecoders()
    req = decoders.decode("application/json", b'{"username": "Dika"}', RegisterRequest)

Decoding is all-or-nothing: a failed decode never touches the target.
"""

import dataclasses
import json
import types
import typing
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias, get_type_hints
from xml.etree import ElementTree

from switchyard.errors import MalformedBody, UnsupportedMediaType
from switchyard.http.forms import UploadFile, media_type, parse_multipart, parse_urlencoded

# (raw body, full Content-Type value) -> neutral mapping
Strategy: TypeAlias = Callable[[bytes, str], Mapping[str, Any]]


# -- Strategies --


def decode_json(raw: bytes, content_type: str) -> Mapping[str, Any]:
    """Decode a JSON object. Any other top-level value is rejected."""
    value = json.loads(raw)
    if not isinstance(value, dict):
        msg = f"expected a JSON object, got {type(value).__name__}"
        raise ValueError(msg)
    return value


def decode_urlencoded(raw: bytes, content_type: str) -> Mapping[str, Any]:
    """Decode ``key=value&...`` pairs; repeated keys keep the first value."""
    return parse_urlencoded(raw).to_mapping()


def decode_multipart(raw: bytes, content_type: str) -> Mapping[str, Any]:
    """Decode multipart sections into string fields and ``UploadFile`` parts."""
    return parse_multipart(raw, content_type).to_mapping()


def decode_xml(raw: bytes, content_type: str) -> Mapping[str, Any]:
    """Map the root element's children by local tag name.

    Leaf elements become their stripped text; elements with children
    become nested mappings. The root tag itself is ignored.
    """
    root = ElementTree.fromstring(raw.strip())
    return _element_mapping(root)


def _element_mapping(element: ElementTree.Element) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for child in element:
        tag = child.tag.rsplit("}", 1)[-1]
        if tag in result:
            continue
        if len(child):
            result[tag] = _element_mapping(child)
        else:
            result[tag] = (child.text or "").strip()
    return result


BUILTIN_STRATEGIES: Mapping[str, Strategy] = types.MappingProxyType(
    {
        "application/json": decode_json,
        "application/x-www-form-urlencoded": decode_urlencoded,
        "multipart/form-data": decode_multipart,
        "application/xml": decode_xml,
        "text/xml": decode_xml,
    }
)

# Parser failures that mean "malformed payload" rather than a bug
_PARSE_ERRORS: tuple[type[Exception], ...] = (ValueError, ElementTree.ParseError)


class BodyDecoders:
    """Registry mapping media types to decoding strategies.

    Built during app setup; read-only while serving.
    """

    __slots__ = ("_strategies",)

    def __init__(self, strategies: Mapping[str, Strategy] | None = None) -> None:
        source = BUILTIN_STRATEGIES if strategies is None else strategies
        self._strategies: dict[str, Strategy] = {k.lower(): v for k, v in source.items()}

    def register(self, media: str, strategy: Strategy) -> None:
        """Add or replace the strategy for *media* (e.g. ``"application/msgpack"``)."""
        self._strategies[media.lower()] = strategy

    @property
    def media_types(self) -> tuple[str, ...]:
        return tuple(self._strategies)

    def strategy_for(self, content_type: str) -> Strategy:
        """Return the strategy for *content_type*, ignoring parameters and case."""
        kind = media_type(content_type)
        try:
            return self._strategies[kind]
        except KeyError:
            msg = f"Unsupported media type: {content_type or '(none)'!r}"
            raise UnsupportedMediaType(msg, media_type=kind) from None

    def parse(self, content_type: str, raw: bytes) -> Mapping[str, Any]:
        """Run the matching strategy and return the neutral mapping."""
        strategy = self.strategy_for(content_type)
        try:
            return strategy(raw, content_type)
        except _PARSE_ERRORS as exc:
            kind = media_type(content_type)
            msg = f"Malformed {kind} body: {exc}"
            raise MalformedBody(msg, media_type=kind, cause=exc) from exc

    def decode[T](self, content_type: str, raw: bytes, target: T) -> T:
        """Decode *raw* into *target* (a dataclass type or instance)."""
        data = self.parse(content_type, raw)
        return bind(target, data, media=media_type(content_type))


def default_decoders() -> BodyDecoders:
    """A registry with the built-in strategies only."""
    return BodyDecoders()


# -- Binding --


def bind[T](target: T, data: Mapping[str, Any], *, media: str = "") -> T:
    """Copy recognized keys from *data* into a dataclass.

    - *target* is a type: return a new instance. Missing keys keep their
      defaults; a missing required field is ``MalformedBody``.
    - *target* is an instance: assign converted values after every field
      converted. Frozen instances are copied with ``dataclasses.replace``.

    Unknown keys are ignored.
    """
    cls = target if isinstance(target, type) else type(target)
    if not dataclasses.is_dataclass(cls):
        msg = f"Body target must be a dataclass type or instance, got {cls.__name__}"
        raise TypeError(msg)

    hints = get_type_hints(cls)
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}

    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.name not in data:
            if isinstance(target, type) and _is_required(f):
                errors[f.name] = "field is required"
            continue
        try:
            values[f.name] = _convert(data[f.name], hints.get(f.name, Any))
        except (TypeError, ValueError) as exc:
            errors[f.name] = str(exc)

    if errors:
        detail = "; ".join(f"{name}: {reason}" for name, reason in sorted(errors.items()))
        msg = f"Cannot bind body to {cls.__name__}: {detail}"
        raise MalformedBody(msg, media_type=media)

    if isinstance(target, type):
        return target(**values)
    if cls.__dataclass_params__.frozen:  # type: ignore[attr-defined]
        return dataclasses.replace(target, **values)
    for name, value in values.items():
        setattr(target, name, value)
    return target


def _is_required(f: dataclasses.Field[Any]) -> bool:
    return f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING


_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off", ""})


def _convert(value: Any, hint: Any) -> Any:
    """Convert *value* to *hint*, raising ``ValueError``/``TypeError`` on mismatch."""
    if hint is Any:
        return value

    # X | None and Optional[X]
    if isinstance(hint, types.UnionType) or typing.get_origin(hint) is typing.Union:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if value is None:
            return None
        return _convert(value, args[0]) if len(args) == 1 else value

    if value is None:
        msg = "null is only allowed for optional fields"
        raise TypeError(msg)

    if hint is str:
        if isinstance(value, (dict, list, UploadFile)):
            msg = f"expected a string, got {type(value).__name__}"
            raise TypeError(msg)
        return value if isinstance(value, str) else str(value)

    if hint is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in _TRUE | _FALSE:
            return value.strip().lower() in _TRUE
        msg = f"expected a boolean, got {value!r}"
        raise ValueError(msg)

    if hint is int:
        if isinstance(value, bool):
            msg = "expected an integer, got a boolean"
            raise TypeError(msg)
        if isinstance(value, float):
            if not value.is_integer():
                msg = f"expected an integer, got {value!r}"
                raise ValueError(msg)
            return int(value)
        return int(value)

    if hint is float:
        if isinstance(value, bool):
            msg = "expected a number, got a boolean"
            raise TypeError(msg)
        return float(value)

    if hint is UploadFile:
        if not isinstance(value, UploadFile):
            msg = "expected an uploaded file"
            raise TypeError(msg)
        return value

    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        if not isinstance(value, Mapping):
            msg = f"expected an object for {hint.__name__}"
            raise TypeError(msg)
        try:
            return bind(hint, value)
        except MalformedBody as exc:
            raise ValueError(str(exc)) from exc

    # Generic aliases (list[str], dict[str, int], ...) pass through unchecked
    return value
