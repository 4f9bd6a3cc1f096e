"""Resolver - looks names up in a chain of context values.

Context values are opaque: dicts, dataclasses, msgspec structs, pydantic
models, plain objects, lists, scalars. Rather than poking at them ad hoc,
every value is classified into one of a fixed set of kinds and the kind's
handler answers three questions, in this order:

- ``invoke(name)``: is there a zero-argument method called ``name``?
- ``field(name)``: is there a public attribute called ``name``?
- ``key(name)``: is there a mapping key called ``name``?

The first defined answer wins. A frame that answers nothing hands over to
the next (outer) frame.
"""

from __future__ import annotations

import enum
import inspect
import logging
import numbers
from collections.abc import Mapping, Sequence, Set
from typing import Any, Callable, Optional, Tuple

log = logging.getLogger(__name__)

# (name, exception) -> None
Sink = Callable[[str, BaseException], None]


class _Undefined:
    """Marker for a name that no frame could resolve."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()


class Kind(enum.Enum):
    RECORD = "record"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    CALLABLE = "callable"
    SCALAR = "scalar"


def classify(value: Any) -> Kind:
    """Return the kind that decides how ``value`` is searched and rendered."""
    if value is None or isinstance(value, (str, bytes, bytearray, numbers.Number)):
        return Kind.SCALAR
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return Kind.RECORD
    if isinstance(value, (Sequence, Set)):
        return Kind.SEQUENCE
    if inspect.isroutine(value):
        return Kind.CALLABLE
    return Kind.RECORD


def _takes_no_args(func: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    return all(
        p.default is not p.empty or p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
        for p in signature.parameters.values()
    )


class Handler:
    """Lookup capabilities of one kind of value. Answers nothing by default."""

    def invoke(self, value: Any, name: str) -> Any:
        return UNDEFINED

    def field(self, value: Any, name: str) -> Any:
        return UNDEFINED

    def key(self, value: Any, name: str) -> Any:
        return UNDEFINED


class RecordHandler(Handler):
    """Objects with attributes: dataclasses, structs, models, plain classes."""

    def invoke(self, value: Any, name: str) -> Any:
        if name.startswith("_"):
            return UNDEFINED
        # static lookup so properties are not evaluated here
        member = inspect.getattr_static(value, name, UNDEFINED)
        if member is UNDEFINED or not (
            callable(member) or isinstance(member, (staticmethod, classmethod))
        ):
            return UNDEFINED
        bound = getattr(value, name)
        if inspect.isclass(bound) or not callable(bound):
            return UNDEFINED
        if not _takes_no_args(bound):
            return UNDEFINED
        return bound()

    def field(self, value: Any, name: str) -> Any:
        if name.startswith("_"):
            return UNDEFINED
        member = getattr(value, name, UNDEFINED)
        if inspect.isroutine(member):
            return UNDEFINED
        return member


class MappingHandler(Handler):
    """Dicts and other mappings; only their keys are visible."""

    def key(self, value: Any, name: str) -> Any:
        if name in value:
            return value[name]
        return UNDEFINED


_HANDLERS: dict[Kind, Handler] = {
    Kind.RECORD: RecordHandler(),
    Kind.MAPPING: MappingHandler(),
    Kind.SEQUENCE: Handler(),
    Kind.CALLABLE: Handler(),
    Kind.SCALAR: Handler(),
}


def _lookup_frame(value: Any, name: str) -> Any:
    handler = _HANDLERS[classify(value)]
    for capability in (handler.invoke, handler.field, handler.key):
        result = capability(value, name)
        if result is not UNDEFINED:
            return result
    return UNDEFINED


def resolve(chain: Tuple[Any, ...], name: str, sink: Optional[Sink] = None) -> Any:
    """Find ``name`` in ``chain``, innermost frame first.

    Dotted names resolve their head against the whole chain and the rest
    against the head's value alone. ``"."`` is the innermost frame itself.

    Never raises: an exception from user code during lookup is reported to
    ``sink`` and the name resolves to ``UNDEFINED``.
    """
    if name != "." and "." in name:
        head, rest = name.split(".", 1)
        value = resolve(chain, head, sink)
        if value is UNDEFINED:
            return UNDEFINED
        return resolve((value,), rest, sink)

    if name == ".":
        return chain[0] if chain else UNDEFINED

    try:
        for frame in chain:
            result = _lookup_frame(frame, name)
            if result is not UNDEFINED:
                return result
    except Exception as exc:
        if sink is not None:
            sink(name, exc)
        else:
            log.debug("Lookup of %r failed: %s", name, exc)
        return UNDEFINED
    return UNDEFINED


def is_empty(value: Any) -> bool:
    """Section emptiness: undefined, None, False and empty sequences.

    Zero, empty strings and empty mappings are not empty.
    """
    if value is UNDEFINED or value is None or value is False:
        return True
    if classify(value) is Kind.SEQUENCE:
        return len(value) == 0
    return False
