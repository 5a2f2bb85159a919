"""Typed field accessors over a PropertyBag.

A field is declared once as a class attribute of an entity or variant and is
shared by every instance of that class. It holds no per-instance state:
``read`` and ``write`` take the bag to operate on, so the same descriptor can
serve any number of entities.

Attribute access on the owning node goes through the descriptor protocol::

    class ParallelTests(BuildFeature):
        type = "parallelTests"
        number_of_batches = IntField(required=True)

    feature = ParallelTests()
    feature.number_of_batches = 4      # bag["numberOfBatches"] = "4"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from buildconf.constants import MANDATORY_MESSAGE, FieldState
from buildconf.exceptions import DecodeError, EncodeError, ModelDefinitionError

if TYPE_CHECKING:
    from buildconf.bag import PropertyBag

__all__ = [
    "BoolField",
    "Declaration",
    "EnumField",
    "Field",
    "IntField",
    "Requirement",
    "StringField",
    "camelize",
]

_SNAKE_SEGMENT = re.compile(r"_([a-z0-9])")
_DECIMAL = re.compile(r"-?[0-9]+")


def camelize(attr: str) -> str:
    """Convert a snake_case attribute name to its camelCase property name."""
    return _SNAKE_SEGMENT.sub(lambda m: m.group(1).upper(), attr)


@dataclass(frozen=True)
class Requirement:
    """A presence rule: ``target`` must have been provided."""

    target: Declaration
    segment: str
    message: str


class Declaration:
    """Something declared on a node class that is backed by one bag key.

    Args:
        key: Backing key in the bag. Defaults to the logical name.
        name: Logical name used in property paths. Defaults to the camelCase
            form of the attribute name the declaration is bound to.
        required: Whether validation reports the key when never provided.
        path: Path segment used in validation errors instead of the name.
        message: Error message; ``{path}`` is replaced by the full path.
    """

    def __init__(
        self,
        key: str | None = None,
        *,
        name: str | None = None,
        required: bool = False,
        path: str | None = None,
        message: str | None = None,
    ) -> None:
        self._key = key
        self._name = name
        self.attr: str | None = None
        self.required = required
        self.path = path
        self.message = message

    def __set_name__(self, owner: type, attr: str) -> None:
        self.attr = attr

    @property
    def name(self) -> str:
        if self._name is not None:
            return self._name
        if self.attr is not None:
            return camelize(self.attr)
        if self._key is not None:
            return self._key
        raise ModelDefinitionError("Unbound declaration has neither a name nor a key")

    @property
    def segment(self) -> str:
        """Path segment naming this declaration in validation errors."""
        return self.path or self.name

    @property
    def key(self) -> str:
        return self._key if self._key is not None else self.name

    def requirement(self) -> Requirement | None:
        if not self.required:
            return None
        return Requirement(self, self.segment, self.message or MANDATORY_MESSAGE)

    def read(self, bag: PropertyBag) -> Any:
        raise NotImplementedError

    def is_missing(self, bag: PropertyBag) -> bool:
        """True when the value reads as unset and the key was never provided."""
        return not bag.has(self.key) and self.read(bag) is None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name or self.attr!r}, key={self._key!r})"


class Field(Declaration):
    """A scalar field with a value codec and an optional default."""

    def __init__(self, key: str | None = None, *, default: Any = None, **kwargs: Any) -> None:
        super().__init__(key, **kwargs)
        self.default = default

    def encode(self, value: Any) -> str:
        raise NotImplementedError

    def decode(self, wire: str) -> Any:
        raise NotImplementedError

    def read(self, bag: PropertyBag) -> Any:
        wire = bag.get(self.key)
        if wire is None:
            return self.default
        return self.decode(wire)

    def write(self, bag: PropertyBag, value: Any) -> None:
        # Encode first so a rejected value leaves the bag untouched
        bag.set(self.key, self.encode(value))

    def state(self, bag: PropertyBag) -> FieldState:
        if bag.has(self.key):
            return FieldState.CONFIGURED
        if self.default is not None:
            return FieldState.DEFAULTED
        return FieldState.UNSET

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.get_field(self)

    def __set__(self, instance: Any, value: Any) -> None:
        instance.set_field(self, value)

    def _reject(self, value: Any, reason: str) -> EncodeError:
        return EncodeError(f"Cannot set '{self.name}': {reason}", self.name, value)

    def _undecodable(self, wire: str, reason: str) -> DecodeError:
        return DecodeError(f"Cannot read '{self.name}' from key '{self.key}': {reason}", self.name, wire)


class StringField(Field):
    """Free-form string value stored verbatim."""

    def encode(self, value: Any) -> str:
        if not isinstance(value, str):
            raise self._reject(value, f"expected str, got {type(value).__name__}")
        return value

    def decode(self, wire: str) -> str:
        return wire


class IntField(Field):
    """Integer stored as a decimal string."""

    def encode(self, value: Any) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._reject(value, f"expected int, got {type(value).__name__}")
        return str(value)

    def decode(self, wire: str) -> int:
        if not _DECIMAL.fullmatch(wire):
            raise self._undecodable(wire, "not a decimal integer")
        return int(wire)


class BoolField(Field):
    """Boolean stored as one of two configurable wire strings.

    ``false_value`` may be empty, in which case a missing key and an empty
    value both mean false on the server side.
    """

    def __init__(
        self,
        key: str | None = None,
        *,
        true_value: str = "true",
        false_value: str = "false",
        **kwargs: Any,
    ) -> None:
        super().__init__(key, **kwargs)
        self.true_value = true_value
        self.false_value = false_value

    def encode(self, value: Any) -> str:
        if not isinstance(value, bool):
            raise self._reject(value, f"expected bool, got {type(value).__name__}")
        return self.true_value if value else self.false_value

    def decode(self, wire: str) -> bool:
        if wire == self.true_value and wire == self.false_value:
            raise self._undecodable(wire, "true and false share the same wire value")
        if wire == self.true_value:
            return True
        if wire == self.false_value:
            return False
        raise self._undecodable(wire, f"expected {self.true_value!r} or {self.false_value!r}")


class EnumField(Field):
    """Enum stored through a mapping table, or by member name without one."""

    def __init__(
        self,
        enum_cls: type[Enum],
        key: str | None = None,
        *,
        mapping: dict[Any, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(key, **kwargs)
        self.enum_cls = enum_cls
        self.mapping = dict(mapping) if mapping is not None else None
        self._reverse: dict[str, list[Enum]] = {}
        for member in enum_cls:
            wire = self._wire_for(member)
            if wire is not None:
                self._reverse.setdefault(wire, []).append(member)

    def _wire_for(self, member: Enum) -> str | None:
        if self.mapping is None:
            return member.name
        return self.mapping.get(member)

    def encode(self, value: Any) -> str:
        if not isinstance(value, self.enum_cls):
            raise self._reject(value, f"expected {self.enum_cls.__name__}")
        wire = self._wire_for(value)
        if wire is None:
            raise self._reject(value, f"{value.name} has no wire mapping")
        return wire

    def decode(self, wire: str) -> Enum:
        members = self._reverse.get(wire)
        if not members:
            raise self._undecodable(wire, f"unknown {self.enum_cls.__name__} value")
        if len(members) > 1:
            names = ", ".join(m.name for m in members)
            raise self._undecodable(wire, f"ambiguous, maps to {names}")
        return members[0]
