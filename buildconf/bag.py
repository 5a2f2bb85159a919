"""Ordered string-to-string property bag backing every configuration entity."""

from __future__ import annotations

from collections.abc import Iterator


class PropertyBag:
    """Ordered mapping of string keys to string values.

    A key is either present with a string value or absent. An empty string
    is a present value. There is no removal; entities only grow.
    """

    __slots__ = ("_params",)

    def __init__(self, params: dict[str, str] | None = None) -> None:
        self._params: dict[str, str] = {}
        if params:
            for key, value in params.items():
                self.set(key, value)

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        return self._params.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value. Overwriting keeps the key's original position."""
        if not isinstance(key, str):
            raise TypeError(f"property key must be str, got {type(key).__name__}")
        if not isinstance(value, str):
            raise TypeError(f"value of '{key}' must be str, got {type(value).__name__}")
        self._params[key] = value

    def has(self, key: str) -> bool:
        return key in self._params

    def copy(self) -> PropertyBag:
        """Structural copy: same keys, same values, same order."""
        clone = PropertyBag()
        clone._params = dict(self._params)
        return clone

    def items(self) -> list[tuple[str, str]]:
        return list(self._params.items())

    def to_dict(self) -> dict[str, str]:
        return dict(self._params)

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyBag):
            return NotImplemented
        # Order matters for serialized diffs
        return list(self._params.items()) == list(other._params.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(f"{k!r}: {v!r}" for k, v in self._params.items())
        return f"PropertyBag({{{inner}}})"
