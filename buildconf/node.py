"""Common base for entities and variants: a typed view over a PropertyBag."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from buildconf.constants import FieldState
from buildconf.fields import Declaration, Field, Requirement

if TYPE_CHECKING:
    from collections.abc import Callable

    from buildconf.bag import PropertyBag
    from buildconf.variants import Variant, VariantSlot


class Node:
    """Typed accessors bound to one PropertyBag.

    Subclasses declare fields and variant slots as class attributes. The
    declarations of a class, including inherited and mixed-in ones, are
    gathered once when the class is created and kept in declaration order.
    """

    _declarations: ClassVar[tuple[Declaration, ...]] = ()
    _requirements: ClassVar[tuple[Requirement, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table: dict[str, Declaration] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                if isinstance(value, Declaration):
                    table[attr] = value
        cls._declarations = tuple(table.values())
        cls._requirements = tuple(
            req for req in (d.requirement() for d in cls._declarations) if req is not None
        )

    def __init__(self, bag: PropertyBag) -> None:
        self._bag = bag

    @property
    def bag(self) -> PropertyBag:
        """The live bag this node reads from and writes to."""
        return self._bag

    @classmethod
    def fields(cls) -> tuple[Field, ...]:
        return tuple(d for d in cls._declarations if isinstance(d, Field))

    @classmethod
    def slots(cls) -> tuple[VariantSlot, ...]:
        from buildconf.variants import VariantSlot

        return tuple(d for d in cls._declarations if isinstance(d, VariantSlot))

    @classmethod
    def requirements(cls) -> tuple[Requirement, ...]:
        return cls._requirements

    def get_field(self, field: Field) -> Any:
        """Decoded value, else the field default, else None."""
        return field.read(self._bag)

    def set_field(self, field: Field, value: Any) -> None:
        field.write(self._bag, value)

    def field_state(self, field: Field) -> FieldState:
        return field.state(self._bag)

    def param(self, key: str, value: str) -> None:
        """Write a raw property, bypassing any codec."""
        self._bag.set(key, value)

    def has_param(self, key: str) -> bool:
        return self._bag.has(key)

    def select(
        self,
        slot: VariantSlot,
        variant_cls: type[Variant],
        init: Callable[[Any], None] | None = None,
    ) -> Variant:
        """Activate a variant of ``slot`` and return it bound to this bag."""
        return slot.select(self._bag, variant_cls, init)

    def active_variant(self, slot: VariantSlot) -> Variant | None:
        return slot.resolve(self._bag)
