"""Variant (compound) parameters: a discriminator plus variant-specific fields.

A variant family is a direct subclass of :class:`Variant` without a
``discriminator``. Each concrete variant subclasses its family and sets a
unique ``discriminator``; it is registered in the family when the class is
created. A :class:`VariantSlot` on an entity or on another variant names the
selector key and the family it accepts.

Nested fields are not prefixed. Every field keeps its own backing key in the
owner's flat bag, so selecting another variant leaves the previous
variant's keys in place.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, ClassVar

from buildconf.bag import PropertyBag
from buildconf.exceptions import EncodeError, ModelDefinitionError
from buildconf.fields import Declaration
from buildconf.logging import get_logger
from buildconf.node import Node

__all__ = ["UnknownVariant", "Variant", "VariantSlot", "active_selections"]

logger = get_logger("variants")


class Variant(Node):
    """One shape of a polymorphic parameter."""

    discriminator: ClassVar[str]
    _registry: ClassVar[dict[str, type[Variant]]]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "discriminator" not in cls.__dict__:
            cls._registry = {}
            return

        family = next((k for k in cls.__mro__[1:] if "_registry" in k.__dict__), None)
        if family is None:
            raise ModelDefinitionError(
                f"Variant {cls.__name__} has a discriminator but no family",
                {"discriminator": cls.discriminator},
            )
        if cls.discriminator in family._registry:
            raise ModelDefinitionError(
                f"Duplicate discriminator in family {family.__name__}",
                {
                    "discriminator": cls.discriminator,
                    "existing": family._registry[cls.discriminator].__name__,
                    "new": cls.__name__,
                },
            )
        family._registry[cls.discriminator] = cls

    @classmethod
    def family_of(cls) -> type[Variant]:
        """The family class whose registry holds this variant."""
        for klass in cls.__mro__:
            if "_registry" in klass.__dict__:
                return klass
        raise ModelDefinitionError(f"{cls.__name__} does not belong to a variant family")

    @classmethod
    def variants(cls) -> dict[str, type[Variant]]:
        """Discriminator to class mapping of this family."""
        return dict(cls.family_of()._registry)

    @classmethod
    def lookup(cls, discriminator: str) -> type[Variant] | None:
        return cls.family_of()._registry.get(discriminator)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(discriminator={self.discriminator!r})"


class UnknownVariant(Variant):
    """A discriminator with no registered shape, kept as-is.

    Produced on read-back when the bag holds a tag this version does not
    know. It declares no fields and no rules, so validation skips it.
    """

    def __init__(self, bag: PropertyBag, discriminator: str) -> None:
        super().__init__(bag)
        self.discriminator = discriminator  # type: ignore[misc]


class VariantSlot(Declaration):
    """A typed slot holding at most one active variant of ``family``.

    Args:
        key: Selector key receiving the discriminator.
        family: Variant family class accepted by this slot.
    """

    def __init__(self, key: str, family: type[Variant], **kwargs: Any) -> None:
        super().__init__(key, **kwargs)
        if "_registry" not in family.__dict__:
            raise ModelDefinitionError(f"{family.__name__} is not a variant family")
        self.family = family

    def active_discriminator(self, bag: PropertyBag) -> str | None:
        return bag.get(self.key)

    def read(self, bag: PropertyBag) -> Variant | None:
        return self.resolve(bag)

    def resolve(self, bag: PropertyBag) -> Variant | None:
        """Active variant bound to ``bag``; unknown tags give UnknownVariant."""
        discriminator = self.active_discriminator(bag)
        if discriminator is None:
            return None
        variant_cls = self.family._registry.get(discriminator)
        if variant_cls is None:
            return UnknownVariant(bag, discriminator)
        return variant_cls(bag)

    def select(
        self,
        bag: PropertyBag,
        variant_cls: type[Variant],
        init: Callable[[Any], None] | None = None,
    ) -> Variant:
        """Write ``variant_cls``'s discriminator and return the bound variant.

        Keys written by a previously selected variant are not cleared.
        """
        tag = getattr(variant_cls, "discriminator", None)
        if not isinstance(variant_cls, type) or self.family._registry.get(tag) is not variant_cls:
            label = getattr(variant_cls, "__name__", repr(variant_cls))
            raise EncodeError(
                f"Cannot select {label} for '{self.name}': not a variant of {self.family.__name__}",
                self.name,
                variant_cls,
            )
        previous = bag.get(self.key)
        bag.set(self.key, variant_cls.discriminator)
        if previous is not None and previous != variant_cls.discriminator:
            logger.debug("Slot %s switched from %r to %r", self.name, previous, variant_cls.discriminator)
        variant = variant_cls(bag)
        if init is not None:
            init(variant)
        return variant

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.active_variant(self)

    def __set__(self, instance: Any, value: type[Variant]) -> None:
        instance.select(self, value)


def active_selections(root: Node) -> Iterator[tuple[str, Variant]]:
    """Yield ``(path, variant)`` for every active variant below ``root``.

    Unknown variants are yielded but not descended into.
    """
    stack: list[tuple[Node, tuple[str, ...]]] = [(root, ())]
    while stack:
        node, prefix = stack.pop()
        children = []
        for slot in type(node).slots():
            variant = slot.resolve(node.bag)
            if variant is not None:
                children.append((variant, (*prefix, slot.segment)))
        for variant, path in children:
            yield ".".join(path), variant
        stack.extend(
            (variant, path) for variant, path in reversed(children) if not isinstance(variant, UnknownVariant)
        )
