"""Configuration entities: build steps, build features, project features.

An entity owns a PropertyBag and a type discriminator fixed by its class.
It is built either fresh or from a base entity whose bag is copied before
the caller's ``init`` closure runs::

    common = PullRequests(lambda pr: pr.select(PullRequests.provider, GitHub))
    derived = PullRequests.from_base(common, lambda pr: pr.param("vcsRootId", "Root1"))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar

from buildconf.bag import PropertyBag
from buildconf.constants import OAUTH_PROVIDER_TYPE, PROVIDER_TYPE_KEY, EntityKind
from buildconf.exceptions import BaseTypeMismatchError, ModelDefinitionError
from buildconf.logging import get_entity_logger
from buildconf.node import Node
from buildconf.validation import PropertyError, collect_errors

__all__ = [
    "BuildFeature",
    "BuildStep",
    "Connection",
    "Entity",
    "EntityDescriptor",
    "ProjectFeature",
]

E = TypeVar("E", bound="Entity")


def _type_label(entity_type: str, fixed: dict[str, str | None]) -> str:
    if not fixed:
        return entity_type
    qualifiers = ", ".join(f"{k}={v}" for k, v in fixed.items())
    return f"{entity_type}[{qualifiers}]"


@dataclass(frozen=True)
class EntityDescriptor:
    """What an entity hands to a serializer."""

    kind: EntityKind
    type: str
    id: str | None
    params: PropertyBag


class Entity(Node):
    """Base of all configuration entities.

    Subclasses set ``type`` and declare their fields and variant slots.
    """

    kind: ClassVar[EntityKind]
    type: ClassVar[str]

    def __init__(self, init: Callable[[Any], None] | None = None, *, id: str | None = None) -> None:
        self._check_declared()
        super().__init__(PropertyBag(self.fixed_params()))
        self.id = id
        if init is not None:
            init(self)

    @classmethod
    def _check_declared(cls) -> None:
        declared = getattr(cls, "type", None)
        if not isinstance(declared, str) or not declared:
            raise ModelDefinitionError(f"{cls.__name__} does not declare an entity type")

    @classmethod
    def fixed_params(cls) -> dict[str, str]:
        """Params written on fresh construction, before ``init`` runs."""
        return {}

    @classmethod
    def from_base(
        cls: type[E],
        base: Entity,
        init: Callable[[Any], None] | None = None,
        *,
        id: str | None = None,
    ) -> E:
        """Copy ``base``'s bag, then apply ``init`` to the copy.

        Raises:
            BaseTypeMismatchError: If ``base`` has a different type.
        """
        cls._check_declared()
        fixed = cls.fixed_params()
        if base.type != cls.type or any(base.bag.get(k) != v for k, v in fixed.items()):
            actual = _type_label(base.type, {k: base.bag.get(k) for k in fixed})
            raise BaseTypeMismatchError(
                f"Cannot derive {cls.__name__} from a '{actual}' entity",
                expected=_type_label(cls.type, fixed),
                actual=actual,
            )
        entity = cls._restore(base.bag.copy(), id)
        get_entity_logger(cls.type, id).debug("Derived from base with %d params", len(entity.bag))
        if init is not None:
            init(entity)
        return entity

    @classmethod
    def from_params(cls: type[E], params: dict[str, str] | PropertyBag, *, id: str | None = None) -> E:
        """Rebuild an entity from stored params, keeping their order.

        Fixed params are not written; they are expected among ``params``.
        """
        cls._check_declared()
        bag = params.copy() if isinstance(params, PropertyBag) else PropertyBag(params)
        return cls._restore(bag, id)

    @classmethod
    def _restore(cls: type[E], bag: PropertyBag, id: str | None) -> E:
        entity = cls.__new__(cls)
        Node.__init__(entity, bag)
        entity.id = id
        return entity

    def validate(self) -> list[PropertyError]:
        """All unmet requirements of this entity and its active variants."""
        return collect_errors(self)

    def to_property_bag(self) -> PropertyBag:
        """Copy of the current bag for the serializer."""
        return self._bag.copy()

    def describe(self) -> EntityDescriptor:
        return EntityDescriptor(self.kind, self.type, self.id, self.to_property_bag())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type={self.type!r}, id={self.id!r}, params={len(self._bag)})"


class BuildStep(Entity):
    """A step executed by a build runner."""

    kind = EntityKind.BUILD_STEP
    name: str | None = None

    def __init__(
        self,
        init: Callable[[Any], None] | None = None,
        *,
        id: str | None = None,
        name: str | None = None,
    ) -> None:
        self.name = name
        super().__init__(init, id=id)

    @classmethod
    def from_base(
        cls: type[E],
        base: Entity,
        init: Callable[[Any], None] | None = None,
        *,
        id: str | None = None,
    ) -> E:
        # Set before init so the closure may rename the step
        def with_name(step: Any) -> None:
            step.name = getattr(base, "name", None)
            if init is not None:
                init(step)

        return super().from_base(base, with_name, id=id)


class BuildFeature(Entity):
    """A feature attached to a build configuration."""

    kind = EntityKind.BUILD_FEATURE


class ProjectFeature(Entity):
    """A feature attached to a project."""

    kind = EntityKind.PROJECT_FEATURE


class Connection(ProjectFeature):
    """A project-level connection to an external service.

    All connections share the ``OAuthProvider`` type and are told apart by
    their fixed ``providerType`` param.
    """

    type = OAUTH_PROVIDER_TYPE
    provider_type: ClassVar[str]

    @classmethod
    def fixed_params(cls) -> dict[str, str]:
        provider_type = getattr(cls, "provider_type", None)
        if provider_type is None:
            raise ModelDefinitionError(f"{cls.__name__} does not declare a provider type")
        return {PROVIDER_TYPE_KEY: provider_type}
