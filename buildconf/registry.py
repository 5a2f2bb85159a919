"""Registry resolving stored entity types back to entity classes."""

from __future__ import annotations

from buildconf.bag import PropertyBag
from buildconf.constants import EntityKind
from buildconf.entity import Entity
from buildconf.exceptions import DocumentError, ModelDefinitionError
from buildconf.logging import get_logger
from buildconf.node import Node

__all__ = ["EntityRegistry", "UnknownEntity", "default_registry"]

logger = get_logger("registry")


class UnknownEntity(Entity):
    """Entity whose type has no registered class.

    Its params are kept verbatim and it declares no requirements, so it
    always validates clean.
    """

    def __init__(
        self,
        kind: EntityKind,
        entity_type: str,
        params: dict[str, str] | PropertyBag,
        *,
        id: str | None = None,
    ) -> None:
        bag = params.copy() if isinstance(params, PropertyBag) else PropertyBag(params)
        Node.__init__(self, bag)
        self.id = id
        self.kind = kind  # type: ignore[misc]
        self.type = entity_type  # type: ignore[misc]


class EntityRegistry:
    """Maps entity types (and fixed params, for connections) to classes."""

    def __init__(self) -> None:
        self._by_type: dict[str, list[type[Entity]]] = {}

    def register(self, entity_cls: type[Entity]) -> type[Entity]:
        """Register an entity class. Usable as a class decorator."""
        entity_cls._check_declared()
        candidates = self._by_type.setdefault(entity_cls.type, [])
        fixed = entity_cls.fixed_params()
        for existing in candidates:
            if existing.fixed_params() == fixed:
                raise ModelDefinitionError(
                    f"Entity type '{entity_cls.type}' is already registered",
                    {"existing": existing.__name__, "new": entity_cls.__name__},
                )
        candidates.append(entity_cls)
        logger.debug("Registered %s as %s", entity_cls.__name__, entity_cls.type)
        return entity_cls

    def get(self, entity_type: str, params: dict[str, str] | PropertyBag | None = None) -> type[Entity] | None:
        """Class registered for ``entity_type`` whose fixed params match."""
        params = params if params is not None else {}
        for candidate in self._by_type.get(entity_type, []):
            if all(params.get(k) == v for k, v in candidate.fixed_params().items()):
                return candidate
        return None

    def entity_classes(self) -> list[type[Entity]]:
        return [cls for group in self._by_type.values() for cls in group]

    def restore(
        self,
        kind: EntityKind,
        entity_type: str,
        params: dict[str, str],
        *,
        id: str | None = None,
        strict: bool = False,
    ) -> Entity:
        """Rebuild a stored entity.

        Args:
            kind: Kind the entity was stored under.
            entity_type: Stored type discriminator.
            params: Stored params in their original order.
            id: Optional entity id.
            strict: Reject unregistered types instead of keeping them opaque.

        Raises:
            DocumentError: If the registered class is of another kind, or the
                type is unknown and ``strict`` is set.
        """
        entity_cls = self.get(entity_type, params)
        if entity_cls is None:
            if strict:
                raise DocumentError(f"Unknown entity type '{entity_type}'", details={"kind": kind.value})
            logger.info("Keeping unknown entity type %s as-is", entity_type)
            return UnknownEntity(kind, entity_type, params, id=id)
        if entity_cls.kind is not kind:
            raise DocumentError(
                f"Entity type '{entity_type}' is a {entity_cls.kind.value}, not a {kind.value}",
                details={"type": entity_type},
            )
        return entity_cls.from_params(params, id=id)


_default: EntityRegistry | None = None


def default_registry() -> EntityRegistry:
    """Registry holding every entity of the bundled catalogue."""
    global _default
    if _default is None:
        from buildconf.catalog import CATALOG

        registry = EntityRegistry()
        for entity_cls in CATALOG:
            registry.register(entity_cls)
        _default = registry
    return _default
