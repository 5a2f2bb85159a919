"""Presence validation of entities and their active variants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from buildconf.exceptions import EntityValidationError
from buildconf.logging import get_logger

if TYPE_CHECKING:
    from buildconf.entity import Entity
    from buildconf.node import Node

__all__ = ["PropertyError", "ValidationReport", "collect_errors"]

logger = get_logger("validation")


@dataclass(frozen=True)
class PropertyError:
    """A required property that was never provided."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def collect_errors(root: Node) -> list[PropertyError]:
    """Evaluate every requirement of ``root`` and of its active variants.

    Each node reports its own rules in declaration order before its slots
    are visited, slot by slot, depth first. Unknown variants carry no rules
    and inactive variants are never visited, so stale keys left in the bag by
    an earlier selection are ignored.
    """
    from buildconf.variants import UnknownVariant

    errors: list[PropertyError] = []
    stack: list[tuple[Node, tuple[str, ...]]] = [(root, ())]
    while stack:
        node, prefix = stack.pop()
        bag = node.bag
        for req in type(node).requirements():
            if req.target.is_missing(bag):
                path = ".".join((*prefix, req.segment))
                errors.append(PropertyError(path, req.message.replace("{path}", path)))

        children = []
        for slot in type(node).slots():
            variant = slot.resolve(bag)
            if variant is None or isinstance(variant, UnknownVariant):
                continue
            children.append((variant, (*prefix, slot.segment)))
        stack.extend(reversed(children))
    return errors


@dataclass(frozen=True)
class ValidationReport:
    """Validation outcome of one entity."""

    entity_type: str
    entity_id: str | None
    errors: tuple[PropertyError, ...]

    @classmethod
    def for_entity(cls, entity: Entity) -> ValidationReport:
        errors = tuple(entity.validate())
        if errors:
            logger.debug("%s has %d unmet requirement(s)", entity.type, len(errors))
        return cls(entity.type, entity.id, errors)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def paths(self) -> list[str]:
        return [e.path for e in self.errors]

    def raise_for_errors(self) -> None:
        """Raise EntityValidationError carrying every error, if any."""
        if self.errors:
            raise EntityValidationError(
                f"Entity '{self.entity_id or self.entity_type}' has {len(self.errors)} missing properties",
                list(self.errors),
            )
