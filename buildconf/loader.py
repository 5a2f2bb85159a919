"""Read entity documents from YAML and rebuild entities from them."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from buildconf.constants import EntityKind
from buildconf.entity import Entity
from buildconf.exceptions import DocumentError
from buildconf.logging import get_logger
from buildconf.registry import EntityRegistry, default_registry

__all__ = ["EntityDocument", "load_documents", "load_entities", "parse_documents"]

logger = get_logger("loader")


class EntityDocument(BaseModel):
    """One stored entity: kind, type, optional id and ordered params."""

    kind: EntityKind
    type: str = Field(min_length=1)
    id: str | None = None
    params: dict[str, str] = Field(default_factory=dict)

    @field_validator("params", mode="before")
    @classmethod
    def _stringify_params(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        result: dict[str, Any] = {}
        for key, raw in value.items():
            if isinstance(raw, bool):
                result[str(key)] = "true" if raw else "false"
            elif isinstance(raw, float):
                # 1.10 would come back as "1.1"
                raise ValueError(f"param '{key}' is a float; quote it to keep its exact text")
            elif isinstance(raw, int):
                result[str(key)] = str(raw)
            else:
                result[str(key)] = raw
        return result


def parse_documents(data: Any, source: str | None = None) -> list[EntityDocument]:
    """Validate already-parsed YAML data into entity documents.

    Accepts a single document mapping, a list of them, or a mapping with an
    ``entities`` list.
    """
    if isinstance(data, dict) and "entities" in data:
        data = data["entities"]
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise DocumentError("Expected an entity document or a list of them", source)

    documents: list[EntityDocument] = []
    for index, item in enumerate(data):
        try:
            documents.append(EntityDocument.model_validate(item))
        except PydanticValidationError as e:
            raise DocumentError(
                f"Invalid entity document #{index + 1}",
                source,
                {"error": str(e)},
            ) from e
    return documents


def load_documents(path: str | Path) -> list[EntityDocument]:
    """Read entity documents from a YAML file.

    Raises:
        DocumentError: If the file is missing, not YAML, or malformed.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise DocumentError(f"Entity document not found: {path}", str(path)) from e
    except yaml.YAMLError as e:
        raise DocumentError(f"Invalid YAML in {path}", str(path), {"error": str(e)}) from e

    documents = parse_documents(data, str(path))
    logger.debug("Loaded %d entity document(s) from %s", len(documents), path)
    return documents


def load_entities(
    path: str | Path,
    registry: EntityRegistry | None = None,
    strict: bool = False,
) -> list[Entity]:
    """Read a YAML file and rebuild each document as an entity.

    Args:
        path: YAML file with one or more entity documents.
        registry: Registry used to resolve types. Defaults to the catalogue.
        strict: Reject unregistered entity types.

    Returns:
        Entities in document order.
    """
    registry = registry or default_registry()
    return [
        registry.restore(doc.kind, doc.type, doc.params, id=doc.id, strict=strict)
        for doc in load_documents(path)
    ]
