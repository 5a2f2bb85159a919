"""buildconf exception hierarchy."""

from typing import Any


class BuildConfError(Exception):
    """Base exception for all buildconf errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(BuildConfError):
    """Error in buildconf configuration."""

    pass


class ModelDefinitionError(BuildConfError):
    """Invalid entity, field or variant declaration."""

    pass


class CodecError(BuildConfError):
    """Base error for field value conversion."""

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.field = field


class EncodeError(CodecError):
    """A typed value cannot be represented under a field's codec."""

    def __init__(self, message: str, field: str, value: Any) -> None:
        super().__init__(message, field, {"value": repr(value)})
        self.value = value


class DecodeError(CodecError):
    """A stored wire value cannot be decoded to the field's type."""

    def __init__(self, message: str, field: str, wire_value: str) -> None:
        super().__init__(message, field, {"wire_value": wire_value})
        self.wire_value = wire_value


class BaseTypeMismatchError(BuildConfError):
    """Base entity type differs from the derived entity type."""

    def __init__(self, message: str, expected: str, actual: str) -> None:
        super().__init__(message, {"expected": expected, "actual": actual})
        self.expected = expected
        self.actual = actual


class DocumentError(BuildConfError):
    """Entity document could not be read or is malformed."""

    def __init__(self, message: str, source: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.source = source


class EntityValidationError(BuildConfError):
    """Entity has unmet required properties."""

    def __init__(self, message: str, errors: list[Any]) -> None:
        super().__init__(message, {"errors": [str(e) for e in errors]})
        self.errors = errors
