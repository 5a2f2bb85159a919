"""buildconf - typed CI build configuration entities.

Declare build steps, build features and project features once, fill them
through typed fields, and validate them before they reach the CI server.
"""

__version__ = "0.1.0"
__author__ = "buildconf Team"

from buildconf.bag import PropertyBag
from buildconf.constants import EntityKind, FieldState
from buildconf.entity import BuildFeature, BuildStep, Connection, Entity, EntityDescriptor, ProjectFeature
from buildconf.exceptions import (
    BaseTypeMismatchError,
    BuildConfError,
    DecodeError,
    EncodeError,
    ModelDefinitionError,
)
from buildconf.fields import BoolField, EnumField, IntField, StringField
from buildconf.validation import PropertyError, ValidationReport
from buildconf.variants import UnknownVariant, Variant, VariantSlot

__all__ = [
    "__version__",
    "PropertyBag",
    "EntityKind",
    "FieldState",
    # Entities
    "Entity",
    "EntityDescriptor",
    "BuildStep",
    "BuildFeature",
    "ProjectFeature",
    "Connection",
    # Fields and variants
    "StringField",
    "IntField",
    "BoolField",
    "EnumField",
    "Variant",
    "VariantSlot",
    "UnknownVariant",
    # Validation
    "PropertyError",
    "ValidationReport",
    # Errors
    "BuildConfError",
    "EncodeError",
    "DecodeError",
    "BaseTypeMismatchError",
    "ModelDefinitionError",
]
