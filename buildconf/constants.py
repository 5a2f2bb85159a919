"""buildconf constants and enumerations."""

from enum import Enum

# Configuration
CONFIG_DIR = ".buildconf"
CONFIG_FILE = "config.yaml"
LOG_FILE = "buildconf.log"

# Wire conventions
SECURE_PREFIX = "secure:"
SECRET_MASK = "******"
OAUTH_PROVIDER_TYPE = "OAuthProvider"
PROVIDER_TYPE_KEY = "providerType"

# Default requirement message; {path} is the dotted property path
MANDATORY_MESSAGE = "mandatory '{path}' property is not specified"


class EntityKind(Enum):
    """Kind of configuration entity, as named in entity documents."""

    BUILD_STEP = "buildStep"
    BUILD_FEATURE = "buildFeature"
    PROJECT_FEATURE = "projectFeature"


class FieldState(Enum):
    """How a field's current value came about."""

    UNSET = "unset"  # never written, no default
    DEFAULTED = "defaulted"  # never written, default applies
    CONFIGURED = "configured"  # backing key present, even if equal to default
