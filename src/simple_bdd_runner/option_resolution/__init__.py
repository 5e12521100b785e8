"""Option resolution domain exports."""

from .argument_tokenizer import tokenize_arguments
from .formatter_specs import (
    CONSOLE_CONFLICT_MESSAGE,
    FormatterSpecBuilder,
    merge_formatter_specs,
    parse_formatter_value,
)
from .option_resolver import (
    DEFAULT_PROFILE_NAME,
    DEFAULT_PUBLISH_URL,
    OptionResolver,
    build_settings,
    merge_layers,
)
from .profile_loading import (
    DEFAULT_PROFILES_FILENAME,
    ProfileLoader,
    file_profile_source,
)
from .profile_scaffold_builder import build_placeholder_profiles, write_placeholder_profiles
from .resolution_errors import (
    ConfigurationConflictError,
    ConfigurationError,
    InvalidArgumentError,
    ProfileFileError,
    ProfileNotFoundError,
)
from .runtime_settings import FormatterSpec, OptionLayer, Settings, StrictConfiguration
from .tag_limits import merge_tag_limits, normalize_tag_expressions

__all__ = [
    "CONSOLE_CONFLICT_MESSAGE",
    "DEFAULT_PROFILE_NAME",
    "DEFAULT_PROFILES_FILENAME",
    "DEFAULT_PUBLISH_URL",
    "ConfigurationConflictError",
    "ConfigurationError",
    "FormatterSpec",
    "FormatterSpecBuilder",
    "InvalidArgumentError",
    "OptionLayer",
    "OptionResolver",
    "ProfileFileError",
    "ProfileLoader",
    "ProfileNotFoundError",
    "Settings",
    "StrictConfiguration",
    "build_placeholder_profiles",
    "build_settings",
    "file_profile_source",
    "merge_formatter_specs",
    "merge_layers",
    "merge_tag_limits",
    "normalize_tag_expressions",
    "parse_formatter_value",
    "tokenize_arguments",
    "write_placeholder_profiles",
]
