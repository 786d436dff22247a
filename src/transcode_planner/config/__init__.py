"""Configuration management for the transcode planner.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Named profile (--profile, ~/.tplan/profiles/<name>.yaml)
3. Environment variables (TPLAN_*)
4. Config file (~/.tplan/config.toml)
5. Default values (lowest priority)
"""

from transcode_planner.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from transcode_planner.config.env import EnvReader
from transcode_planner.config.loader import (
    ConfigError,
    apply_cli_overrides,
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
    validate_config,
)
from transcode_planner.config.logging_factory import build_logging_config
from transcode_planner.config.models import (
    LiveTranscodingConfig,
    LocksConfig,
    LoggingConfig,
    PlannerConfig,
    Profile,
    ToolPathsConfig,
    TranscodingConfig,
)
from transcode_planner.config.profiles import (
    ProfileError,
    ProfileNotFoundError,
    list_profiles,
    load_profile,
    merge_profile_with_config,
)
from transcode_planner.config.toml_parser import (
    TomlParseError,
    load_toml_file,
    parse_toml,
)

__all__ = [
    # Models
    "LiveTranscodingConfig",
    "LocksConfig",
    "LoggingConfig",
    "PlannerConfig",
    "Profile",
    "ToolPathsConfig",
    "TranscodingConfig",
    # Loader
    "ConfigError",
    "apply_cli_overrides",
    "clear_config_cache",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    "validate_config",
    # Builder
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "source_from_env",
    "source_from_file",
    # Profiles
    "ProfileError",
    "ProfileNotFoundError",
    "list_profiles",
    "load_profile",
    "merge_profile_with_config",
    # Factories and parsing
    "TomlParseError",
    "build_logging_config",
    "load_toml_file",
    "parse_toml",
]
