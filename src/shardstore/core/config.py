"""Configuration schema and loading for shardstore.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are immutable after construction.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

# chmod modes: 3-4 octal digits, or comma-separated symbolic clauses (u+rw,go-w)
_OCTAL_MODE = re.compile(r"^[0-7]{3,4}$")
_SYMBOLIC_MODE = re.compile(r"^[ugoa]*[-+=][rwxXst]*(,[ugoa]*[-+=][rwxXst]*)*$")


class StoreSettings(BaseModel):
    """Blob store configuration."""

    model_config = {"frozen": True}

    root_path: Path = Field(
        default=Path(".shardstore/blobs"),
        description="Root directory of the store (created if missing)",
    )
    id_generator: Literal["uuid", "sequential"] = Field(
        default="uuid",
        description="Identifier generation strategy",
    )
    path_layout: Literal["dash", "fixed"] = Field(
        default="dash",
        description="Directory sharding strategy: split on dashes or every segment_width characters",
    )
    segment_width: int = Field(default=4, gt=0, description="Component width for the fixed layout")
    owner: str | None = Field(default=None, description="chown target for new blobs (user or user:group)")
    permissions: str | None = Field(default=None, description="chmod mode for new blobs, e.g. '0640'")
    ownership_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for each chown/chmod; unset waits indefinitely",
    )
    chunk_size: int = Field(default=1024 * 1024, gt=0, description="Copy buffer size in bytes")
    fsync: bool = Field(default=True, description="fsync blob contents before create returns")

    @field_validator("owner", "permissions", mode="before")
    @classmethod
    def blank_is_unset(cls, v: Any) -> Any:
        """Treat empty strings from YAML or environment as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("owner")
    @classmethod
    def validate_owner(cls, v: str | None) -> str | None:
        if v is not None and (any(c.isspace() for c in v) or v.count(":") > 1 or v.startswith("-")):
            raise ValueError(f"owner must be 'user' or 'user:group', got {v!r}")
        return v

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v: str | None) -> str | None:
        if v is not None and not (_OCTAL_MODE.match(v) or _SYMBOLIC_MODE.match(v)):
            raise ValueError(f"permissions must be an octal mode like '0640' or a symbolic mode like 'u+rw', got {v!r}")
        return v


class LoggingSettings(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Root log level")
    json_output: bool = Field(default=False, description="Emit JSON lines instead of console output")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class ShardStoreSettings(BaseModel):
    """Top-level configuration.

    All settings are validated and frozen after construction.
    """

    model_config = {"frozen": True}

    store: StoreSettings = Field(default_factory=StoreSettings, description="Blob store configuration")
    logging: LoggingSettings = Field(default_factory=LoggingSettings, description="Logging configuration")


# ${VAR} or ${VAR:-fallback}; names follow shell rules, uppercase only
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _substitute_env(match: re.Match[str]) -> str:
    name, fallback = match.group(1), match.group(2)
    if name in os.environ:
        return os.environ[name]
    if fallback is not None:
        return fallback
    # Left as written so validation reports the unresolved reference
    return match.group(0)


def _expand_env_vars(value: Any) -> Any:
    """Substitute environment references in every string of a settings tree.

    Lets a settings file say ``root_path: ${BLOB_ROOT:-/var/lib/blobs}``.
    Dicts and lists are rebuilt; other values are returned unchanged.
    """
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(_substitute_env, value)
    if isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value


def load_settings(config_path: Path) -> ShardStoreSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (SHARDSTORE_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: SHARDSTORE_STORE__ROOT_PATH for nested keys.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="SHARDSTORE",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    raw_config = _expand_env_vars(raw_config)

    return ShardStoreSettings(**raw_config)
