"""Configuration model and loader for gouse.

Configuration is optional: without a file every field uses its default,
which reproduces the classic behavior (``go build`` from PATH, system temp
directory, ``TODO: gouse`` markers).

The file is looked up in this order:
1. Explicit path (``--config``)
2. ``GOUSE_CONFIG`` environment variable
3. Built-in defaults

Environment variable substitution is supported in path-like fields via
${VAR} syntax.

Example:
    >>> config = GouseConfig(go_binary="${HOME}/sdk/go1.22/bin/go", timeout=120)
    >>> config.timeout
    120

"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gouse.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GOUSE_CONFIG"

# Config files are tiny; anything larger is a mistake.
MAX_CONFIG_SIZE = 64 * 1024

# Pattern for env var substitution: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _substitute_env_vars(value: str) -> str:
    """Substitute ${VAR} patterns with environment variable values.

    Args:
        value: String potentially containing ${VAR} patterns.

    Returns:
        String with env vars substituted. Missing vars become empty string.

    """

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name, "")
        if not env_value:
            logger.debug("Environment variable %s not set", var_name)
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


class GouseConfig(BaseModel):
    """Toggle engine configuration.

    Attributes:
        tool_name: Tag written into the marker comment (``TODO: <tool_name>``).
        go_binary: Go executable used for builds.
        build_flags: Extra flags inserted after ``go build -o <devnull>``.
        temp_dir: Root for temporary build directories (None = system default).
        workdir: Working directory of the build (None = current directory,
            so the caller's go.mod resolves imports).
        timeout: Seconds before a build is abandoned (None = no limit).

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tool_name: str = Field(
        default="gouse",
        pattern=r"^\w+$",
        description="Tag inside the TODO marker comment",
    )
    go_binary: str = Field(
        default="go",
        min_length=1,
        description="Go executable (${VAR} supported)",
    )
    build_flags: list[str] = Field(
        default_factory=list,
        description="Extra go build flags, e.g. -tags=integration",
    )
    temp_dir: str | None = Field(
        default=None,
        description="Root directory for temporary builds (${VAR} supported)",
    )
    workdir: str | None = Field(
        default=None,
        description="Working directory for go build (${VAR} supported)",
    )
    timeout: int | None = Field(
        default=None,
        ge=1,
        description="Build timeout in seconds (None = wait for completion)",
    )

    @field_validator("go_binary", "temp_dir", "workdir", mode="before")
    @classmethod
    def substitute_env_vars(cls, v: str | None) -> str | None:
        """Substitute ${VAR} patterns with environment variable values."""
        if v is None:
            return None
        return _substitute_env_vars(str(v))


def load_config(path: Path | None = None) -> GouseConfig:
    """Load and validate gouse configuration.

    Args:
        path: Path to a YAML config file. When None, ``$GOUSE_CONFIG`` is
            used if set, otherwise defaults are returned.

    Returns:
        Validated GouseConfig.

    Raises:
        ConfigError: On file/parse/validation errors.

    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
        if not env_path:
            logger.debug("No config file given, using defaults")
            return GouseConfig()
        path = Path(env_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    if not path.is_file():
        raise ConfigError(f"Config path is not a file: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read(MAX_CONFIG_SIZE + 1)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if len(content) > MAX_CONFIG_SIZE:
        raise ConfigError(f"Config file {path} exceeds 64KB limit")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # Empty file means "all defaults"
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    try:
        config = GouseConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed for {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config
