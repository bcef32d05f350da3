"""Load the run configuration.

Precedence, lowest first: compiled-in defaults, the optional JSON config
file, then environment variables named by the catalog's env-name table.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .catalog import ENV_DATABASE, ENV_HOST, ENV_PASSWORD, ENV_PORT, ENV_USER
from .errors import ConfigParseError

logger = logging.getLogger(__name__)

DEFAULT_DB_TYPE = "mysql"


class Configuration(BaseModel):
    """Settings for one generator run."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    db_type: str = Field(DEFAULT_DB_TYPE, description="Catalog kind")
    db_user: str = Field("", description="Database user")
    db_password: str = Field("", description="Database password")
    db_name: str = Field("", description="Schema whose tables are generated")
    db_host: str = Field("", description="Database host; empty shows usage")
    db_port: int = Field(3306, description="Database port")
    output_file: str = Field("", description="Output path; empty writes to stdout")
    pkg_name: str = Field("main", description="Go package name of the output")
    # Key of the struct-field tag mapping fields to columns, e.g. "sql" or "gorm"
    sql_tag: str = Field("", description="Struct-field tag key")
    # Free text added as a comment line above each struct
    struct_tag: str = Field("", description="Per-struct doc tag")


def _read_json(path: Path) -> dict[str, Any]:
    """Read a JSON object from disk."""
    try:
        with open(path) as f:
            data = json.load(f)
    except OSError as exc:
        raise ConfigParseError(f"cannot read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigParseError(f"malformed config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigParseError(f"config file {path} must contain a JSON object")
    return data


def load_config(path: Path | None = None) -> Configuration:
    """Build a Configuration from defaults and an optional JSON file."""
    data: dict[str, Any] = {}
    if path is not None:
        data = _read_json(path)
        logger.info("Loaded config file %s", path)

    try:
        config = Configuration.model_validate(data)
    except ValidationError as exc:
        raise ConfigParseError(f"invalid config: {exc}") from exc

    if not config.db_type:
        config = config.model_copy(update={"db_type": DEFAULT_DB_TYPE})
    return config


def override_by_env(
    config: Configuration,
    env_names: Mapping[str, str],
    environ: Mapping[str, str],
) -> Configuration:
    """Return a copy of config with settings overridden by set env vars."""
    fields = {
        ENV_HOST: "db_host",
        ENV_DATABASE: "db_name",
        ENV_USER: "db_user",
        ENV_PASSWORD: "db_password",
    }
    updates: dict[str, Any] = {}

    for key, field in fields.items():
        name = env_names[key]
        if name in environ:
            updates[field] = environ[name]

    port_name = env_names[ENV_PORT]
    if port_name in environ:
        try:
            updates["db_port"] = int(environ[port_name])
        except ValueError as exc:
            raise ConfigParseError(f"parse error {port_name}, {exc}") from exc

    if updates:
        logger.debug("Environment overrides: %s", ", ".join(sorted(updates)))
    return config.model_copy(update=updates)
