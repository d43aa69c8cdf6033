from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader for the report generator.

Responsibilities:
- Load YAML config (default: config/reports.yml)
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults for every optional key
- Layer environment / CLI overrides on top (resolve_config)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/reports.yml")

DEFAULT_INPUT_FILE = "dpwh_flood_control_projects.csv"

ENV_INPUT_FILE = "FLOOD_REPORTS_INPUT"
ENV_OUTPUT_DIR = "FLOOD_REPORTS_OUTPUT_DIR"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class OutputConfig:
    region_report: str = "report1.csv"
    contractor_report: str = "report2.csv"
    work_type_report: str = "report3.csv"
    summary: str = "summary.json"


@dataclass(frozen=True)
class ReportConfig:
    input_file: str = DEFAULT_INPUT_FILE
    output_directory: str = "."
    encoding: str = "utf-8"
    outputs: OutputConfig = field(default_factory=OutputConfig)

    def output_path(self, name: str) -> Path:
        """Resolve an artifact file name against output_directory."""
        return Path(self.output_directory) / name


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing / not JSON, or the data violates it
            (missing input_file, unknown keys, wrong types, bad file suffix).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> ReportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    defaults = ReportConfig()
    outputs_raw = data.get("outputs", {})
    outputs = OutputConfig(**outputs_raw)
    return ReportConfig(
        input_file=data["input_file"],
        output_directory=data.get("output_directory", defaults.output_directory),
        encoding=data.get("encoding", defaults.encoding),
        outputs=outputs,
    )


def resolve_config(
    config_path: Path | None = None,
    *,
    input_file: str | None = None,
    output_directory: str | None = None,
) -> ReportConfig:
    """Build the effective config.

    Priority: explicit arguments > environment variables > YAML file > defaults.
    An explicit config_path must exist; when omitted, DEFAULT_CONFIG_PATH is
    used only if present.
    """
    if config_path is not None:
        cfg = load_config(config_path)
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = load_config(DEFAULT_CONFIG_PATH)
    else:
        cfg = ReportConfig()

    # 環境変数 (.env 読込済み) は YAML より優先
    env_input = os.getenv(ENV_INPUT_FILE)
    env_output = os.getenv(ENV_OUTPUT_DIR)
    if env_input:
        cfg = replace(cfg, input_file=env_input)
    if env_output:
        cfg = replace(cfg, output_directory=env_output)

    if input_file:
        cfg = replace(cfg, input_file=input_file)
    if output_directory:
        cfg = replace(cfg, output_directory=output_directory)
    return cfg
