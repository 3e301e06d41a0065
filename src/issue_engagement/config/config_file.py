# src/issue_engagement/config/config_file.py

"""Loads engagement configuration from `.triagerc.yml`."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..engine.weights import EngagementWeights, UserGroups, normalize_weights

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (".triagerc.yml", ".github/.triagerc.yml")


class EngagementConfig(BaseModel):
    """The `engagement` section of the configuration file."""

    model_config = ConfigDict(frozen=True)

    weights: EngagementWeights = Field(default_factory=EngagementWeights)
    groups: UserGroups = Field(default_factory=UserGroups)


def parse_config(content: str) -> Optional[EngagementConfig]:
    """Parses YAML text; returns None when it holds no usable mapping.

    Raises yaml.YAMLError for malformed YAML.
    """
    document = yaml.safe_load(content)
    if not isinstance(document, dict):
        return None

    engagement = document.get("engagement") or {}
    if not isinstance(engagement, dict):
        logger.warning("Ignoring non-mapping engagement section, using defaults")
        engagement = {}

    try:
        groups = UserGroups.model_validate(engagement.get("groups") or {})
    except ValidationError as e:
        logger.warning("Invalid engagement groups, ignoring them: %s", e)
        groups = UserGroups()

    return EngagementConfig(
        weights=normalize_weights(engagement.get("weights")),
        groups=groups,
    )


def load_config_file(paths: Iterable[Union[str, Path]]) -> EngagementConfig:
    """Loads the first readable configuration among `paths`.

    Never raises: when nothing can be loaded the built-in defaults are used
    and the failures are logged as a warning.
    """
    failures: Dict[str, str] = {}

    for path in paths:
        path = Path(path)
        try:
            config = parse_config(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            failures[str(path)] = str(e)
            continue

        if config is not None:
            logger.debug("Loaded engagement configuration from %s", path)
            return config
        failures[str(path)] = "no configuration mapping found"

    if failures:
        details = "\n".join(f" - {path}: {error}" for path, error in failures.items())
        logger.warning(
            "Failed to load configuration from the following paths:\n%s", details
        )

    return EngagementConfig()


def load_config(
    workspace: Union[str, Path] = ".", config_path: Optional[Union[str, Path]] = None
) -> EngagementConfig:
    """Loads configuration from an explicit path or the workspace defaults."""
    if config_path is not None:
        return load_config_file([config_path])

    workspace = Path(workspace)
    return load_config_file(workspace / name for name in CONFIG_FILE_NAMES)


def config_as_dict(config: EngagementConfig) -> Dict[str, Any]:
    return {
        "weights": config.weights.to_config(),
        "groups": config.groups.model_dump(),
    }
