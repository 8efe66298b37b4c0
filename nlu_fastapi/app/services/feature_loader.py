"""Loader for the NLU feature configuration."""

import logging
import os
from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from nlu_fastapi.app.errors import ConfigurationError
from nlu_fastapi.app.models import FeatureLimits

logger = logging.getLogger(__name__)

DEFAULT_FEATURES_PATH = Path(__file__).parent.parent.parent.parent / "config" / "features.yaml"


def load_feature_limits(config_path: str | Path | None = None) -> FeatureLimits:
    """Load per-feature result limits from a YAML file.

    The file holds a ``features`` mapping with one entry per feature
    (``entities``, ``keywords``, ``concepts``), each with a ``limit``.
    Features left out of the file keep their default limit of 3.

    Args:
        config_path: Path to the YAML configuration file.
            If None, looks for 'config/features.yaml' in the project root.

    Returns:
        The configured FeatureLimits. Defaults are returned when no file
        exists at the default location.

    Raises:
        ConfigurationError: If an explicitly given file does not exist, or the
            file cannot be parsed or holds non-positive limits.
    """
    if config_path is None:
        config_path = DEFAULT_FEATURES_PATH
        if not os.path.exists(config_path):
            logger.warning(
                "Feature configuration not found at %s, using default limits",
                config_path,
            )
            return FeatureLimits()
    elif not os.path.exists(config_path):
        raise ConfigurationError(f"Feature configuration not found at {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        features = config.get("features") or {}
        limits = {
            name: options["limit"]
            for name, options in features.items()
            if isinstance(options, dict) and "limit" in options
        }
        feature_limits = FeatureLimits(**limits)
    except (yaml.YAMLError, AttributeError, ValidationError) as e:
        logger.error("Error loading feature configuration: %s", str(e))
        raise ConfigurationError(f"Invalid feature configuration: {str(e)}") from e

    logger.info(
        "Loaded feature limits from %s: entities=%d keywords=%d concepts=%d",
        config_path,
        feature_limits.entities,
        feature_limits.keywords,
        feature_limits.concepts,
    )
    return feature_limits
