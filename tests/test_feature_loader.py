"""Tests for loading feature limits from YAML."""

from pathlib import Path

import pytest

from nlu_fastapi.app.errors import ConfigurationError
from nlu_fastapi.app.models import FeatureLimits
from nlu_fastapi.app.services import feature_loader
from nlu_fastapi.app.services.feature_loader import load_feature_limits


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "features.yaml"
    path.write_text(content, encoding="utf-8")
    return path


def test_bundled_configuration_limits_every_feature_to_three() -> None:
    assert load_feature_limits() == FeatureLimits(entities=3, keywords=3, concepts=3)


def test_custom_limits(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
features:
  entities:
    limit: 10
  keywords:
    limit: 1
  concepts:
    limit: 5
""",
    )

    assert load_feature_limits(path) == FeatureLimits(entities=10, keywords=1, concepts=5)


def test_missing_features_keep_defaults(tmp_path: Path) -> None:
    path = _write(tmp_path, "features:\n  concepts:\n    limit: 8\n")

    limits = load_feature_limits(str(path))

    assert limits.concepts == 8
    assert limits.entities == 3
    assert limits.keywords == 3


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    assert load_feature_limits(_write(tmp_path, "")) == FeatureLimits()


def test_default_path_missing_gives_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(feature_loader, "DEFAULT_FEATURES_PATH", tmp_path / "absent.yaml")

    assert load_feature_limits() == FeatureLimits()


def test_explicit_path_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_feature_limits(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "content",
    [
        "features:\n  entities:\n    limit: 0\n",
        "features:\n  keywords:\n    limit: -2\n",
        "features:\n  concepts:\n    limit: many\n",
        "features: [entities, concepts]\n",
        "features: {entities: [limit\n",
    ],
)
def test_invalid_configuration(tmp_path: Path, content: str) -> None:
    with pytest.raises(ConfigurationError, match="Invalid feature configuration"):
        load_feature_limits(_write(tmp_path, content))
