"""
Tests for named table loaders (camtrap_dp/data/loaders.py).

All tests read the sample package in tests/fixtures/ or copies of it in tmp_path.
"""

import shutil

import pytest

from camtrap_dp.data.errors import RowError
from camtrap_dp.data.io import ReadMode
from camtrap_dp.data.loaders import (
    load_deployments,
    load_media,
    load_observations,
    load_tables,
    save_deployments,
    save_media,
    save_observations,
)
from camtrap_dp.data.models import ObservationType


# ============================================================================
# Helper functions
# ============================================================================

def copy_package(fixtures_dir, tmp_path):
    """Copy the three fixture tables into tmp_path and return it."""
    for name in ("deployments.csv", "media.csv", "observations.csv"):
        shutil.copy(fixtures_dir / name, tmp_path / name)
    return tmp_path


def break_second_row(path, old: str, new: str) -> None:
    lines = path.read_text(encoding="utf-8").splitlines(keepends=True)
    lines[2] = lines[2].replace(old, new, 1)
    path.write_text("".join(lines), encoding="utf-8")


# ============================================================================
# Single tables
# ============================================================================

def test_named_loaders(fixtures_dir):
    deployments = load_deployments(fixtures_dir / "deployments.csv", ReadMode.STRICT).records
    media = load_media(fixtures_dir / "media.csv", ReadMode.STRICT).records
    observations = load_observations(fixtures_dir / "observations.csv", ReadMode.STRICT).records

    assert deployments[1].camera_model == "Reconyx-HF2X"
    assert media[1].media_comments == "Blurred to protect privacy"
    assert [o.observation_type for o in observations] == [
        ObservationType.ANIMAL, ObservationType.HUMAN, ObservationType.BLANK,
    ]


def test_save_then_load(fixtures_dir, tmp_path):
    records = load_media(fixtures_dir / "media.csv", ReadMode.STRICT).records

    save_media(records, tmp_path / "media.csv")

    assert load_media(tmp_path / "media.csv", ReadMode.STRICT).records == records


def test_save_returns_text(fixtures_dir):
    deployments = load_deployments(fixtures_dir / "deployments.csv", ReadMode.STRICT).records
    observations = load_observations(fixtures_dir / "observations.csv", ReadMode.STRICT).records

    assert save_deployments(deployments).startswith("deploymentID,locationID,")
    assert save_observations(observations).count("\n") == 4


# ============================================================================
# Whole package
# ============================================================================

def test_load_tables(fixtures_dir):
    tables = load_tables(fixtures_dir, ReadMode.STRICT)

    assert tables.ok
    assert len(tables.deployments) == 3
    assert len(tables.media) == 3
    assert len(tables.observations) == 3


def test_load_tables_best_effort_keeps_errors_per_table(fixtures_dir, tmp_path):
    package = copy_package(fixtures_dir, tmp_path)
    break_second_row(package / "media.csv", "timeLapse", "motion")

    tables = load_tables(package, ReadMode.BEST_EFFORT)

    assert not tables.ok
    assert list(tables.errors) == ["media"]
    assert tables.errors["media"][0].row_index == 2
    assert tables.errors["media"][0].columns == ["captureMethod"]
    assert len(tables.media) == 2
    assert len(tables.observations) == 3


def test_load_tables_strict_raises(fixtures_dir, tmp_path):
    package = copy_package(fixtures_dir, tmp_path)
    break_second_row(package / "observations.csv", "event,human", "event,alien")

    with pytest.raises(RowError) as exc_info:
        load_tables(package, "strict")
    assert exc_info.value.columns == ["observationType"]


def test_load_tables_missing_file(fixtures_dir, tmp_path):
    shutil.copy(fixtures_dir / "deployments.csv", tmp_path / "deployments.csv")

    with pytest.raises(FileNotFoundError):
        load_tables(tmp_path, ReadMode.BEST_EFFORT)
