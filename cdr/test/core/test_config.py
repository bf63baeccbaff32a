"""Tests for cdr.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from cdr.core.config import (
    DEFAULT_REGION,
    INPUT_NAMES,
    ReleaseInputs,
    input_env_name,
    inputs_from_env,
    load_inputs_file,
    resolve_inputs,
)
from cdr.core.result import Err, Ok


class TestReleaseInputs:
    def test_defaults(self) -> None:
        inputs = ReleaseInputs()
        assert inputs.release is None
        assert inputs.effective_region == DEFAULT_REGION == "us-central1"
        assert inputs.wants_latest_gcloud

    def test_pinned_gcloud(self) -> None:
        assert not ReleaseInputs(gcloud_version="390.0.0").wants_latest_gcloud
        assert ReleaseInputs(gcloud_version="latest").wants_latest_gcloud

    def test_frozen(self) -> None:
        inputs = ReleaseInputs()
        with pytest.raises(AttributeError):
            inputs.release = "x"  # type: ignore[misc]

    def test_from_mapping_ignores_blank_and_unknown(self) -> None:
        inputs = ReleaseInputs.from_mapping(
            {"release": " rel-1 ", "labels": "   ", "region": 3, "unknown": "x"}
        )
        assert inputs.release == "rel-1"
        assert inputs.labels is None
        assert inputs.region is None

    def test_merged_prefers_set_values(self) -> None:
        base = ReleaseInputs(release="a", region="us-east1")
        merged = base.merged(ReleaseInputs(release="b"))
        assert merged.release == "b"
        assert merged.region == "us-east1"

    def test_input_names(self) -> None:
        assert "gcs_source_staging_dir" in INPUT_NAMES
        assert len(INPUT_NAMES) == 16


class TestInputsFromEnv:
    def test_env_name(self) -> None:
        assert input_env_name("project_id") == "INPUT_PROJECT_ID"
        assert input_env_name("to target") == "INPUT_TO_TARGET"

    def test_reads_inputs(self) -> None:
        inputs = inputs_from_env(
            {
                "INPUT_RELEASE": "rel-1",
                "INPUT_DELIVERY_PIPELINE": "pipe-1",
                "INPUT_FLAGS": "--foo bar",
                "RELEASE": "ignored",
            }
        )
        assert inputs.release == "rel-1"
        assert inputs.delivery_pipeline == "pipe-1"
        assert inputs.flags == "--foo bar"

    def test_empty_env_values_are_unset(self) -> None:
        inputs = inputs_from_env({"INPUT_REGION": ""})
        assert inputs.region is None
        assert inputs.effective_region == "us-central1"


class TestLoadInputsFile:
    def test_loads_release_table(self, tmp_path: Path) -> None:
        path = tmp_path / "release.toml"
        path.write_text(
            '[release]\nrelease = "rel-1"\ndelivery_pipeline = "pipe-1"\nregion = "europe-west1"\n',
            encoding="utf-8",
        )

        result = load_inputs_file(path)

        assert isinstance(result, Ok)
        assert result.value.release == "rel-1"
        assert result.value.effective_region == "europe-west1"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_inputs_file(tmp_path / "missing.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[release\n", encoding="utf-8")

        result = load_inputs_file(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message

    def test_missing_table(self, tmp_path: Path) -> None:
        path = tmp_path / "other.toml"
        path.write_text('[other]\nrelease = "x"\n', encoding="utf-8")

        result = load_inputs_file(path)

        assert isinstance(result, Err)
        assert result.error.path == path


class TestResolveInputs:
    def test_precedence(self, tmp_path: Path) -> None:
        path = tmp_path / "release.toml"
        path.write_text(
            '[release]\nrelease = "from-file"\nregion = "file-region"\nlabels = "a=b"\n',
            encoding="utf-8",
        )

        result = resolve_inputs(
            environ={"INPUT_RELEASE": "from-env", "INPUT_REGION": "env-region"},
            overrides=ReleaseInputs(release="from-cli"),
            config_path=path,
        )

        assert isinstance(result, Ok)
        assert result.value.release == "from-cli"
        assert result.value.region == "env-region"
        assert result.value.labels == "a=b"

    def test_without_file(self) -> None:
        result = resolve_inputs(environ={"INPUT_RELEASE": "rel-1"})
        assert isinstance(result, Ok)
        assert result.value.release == "rel-1"

    def test_file_error_propagates(self, tmp_path: Path) -> None:
        result = resolve_inputs(environ={}, config_path=tmp_path / "missing.toml")
        assert isinstance(result, Err)
