"""Tests for cdr.release.command module."""

from __future__ import annotations

from cdr.core.config import ReleaseInputs
from cdr.release.command import OPTIONAL_FLAGS, build_command, parse_flags, with_beta


def _prefix(release: str = "rel-1", region: str = "us-central1", pipeline: str = "pipe-1"):
    return [
        "deploy",
        "release",
        "create",
        release,
        "--quiet",
        "--region",
        region,
        "--delivery-pipeline",
        pipeline,
    ]


class TestParseFlags:
    """Test free-form flag tokenization."""

    def test_splits_on_whitespace(self) -> None:
        assert parse_flags("--foo bar --baz=1") == ["--foo", "bar", "--baz=1"]

    def test_quoted_segment_kept_with_quotes(self) -> None:
        assert parse_flags('labels="a b"') == ['labels="a b"']

    def test_quoted_value_after_flag(self) -> None:
        assert parse_flags('--description "two words" -q') == [
            "--description",
            '"two words"',
            "-q",
        ]

    def test_collapses_repeated_whitespace(self) -> None:
        assert parse_flags("  --a   --b\t--c\n") == ["--a", "--b", "--c"]

    def test_unterminated_quote_dropped(self) -> None:
        assert parse_flags('--x "abc def') == ["--x", "abc", "def"]

    def test_empty_yields_no_tokens(self) -> None:
        assert parse_flags("") == []
        assert parse_flags("   ") == []


class TestBuildCommand:
    """Test release create argument assembly."""

    def test_minimal(self) -> None:
        inputs = ReleaseInputs(release="rel-1", delivery_pipeline="pipe-1")
        assert build_command(inputs) == _prefix()

    def test_region_default(self) -> None:
        cmd = build_command(ReleaseInputs(release="r", delivery_pipeline="p"))
        assert cmd[cmd.index("--region") + 1] == "us-central1"

    def test_region_explicit(self) -> None:
        cmd = build_command(ReleaseInputs(release="r", delivery_pipeline="p", region="us-east1"))
        assert cmd[cmd.index("--region") + 1] == "us-east1"

    def test_all_optional_flags_in_fixed_order(self) -> None:
        values = {name: f"v-{name}" for name, _ in OPTIONAL_FLAGS}
        inputs = ReleaseInputs(release="rel-1", delivery_pipeline="pipe-1", **values)

        cmd = build_command(inputs)

        expected_tail: list[str] = []
        for name, flag in OPTIONAL_FLAGS:
            expected_tail.extend([flag, f"v-{name}"])
        assert cmd == _prefix() + expected_tail

    def test_flag_names(self) -> None:
        assert [flag for _, flag in OPTIONAL_FLAGS] == [
            "--annotations",
            "--labels",
            "--description",
            "--gcs-source-staging-dir",
            "--ignore-file",
            "--source",
            "--to-target",
            "--images",
            "--build-artifacts",
        ]

    def test_only_non_empty_optionals(self) -> None:
        inputs = ReleaseInputs(
            release="rel-1",
            delivery_pipeline="pipe-1",
            images="app=gcr.io/p/app:1",
            labels="team=web",
        )
        assert build_command(inputs) == _prefix() + [
            "--labels",
            "team=web",
            "--images",
            "app=gcr.io/p/app:1",
        ]

    def test_extra_flags_before_optionals(self) -> None:
        inputs = ReleaseInputs(
            release="rel-1",
            delivery_pipeline="pipe-1",
            description="nightly",
            flags="--skaffold-file=skaffold.yaml --disable-initial-rollout",
        )
        assert build_command(inputs) == _prefix() + [
            "--skaffold-file=skaffold.yaml",
            "--disable-initial-rollout",
            "--description",
            "nightly",
        ]

    def test_no_beta_prefix(self) -> None:
        cmd = build_command(ReleaseInputs(release="r", delivery_pipeline="p"))
        assert cmd[0] == "deploy"


class TestWithBeta:
    def test_prepends_beta(self) -> None:
        assert with_beta(["deploy", "release"]) == ["beta", "deploy", "release"]

    def test_does_not_mutate(self) -> None:
        cmd = ["deploy"]
        with_beta(cmd)
        assert cmd == ["deploy"]
