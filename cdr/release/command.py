"""Argument assembly for ``gcloud deploy release create``."""

from __future__ import annotations

import re

from cdr.core.config import ReleaseInputs

__all__ = ["BETA_COMMAND", "OPTIONAL_FLAGS", "build_command", "parse_flags", "with_beta"]

# Release creation is only exposed on the beta command surface.
BETA_COMMAND = "beta"

# Order is part of the contract.
OPTIONAL_FLAGS: tuple[tuple[str, str], ...] = (
    ("annotations", "--annotations"),
    ("labels", "--labels"),
    ("description", "--description"),
    ("gcs_source_staging_dir", "--gcs-source-staging-dir"),
    ("ignore_file", "--ignore-file"),
    ("source", "--source"),
    ("to_target", "--to-target"),
    ("images", "--images"),
    ("build_artifacts", "--build-artifacts"),
)

# A token is one or more adjacent pieces, each either a double-quoted run
# (quotes kept) or a run of characters that are neither space nor quote.
_FLAG_TOKEN = re.compile(r'(?:".*?"|[^"\s]+)+')


def parse_flags(flags: str) -> list[str]:
    """Split free-form extra flags into process arguments.

    >>> parse_flags('--foo bar --baz=1')
    ['--foo', 'bar', '--baz=1']
    >>> parse_flags('--labels="a b" -q')
    ['--labels="a b"', '-q']

    An unterminated quote is dropped and the text after it splits on
    whitespace. Returns an empty list when nothing matches.
    """
    return _FLAG_TOKEN.findall(flags)


def build_command(inputs: ReleaseInputs) -> list[str]:
    """Assemble the release create arguments, without the ``beta`` prefix."""
    cmd = [
        "deploy",
        "release",
        "create",
        inputs.release or "",
        "--quiet",
        "--region",
        inputs.effective_region,
        "--delivery-pipeline",
        inputs.delivery_pipeline or "",
    ]

    if inputs.flags:
        cmd.extend(parse_flags(inputs.flags))

    for name, flag in OPTIONAL_FLAGS:
        value = getattr(inputs, name)
        if value:
            cmd.extend([flag, value])

    return cmd


def with_beta(cmd: list[str]) -> list[str]:
    return [BETA_COMMAND, *cmd]
