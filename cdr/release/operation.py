"""Operation id extraction from gcloud output."""

from __future__ import annotations

import re

from cdr.actions.runner import RunnerProtocol

__all__ = ["OPERATION_PATTERN", "find_operation_id", "publish_operation_id"]

# Brackets are literal; the text between them is the operation resource name.
OPERATION_PATTERN = re.compile(r"Waiting for operation \[(.*?)\]\.\.\.done\.")


def find_operation_id(output: str) -> str | None:
    """Return the matched ``Waiting for operation [...]...done.`` line text.

    With two or more matches the second one is returned, not the last.
    The match is returned verbatim.
    """
    matches = [m.group(0) for m in OPERATION_PATTERN.finditer(output)]
    if not matches:
        return None
    return matches[1] if len(matches) > 1 else matches[0]


def publish_operation_id(output: str, runner: RunnerProtocol) -> str | None:
    operation_id = find_operation_id(output)
    if operation_id is None:
        runner.warning("Can not find operation id in gcloud output.")
        return None
    runner.set_output("operation_id", operation_id)
    return operation_id
