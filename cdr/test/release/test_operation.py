"""Tests for cdr.release.operation module."""

from __future__ import annotations

from cdr.actions.runner import MockRunner
from cdr.release.operation import find_operation_id, publish_operation_id

OP_1 = "Waiting for operation [operation-1]...done."
OP_2 = "Waiting for operation [projects/p/locations/us-east1/operations/operation-2]...done."
OP_3 = "Waiting for operation [operation-3]...done."


class TestFindOperationId:
    def test_single_match(self) -> None:
        output = f"Creating release...\n{OP_1}\nCreated Cloud Deploy release rel-1.\n"
        assert find_operation_id(output) == OP_1

    def test_second_of_two(self) -> None:
        assert find_operation_id(f"{OP_1}\n{OP_2}\n") == OP_2

    def test_second_of_three_not_last(self) -> None:
        assert find_operation_id(f"{OP_1}\n{OP_2}\n{OP_3}\n") == OP_2

    def test_no_match(self) -> None:
        assert find_operation_id("Created Cloud Deploy release rel-1.\n") is None

    def test_in_progress_line_ignored(self) -> None:
        assert find_operation_id("Waiting for operation [operation-1]...") is None

    def test_empty(self) -> None:
        assert find_operation_id("") is None


class TestPublishOperationId:
    def test_sets_output(self) -> None:
        runner = MockRunner()

        result = publish_operation_id(f"{OP_1}\n", runner)

        assert result == OP_1
        assert runner.outputs == {"operation_id": OP_1}
        assert runner.warnings == []

    def test_warns_on_no_match(self) -> None:
        runner = MockRunner()

        result = publish_operation_id("nothing here", runner)

        assert result is None
        assert "operation_id" not in runner.outputs
        assert len(runner.warnings) == 1
        assert not runner.failed
