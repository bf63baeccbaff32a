from __future__ import annotations

from dataclasses import dataclass

from cdr.actions.runner import ActionsRunner, RunnerProtocol
from cdr.gcloud.sdk import CloudSdk, GcloudSdk
from cdr.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    console: ConsoleProtocol
    runner: RunnerProtocol
    sdk: CloudSdk


def build_context() -> CLIContext:
    return CLIContext(
        console=RichConsole(),
        runner=ActionsRunner(),
        sdk=GcloudSdk(),
    )
