"""Hosting pipeline integration."""

from .runner import ActionsRunner, MockRunner, RunnerProtocol

__all__ = [
    "ActionsRunner",
    "MockRunner",
    "RunnerProtocol",
]
