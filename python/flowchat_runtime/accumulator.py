"""
Location: python/flowchat_runtime/accumulator.py

Summary:
    Builds the growing assistant reply from stream events and produces a
    RunResult snapshot after each increment. Text only ever grows within
    a run; one accumulator is created per run and never shared.
"""

from typing import Optional

from .types import RunResult, StreamEvent


class TextAccumulator:
    """
    Running total of the assistant reply for a single run.

    Attributes:
        text: The full text accumulated so far
    """

    def __init__(self) -> None:
        self._text = ""

    @property
    def text(self) -> str:
        return self._text

    def apply(self, event: StreamEvent) -> Optional[RunResult]:
        """
        Fold one event into the total.

        Args:
            event: A decoded stream event

        Returns:
            A snapshot of the full text for text and tool-call events
            (tool calls leave the text unchanged), None for the sentinel
        """
        if event.kind == "text":
            self._text += event.text or ""
            return self.snapshot()
        if event.kind == "tool_calls":
            return self.snapshot(tool_calls=event.tool_calls)
        return None

    def snapshot(self, tool_calls: Optional[list] = None) -> RunResult:
        """A fresh RunResult holding the current total."""
        return RunResult.of(self._text, tool_calls=tool_calls)

    def reset(self) -> None:
        self._text = ""
