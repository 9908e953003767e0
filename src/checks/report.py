"""Collects per-check messages and reduces them to one plugin result."""

from __future__ import annotations

from src.core.types import AggregatedMessage, Status, worst


class CheckReport:
    """In-process accumulator of (status, message) pairs for one run.

    - The overall status is the worst status added (OK when empty).
    - The summary joins every non-OK message, worst first; when everything
      is OK it joins the OK messages instead.
    """

    def __init__(self, join: str = ", ") -> None:
        self._join = join
        self._messages: list[tuple[Status, str]] = []

    def add(self, status: Status, message: str) -> None:
        self._messages.append((status, message))

    def add_aggregated(self, messages: list[AggregatedMessage]) -> None:
        for msg in messages:
            self.add(msg.status, msg.text)

    @property
    def status(self) -> Status:
        return worst(*(status for status, _ in self._messages))

    @property
    def exit_code(self) -> int:
        return int(self.status)

    def messages(self, status: Status) -> list[str]:
        return [text for s, text in self._messages if s == status]

    def summary(self) -> str:
        problems = [
            text
            for status in sorted(Status, reverse=True)
            if status != Status.OK
            for text in self.messages(status)
        ]
        return self._join.join(problems or self.messages(Status.OK))

    def render(self, shortname: str) -> str:
        """Format the single output line the monitoring supervisor reads."""
        summary = self.summary()
        line = f"{shortname} {self.status.name}"
        return f"{line} - {summary}" if summary else line
