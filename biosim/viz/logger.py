"""Year-by-year event log with categories and a verbosity filter."""

from __future__ import annotations

import json
import os
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Optional, TextIO


@dataclass
class LogEntry:
    """One event recorded during a simulated year."""

    year: int
    category: str
    message: str
    data: dict = field(default_factory=dict)

    def format(self) -> str:
        return f"[Year {self.year:>4}] [{self.category:<10}] {self.message}"


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


class SimLogger:
    """Buffers events for the current year and writes those the verbosity allows.

    Verbosity levels:
        0   lifecycle and island-wide events
        1   + predation
        2   + migration
        <0  nothing is written (entries are still kept)
    """

    LIFECYCLE = "LIFECYCLE"
    PREDATION = "PREDATION"
    MIGRATION = "MIGRATION"
    ISLAND = "ISLAND"

    # Lowest verbosity at which a category is written
    _LEVELS: dict[str, int] = {
        LIFECYCLE: 0,
        ISLAND: 0,
        PREDATION: 1,
        MIGRATION: 2,
    }

    def __init__(
        self,
        verbosity: int = 1,
        log_file: Optional[str] = None,
        stdout: bool = True,
    ) -> None:
        self.verbosity = verbosity
        self._stdout = stdout
        self._pending: list[LogEntry] = []
        self._by_year: dict[int, list[LogEntry]] = defaultdict(list)
        self._file: Optional[TextIO] = None
        if log_file:
            _ensure_parent(log_file)
            self._file = open(log_file, "w", encoding="utf-8")

    @property
    def entries(self) -> list[LogEntry]:
        """Every flushed entry, oldest year first."""
        return [entry for year in sorted(self._by_year) for entry in self._by_year[year]]

    def log(self, category: str, message: str, year: int = 0, **data) -> None:
        self._pending.append(LogEntry(year, category, message, data))

    def wants(self, category: str) -> bool:
        return self._LEVELS.get(category, 1) <= self.verbosity

    def flush_year(self, year: int) -> list[str]:
        """Write the buffered entries that pass the filter and archive all of them.

        Returns the written lines.
        """
        lines = [entry.format() for entry in self._pending if self.wants(entry.category)]
        for line in lines:
            if self._stdout:
                print(line)
            if self._file:
                self._file.write(line + "\n")
        if self._file:
            self._file.flush()

        for entry in self._pending:
            self._by_year[entry.year].append(entry)
        self._pending = []
        return lines

    def get_narrative(self, year: int) -> str:
        """Readable account of one year, unfiltered."""
        events = self._by_year.get(year)
        if not events:
            return f"Year {year}: Nothing notable happened."
        body = [f"  [{e.category}] {e.message}" for e in events]
        return "\n".join([f"=== Year {year} ===", *body])

    def export_json(self, filepath: str) -> None:
        _ensure_parent(filepath)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump([asdict(e) for e in self.entries], f, indent=2)

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None
