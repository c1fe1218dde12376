"""Output destinations and colour/format choices for lint reports."""

from __future__ import annotations

import enum
import os
import sys
import tempfile
from pathlib import Path
from typing import IO, Any, Protocol, Sequence

from .diagnostics import Diagnostic

__all__ = ["ColorChoice", "OutputFormat", "OutputSink", "Reporter"]


class ColorChoice(enum.Enum):
    ALWAYS = "always"
    NEVER = "never"

    def is_enabled(self) -> bool:
        """True when ANSI colours should be emitted."""
        return self is ColorChoice.ALWAYS


class OutputFormat(enum.Enum):
    TEXT = "text"
    JSON = "json"

    def color_choice(
        self, no_color: bool, has_output_path: bool, stdout_is_tty: bool
    ) -> ColorChoice:
        """Colour only human-readable output written to an interactive stdout."""
        if no_color or has_output_path or self is OutputFormat.JSON or not stdout_is_tty:
            return ColorChoice.NEVER
        return ColorChoice.ALWAYS


class Reporter(Protocol):
    """Turns diagnostics and a summary into output, once per run."""

    def report(self, diagnostics: Sequence[Diagnostic], summary: Any) -> None: ...


class OutputSink:
    """Where a report goes: stdout, or a file replaced atomically on commit.

    When a path is given, output is written to a temporary file in the
    destination's directory and only moved into place by :meth:`commit`.
    Used as a context manager, an exception discards the temporary file.
    """

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self._destination: Path | None = None
        self._temp: IO[str] | None = None
        if path is not None:
            destination = Path(path)
            directory = destination.parent
            directory.mkdir(parents=True, exist_ok=True)
            self._temp = tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=directory,
                prefix=".tmp",
                delete=False,
            )
            self._destination = destination

    def __enter__(self) -> OutputSink:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self._discard()

    def stdout_is_terminal(self) -> bool:
        """True when writing to stdout and stdout is a terminal."""
        return self._destination is None and sys.stdout.isatty()

    def has_output_path(self) -> bool:
        return self._destination is not None

    def writer(self) -> IO[str]:
        """Text stream that receives the report."""
        if self._temp is not None:
            return self._temp
        return sys.stdout

    def commit(self) -> None:
        """Flush stdout, or move the finished temporary file into place."""
        if self._temp is None or self._destination is None:
            sys.stdout.flush()
            return
        temp = self._temp
        temp.flush()
        os.fsync(temp.fileno())
        temp.close()
        os.replace(temp.name, self._destination)
        self._temp = None

    def _discard(self) -> None:
        if self._temp is None:
            return
        self._temp.close()
        try:
            os.unlink(self._temp.name)
        except FileNotFoundError:
            pass
        self._temp = None