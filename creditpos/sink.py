"""
sink.py - Output Files
=======================
Write, append and delete operations on the output files.

Each call opens the file, writes and closes it again. Nothing is held open
between records, so whatever was written for records 1..i is on disk even
if the process dies while handling record i+1.
"""

from pathlib import Path

from .errors import OutputWriteError


class OutputSink:
    """File operations used by the processor, with OSError mapped to OutputWriteError."""

    encoding = "utf-8"

    def write(self, path, content: str):
        """Create or overwrite `path` with `content`."""
        try:
            with open(path, "w", encoding=self.encoding) as f:
                f.write(content)
        except OSError as e:
            raise OutputWriteError(f"Could not write {path}: {e}") from e

    def append(self, path, content: str):
        """Append `content` to `path`, creating it if needed."""
        try:
            with open(path, "a", encoding=self.encoding) as f:
                f.write(content)
        except OSError as e:
            raise OutputWriteError(f"Could not append to {path}: {e}") from e

    def delete(self, path):
        """Remove `path` if it exists."""
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            raise OutputWriteError(f"Could not delete {path}: {e}") from e
