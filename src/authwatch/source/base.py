"""LineSource protocol — anything the monitor can consume lines from."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class LineSource(Protocol):
    """Protocol for line suppliers that can be stopped from another thread."""

    def __iter__(self) -> Iterator[str]:
        """Yield lines in arrival order, without trailing newlines."""
        ...

    def stop(self) -> None:
        """Stop yielding lines at the next opportunity."""
        ...
