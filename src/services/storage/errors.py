"""Errors raised by the snapshot stores."""

from __future__ import annotations


class SnapshotFetchError(RuntimeError):
    """A collaborator could not deliver its snapshot."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
