from __future__ import annotations

from typing import Iterable, List


class SyncError(Exception):
    """Fatal sync failure carrying an itemized diagnostic."""

    exit_code = 1
    title = "Sync Failed"

    def __init__(self, message: str, items: Iterable[str] = ()) -> None:
        self.items: List[str] = list(items)
        self.message = message
        summary = f"{message}: {', '.join(self.items)}" if self.items else message
        super().__init__(summary)


class MissingSourcesError(SyncError):
    title = "Missing Sources"

    def __init__(self, labels: Iterable[str]) -> None:
        super().__init__("Missing required sources in strict mode", labels)


class MissingSourceFilesError(SyncError):
    title = "Missing Source Files"

    def __init__(self, labels: Iterable[str]) -> None:
        super().__init__("Missing required source files in strict mode", labels)


class TutorialStructureError(SyncError):
    title = "Tutorial Structure"

    def __init__(self, errors: Iterable[str]) -> None:
        super().__init__("Tutorial structure validation failed", errors)


__all__ = [
    "MissingSourceFilesError",
    "MissingSourcesError",
    "SyncError",
    "TutorialStructureError",
]
