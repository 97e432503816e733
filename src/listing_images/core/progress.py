"""Per-image upload progress state."""

import logging
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence

from .exceptions import ProgressTransitionError
from .logging_config import get_logger
from .models import UploadProgressEntry, UploadStatus

ProgressObserver = Callable[[List[UploadProgressEntry]], None]

ALLOWED_TRANSITIONS: Dict[UploadStatus, FrozenSet[UploadStatus]] = {
    UploadStatus.GENERATING: frozenset({UploadStatus.UPLOADING, UploadStatus.ERROR}),
    UploadStatus.UPLOADING: frozenset({UploadStatus.COMPLETED, UploadStatus.ERROR}),
    UploadStatus.COMPLETED: frozenset(),
    UploadStatus.ERROR: frozenset(),
}

STATUS_PROGRESS: Dict[UploadStatus, int] = {
    UploadStatus.GENERATING: 0,
    UploadStatus.UPLOADING: 25,
    UploadStatus.COMPLETED: 100,
    UploadStatus.ERROR: 0,
}


class UploadProgressTracker:
    """
    Holds one progress entry per image and reports snapshots to an observer.

    Each index is only ever written by the task handling that image, so no
    locking is needed. The observer receives a fresh copy of every entry
    after each transition; an observer that raises is logged and ignored.
    """

    def __init__(
        self,
        file_names: Sequence[str],
        observer: Optional[ProgressObserver] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._entries: Dict[int, UploadProgressEntry] = {
            index: UploadProgressEntry(image_index=index, file_name=name)
            for index, name in enumerate(file_names)
        }
        self._observer = observer
        self._logger = logger or get_logger("listing-images.progress")

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self) -> List[UploadProgressEntry]:
        """Copies of all entries ordered by image index."""
        return [self._entries[index].model_copy() for index in sorted(self._entries)]

    def entry(self, index: int) -> UploadProgressEntry:
        return self._entries[index].model_copy()

    def notify(self) -> None:
        """Send the current snapshot to the observer, if any."""
        if self._observer is None:
            return
        try:
            self._observer(self.snapshot())
        except Exception:  # noqa: BLE001
            self._logger.exception("Progress observer raised; continuing upload")

    def mark_uploading(self, index: int) -> None:
        self._transition(index, UploadStatus.UPLOADING)
        self.notify()

    def mark_completed(self, index: int) -> None:
        self._transition(index, UploadStatus.COMPLETED)
        self.notify()

    def mark_error(self, index: int, message: str) -> None:
        self._transition(index, UploadStatus.ERROR, message)
        self.notify()

    def mark_all_error(self, message: str) -> None:
        """Fail every image that has not already finished, then notify once."""
        for index, entry in self._entries.items():
            if entry.status in (UploadStatus.GENERATING, UploadStatus.UPLOADING):
                self._transition(index, UploadStatus.ERROR, message)
        self.notify()

    def _transition(
        self, index: int, status: UploadStatus, error: Optional[str] = None
    ) -> None:
        entry = self._entries[index]
        if status not in ALLOWED_TRANSITIONS[entry.status]:
            raise ProgressTransitionError(
                f"Image {index} cannot move from {entry.status.value} to {status.value}"
            )
        entry.status = status
        entry.progress = STATUS_PROGRESS[status]
        entry.error = error
        self._logger.debug(f"Image {index} ({entry.file_name}) -> {status.value}")
