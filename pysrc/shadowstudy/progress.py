"""
Progress reporting and cooperative cancellation for long analyses.

Daily sun-hours analyses can run for seconds. Progress is reported after
each sun-path step through:
- Callback: ``on_progress(completed, total)`` supplied by the caller (UI)
- Terminal: tqdm progress bar, when requested
- Fallback: no-op

Cancellation is cooperative: a :class:`CancellationToken` is checked
between steps, never inside a single ray march.

Usage:
    from shadowstudy.progress import CancellationToken, ProgressReporter

    token = CancellationToken()
    progress = ProgressReporter(total=len(path), desc="Sun hours", callback=on_progress)
    for position in path:
        token.raise_if_cancelled(progress.current, progress.total)
        do_work(position)
        progress.update(1)
    progress.close()
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from tqdm import tqdm

from .errors import AnalysisCancelled
from .shadow_logging import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int], None]


class CancellationToken:
    """
    Thread-safe cancellation flag shared between a caller and an analysis.

    Example:
        token = CancellationToken()
        threading.Timer(5.0, token.cancel).start()
        compute_sun_hours(path, grid, cancel=token)  # raises AnalysisCancelled
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, completed: int, total: int) -> None:
        """Raise AnalysisCancelled if cancellation was requested."""
        if self._event.is_set():
            logger.info(f"Cancellation observed after {completed}/{total} steps")
            raise AnalysisCancelled(completed, total)


class ProgressReporter:
    """
    Progress reporter driving a caller callback and/or a tqdm bar.

    Args:
        total: Total number of steps.
        desc: Description shown in progress bar.
        callback: Optional ``callback(completed, total)`` invoked on every update.
        progress_bar: If True, show a tqdm terminal bar.
    """

    def __init__(
        self,
        total: int,
        desc: str = "",
        callback: ProgressCallback | None = None,
        progress_bar: bool = False,
    ):
        self.total = total
        self.desc = desc
        self.current = 0
        self._callback = callback
        self._closed = False
        self._tqdm_bar = None

        if progress_bar:
            self._tqdm_bar = tqdm(total=total, desc=desc)

    def update(self, n: int = 1) -> None:
        """Advance progress by n steps and notify the callback."""
        if self._closed:
            return

        self.current += n

        if self._tqdm_bar is not None:
            self._tqdm_bar.update(n)
        if self._callback is not None:
            self._callback(self.current, self.total)

    @property
    def percent(self) -> int:
        """Completed share in whole percent (0-100)."""
        if self.total <= 0:
            return 0
        return min(100, int(100 * self.current / self.total))

    def close(self) -> None:
        """Close the progress bar."""
        if self._closed:
            return
        self._closed = True

        if self._tqdm_bar is not None:
            self._tqdm_bar.close()
