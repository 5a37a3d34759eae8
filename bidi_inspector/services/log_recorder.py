"""Record log entries to a JSON-lines file."""

import asyncio
import json
import logging
from collections import deque
from pathlib import Path
from typing import List, Optional, Union

import aiofiles

from ..filters import FilterSpec
from ..models import LogEntry
from .log_inspector import LogInspector

logger = logging.getLogger(__name__)


class LogRecorder:
    """Buffer log entries in memory and flush them to disk periodically.

    The inspector callback only appends to the buffer, so event dispatch is
    never held up by file I/O. The buffer is bounded; when it is full the
    oldest entries are dropped.
    """

    def __init__(
        self,
        path: Union[str, Path],
        flush_interval: float = 2.5,
        buffer_size: int = 1000,
    ):
        """Initialize log recorder.

        Args:
            path: JSON-lines file to append to
            flush_interval: Seconds between background flushes
            buffer_size: Maximum number of unflushed entries kept
        """
        self.path = Path(path)
        self.flush_interval = flush_interval
        self._buffer: deque = deque(maxlen=buffer_size)
        self._flush_task: Optional[asyncio.Task] = None
        self._flush_lock = asyncio.Lock()
        self.entries_written = 0

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def record(self, entry: LogEntry) -> None:
        """Inspector callback: queue one entry for the next flush."""
        self._buffer.append(entry)

    async def attach(self, inspector: LogInspector, filter_by: FilterSpec = None) -> None:
        """Record every entry the inspector receives (optionally filtered)."""
        await inspector.on_log(self.record, filter_by)

    async def flush(self) -> int:
        """Write buffered entries to the file.

        Returns:
            Number of entries written
        """
        async with self._flush_lock:
            if not self._buffer:
                return 0

            entries: List[LogEntry] = list(self._buffer)
            self._buffer.clear()

            lines = "".join(json.dumps(entry.to_dict()) + "\n" for entry in entries)
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                async with aiofiles.open(self.path, "a") as f:
                    await f.write(lines)
            except OSError as e:
                logger.error(f"Failed to write log entries to {self.path}: {e}")
                self._requeue(entries)
                raise

            self.entries_written += len(entries)
            logger.debug(f"Flushed {len(entries)} log entries to {self.path}")
            return len(entries)

    def _requeue(self, entries: List[LogEntry]) -> None:
        # Entries recorded during the failed write are newer and stay
        room = self._buffer.maxlen - len(self._buffer)
        kept = entries[-room:] if room > 0 else []
        dropped = len(entries) - len(kept)
        if dropped:
            logger.warning(f"Log buffer full, dropped {dropped} unwritten entries")
        self._buffer.extendleft(reversed(kept))

    async def start(self) -> None:
        """Start the periodic flush task."""
        if self._flush_task is None or self._flush_task.done():
            self._flush_task = asyncio.create_task(self._flush_periodically())
            logger.info(f"Recording log entries to {self.path}")

    async def stop(self) -> None:
        """Stop the periodic flush task and flush what is left."""
        if self._flush_task is not None:
            self._flush_task.cancel()
            try:
                await self._flush_task
            except asyncio.CancelledError:
                pass
            self._flush_task = None

        await self.flush()

    async def _flush_periodically(self) -> None:
        while True:
            try:
                await asyncio.sleep(self.flush_interval)
                await self.flush()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in log flush task: {e}")
