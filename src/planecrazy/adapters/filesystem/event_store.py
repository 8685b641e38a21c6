"""Filesystem adapter – JsonFileEventStore (one JSON file per event).

File names are ``<write time>_<sequence>_<event id>.json`` with the write
time formatted as ``YYYYmmddTHHMMSSffffff`` in UTC, so a lexicographic
directory listing is insertion order.  Each record is written to a hidden
temporary file and moved into place with :func:`os.replace`; a reader never
sees a partially written event.
"""
from __future__ import annotations

import asyncio
import os
import re
from datetime import UTC, datetime
from pathlib import Path

from planecrazy.application.event_sourcing.codec import EventCodec
from planecrazy.application.event_sourcing.store import EventStore
from planecrazy.kernel.ddd import DomainEvent
from planecrazy.observability.events import EventEmitter
from planecrazy.observability.logging import get_logger

logger = get_logger(__name__)

_FILE_RE = re.compile(r"^(?P<written>\d{8}T\d{12})_(?P<seq>\d{8})_(?P<event_id>[^/]+)\.json$")
_TIME_FORMAT = "%Y%m%dT%H%M%S%f"


class JsonFileEventStore(EventStore):
    """Durable :class:`EventStore` over a directory of JSON files."""

    def __init__(
        self,
        directory: str | os.PathLike[str],
        codec: EventCodec | None = None,
        emitter: EventEmitter | None = None,
    ) -> None:
        super().__init__(codec, emitter)
        self._directory = Path(directory)
        self._sequence: int | None = None
        self._last_written: datetime | None = None

    @property
    def directory(self) -> Path:
        return self._directory

    async def _write(self, event: DomainEvent, data: bytes) -> None:
        if self._sequence is None:
            self._sequence = await asyncio.to_thread(self._highest_sequence)
        written = datetime.now(UTC)
        if self._last_written is not None and written < self._last_written:
            written = self._last_written
        name = f"{written.strftime(_TIME_FORMAT)}_{self._sequence + 1:08d}_{event.event_id}.json"
        await asyncio.to_thread(self._write_file, name, data)
        self._sequence += 1
        self._last_written = written

    def _write_file(self, name: str, data: bytes) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        target = self._directory / name
        tmp = self._directory / f".{name}.tmp"
        try:
            with open(tmp, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, target)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    def _highest_sequence(self) -> int:
        highest = 0
        for path in self._list_files():
            match = _FILE_RE.match(path.name)
            if match:
                highest = max(highest, int(match["seq"]))
        return highest

    def _list_files(self) -> list[Path]:
        if not self._directory.is_dir():
            return []
        return sorted(
            (p for p in self._directory.glob("*.json") if not p.name.startswith(".")),
            key=lambda p: p.name,
        )

    async def _read_records(self) -> list[tuple[str, bytes]]:
        return await asyncio.to_thread(self._read_files)

    def _read_files(self) -> list[tuple[str, bytes]]:
        records: list[tuple[str, bytes]] = []
        for path in self._list_files():
            try:
                records.append((str(path), path.read_bytes()))
            except OSError as exc:
                self._record_skipped(str(path), f"unreadable: {exc}")
        return records

    async def storage_bytes(self) -> int:
        return await asyncio.to_thread(self._total_size)

    def _total_size(self) -> int:
        total = 0
        for path in self._list_files():
            try:
                total += path.stat().st_size
            except FileNotFoundError:
                continue
        return total

    def __repr__(self) -> str:  # pragma: no cover
        return f"JsonFileEventStore(directory={str(self._directory)!r})"


__all__ = ["JsonFileEventStore"]
