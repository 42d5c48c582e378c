"""
Append-only JSON lines recorder sink.

Each line is one event tagged with its type and a per-sink sequence number.
The file is opened on the first event, so a run that quotes nothing leaves
no file behind.
"""
from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import IO, Any


class FileRecorderSink:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._fh: IO[str] | None = None
        self._seq = 0
        self._closed = False

    @property
    def path(self) -> Path:
        return self._path

    def _handle(self) -> IO[str]:
        if self._fh is None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self._path.open("a", encoding="utf-8")
        return self._fh

    def on_event(self, event: Any) -> None:
        if self._closed:
            raise RuntimeError(f"recorder for {self._path} is closed")

        if dataclasses.is_dataclass(event) and not isinstance(event, type):
            payload = dataclasses.asdict(event)
        else:
            payload = {"event": str(event)}
        record = {"seq": self._seq, "event_type": type(event).__name__, **payload}

        fh = self._handle()
        fh.write(json.dumps(record, sort_keys=True) + "\n")
        fh.flush()
        self._seq += 1

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._fh is not None:
            self._fh.close()
            self._fh = None
