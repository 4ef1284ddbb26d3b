"""
Durable store for MPC signing shares.

Layout of the backing JSON file::

    {"signingShares": [{"id", "clientId", "curve", "share", "createdAt"}, ...]}

Records are append-only. Every read reloads the file; every append rewrites
it through a unique temp file and fsyncs before returning. Appends through
one ShareStore instance are serialized; separate processes or instances
sharing a file are not isolated from each other.
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from .models.errors import StorageError
from .models.share import Curve, SigningShare

logger = logging.getLogger(__name__)

COLLECTION = "signingShares"


class ShareStore:
    """JSON-file backed share store."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._append_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def open(self) -> None:
        """Create the backing file with an empty collection if it is missing."""
        await asyncio.to_thread(self._open_sync)

    async def append(self, client_id: str, curve: Curve | str, share: str) -> SigningShare:
        """Persist a new share record; durable once this returns."""
        wanted = Curve(curve)
        # The whole read-append-write cycle runs under the lock.
        async with self._append_lock:
            return await asyncio.to_thread(self._append_sync, client_id, wanted, share)

    async def list_for_client(self, client_id: str) -> List[SigningShare]:
        records = await asyncio.to_thread(self._load_records)
        return [record for record in records if record.client_id == client_id]

    async def get(self, share_id: str) -> Optional[SigningShare]:
        records = await asyncio.to_thread(self._load_records)
        for record in records:
            if record.id == share_id:
                return record
        return None

    async def latest_for(self, client_id: str, curve: Curve | str) -> Optional[SigningShare]:
        """Return the authoritative (most recent) share for a client and curve."""
        wanted = Curve(curve)
        candidates = [
            record for record in await self.list_for_client(client_id)
            if record.curve == wanted
        ]
        if not candidates:
            return None
        return max(
            candidates,
            key=lambda record: (record.created_at, int(record.id) if record.id.isdigit() else -1),
        )

    # ------------------------------------------------------------------
    # File I/O (runs in a worker thread)
    # ------------------------------------------------------------------

    def _open_sync(self) -> None:
        if self._path.exists():
            self._read_raw()
            return
        self._write_raw({COLLECTION: []})
        logger.info("Initialized share store at %s", self._path)

    def _append_sync(self, client_id: str, curve: Curve, share: str) -> SigningShare:
        data = self._read_raw()
        rows: List[Dict[str, Any]] = data.setdefault(COLLECTION, [])
        record = SigningShare(
            id=self._next_id(rows),
            client_id=client_id,
            curve=curve,
            share=share,
            created_at=datetime.now(timezone.utc),
        )
        rows.append(record.to_dict())
        self._write_raw(data)
        logger.info(
            "Persisted signing share",
            extra={"share_id": record.id, "client_id": client_id, "curve": curve.value},
        )
        return record

    def _load_records(self) -> List[SigningShare]:
        rows = self._read_raw().get(COLLECTION, [])
        try:
            return [SigningShare.model_validate(row) for row in rows]
        except PydanticValidationError as exc:
            raise StorageError(
                f"Corrupt share record in {self._path}: {exc.error_count()} error(s)",
                path=str(self._path),
            ) from exc

    @staticmethod
    def _next_id(rows: List[Dict[str, Any]]) -> str:
        # Time-derived, but strictly increasing within one file.
        candidate = time.time_ns()
        existing = [int(row["id"]) for row in rows if str(row.get("id", "")).isdigit()]
        if existing and candidate <= max(existing):
            candidate = max(existing) + 1
        return str(candidate)

    def _read_raw(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {COLLECTION: []}
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Share store {self._path} is not valid JSON", path=str(self._path)) from exc
        except OSError as exc:
            raise StorageError(f"Cannot read share store {self._path}: {exc}", path=str(self._path)) from exc
        if not isinstance(data, dict) or not isinstance(data.get(COLLECTION, []), list):
            raise StorageError(f"Share store {self._path} has an unexpected layout", path=str(self._path))
        return data

    def _write_raw(self, data: Dict[str, Any]) -> None:
        tmp_path: Optional[str] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Cannot write share store {self._path}: {exc}", path=str(self._path)) from exc
