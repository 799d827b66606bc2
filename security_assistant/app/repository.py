"""스캔 이력 저장소(In-memory scan history repository)."""
from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Dict, List, Optional

from common_lib.logger import get_logger
from src.core.data.history import SavedScan

logger = get_logger(__name__)

DEFAULT_MAX_SCANS = 20


class ScanHistoryRepository:
    """대상별 최근 스캔 보관(Bounded, append-only scan history per target key).

    History lives in process memory only and is lost on restart. Callers that
    read the latest scan and then append must hold ``lock(repo_id)`` so two
    comparisons of the same target cannot interleave.
    """

    def __init__(self, max_scans: int = DEFAULT_MAX_SCANS) -> None:
        if max_scans <= 0:
            raise ValueError("max_scans must be positive")
        self._max_scans = max_scans
        self._scans: Dict[str, List[SavedScan]] = {}
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @property
    def max_scans(self) -> int:
        return self._max_scans

    def lock(self, repo_id: str) -> asyncio.Lock:
        """대상별 쓰기 잠금(Per-target single-writer lock)."""

        return self._locks[repo_id]

    async def latest(self, repo_id: str) -> Optional[SavedScan]:
        scans = self._scans.get(repo_id)
        return scans[-1] if scans else None

    async def append(self, scan: SavedScan) -> None:
        """Store a scan, evicting the oldest entries beyond ``max_scans``."""

        scans = self._scans.get(scan.repo_id, []) + [scan]
        evicted = len(scans) - self._max_scans
        if evicted > 0:
            logger.debug("Evicting %d old scan(s) for %s", evicted, scan.repo_id)
            scans = scans[evicted:]
        self._scans[scan.repo_id] = scans

    def list_scans(self, repo_id: str) -> List[SavedScan]:
        return list(self._scans.get(repo_id, []))

    def repo_ids(self) -> List[str]:
        return list(self._scans)

    def clear(self, repo_id: Optional[str] = None) -> None:
        """이력 삭제(Drop history and idle locks for one target or all targets)."""

        if repo_id is None:
            self._scans.clear()
            held = {key: lock for key, lock in self._locks.items() if lock.locked()}
            self._locks = defaultdict(asyncio.Lock, held)
            return
        self._scans.pop(repo_id, None)
        lock = self._locks.get(repo_id)
        if lock is not None and not lock.locked():
            del self._locks[repo_id]
