from datetime import datetime
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from app.client.errors import ApiError, ConnectivityUnavailable
from app.client.storage import LocalStore
from app.core.logger import logger
from app.core.utils import current_time

QUEUE_KEY = 'offline_checkins'


class QueuedCheckIn(BaseModel):
    code: str
    operator_id: str
    queued_at: datetime = Field(default_factory=current_time)


class DrainResult(BaseModel):
    resolved: List[QueuedCheckIn] = []
    rejected: List[QueuedCheckIn] = []
    retained: List[QueuedCheckIn] = []


class OfflineCheckInQueue:
    """Check-ins recorded while the API was unreachable.

    Entries are persisted in the local store and replayed in the order they
    were queued. Duplicated codes are kept; the second replay simply comes
    back as already checked in.
    """

    def __init__(self, store: LocalStore, key: str = QUEUE_KEY):
        self.store = store
        self.key = key
        self._drain_lock = Lock()

    def entries(self) -> List[QueuedCheckIn]:
        return [QueuedCheckIn(**item) for item in self.store.get(self.key, [])]

    def __len__(self) -> int:
        return len(self.store.get(self.key, []))

    def enqueue(self, code: str, operator_id: str) -> QueuedCheckIn:
        entry = QueuedCheckIn(code=code, operator_id=operator_id)
        item = entry.model_dump(mode='json')
        self.store.update(self.key, lambda items: (items or []) + [item])
        logger.info('Check-in for code %s queued until back online', code)
        return entry

    def _discard(self, handled: List[Dict[str, Any]]) -> None:
        """Remove handled entries, keeping whatever was queued meanwhile."""
        if not handled:
            return
        pending = list(handled)

        def _remaining(items):
            remaining = []
            for item in items or []:
                if item in pending:
                    pending.remove(item)
                else:
                    remaining.append(item)
            return remaining or None

        self.store.update(self.key, _remaining)

    @property
    def is_draining(self) -> bool:
        return self._drain_lock.locked()

    def drain(
        self, submit: Callable[[QueuedCheckIn], Any]
    ) -> Optional[DrainResult]:
        """Replay every queued check-in through ``submit``, one at a time.

        Returns None without doing anything when another drain is running.
        Entries already handled leave the queue even if the drain is cut
        short by an unexpected error.
        """
        if not self._drain_lock.acquire(blocking=False):
            logger.info('Offline queue drain already in progress')
            return None

        result = DrainResult()
        handled = []
        try:
            for item in self.store.get(self.key, []):
                entry = QueuedCheckIn(**item)
                try:
                    submit(entry)
                except ConnectivityUnavailable:
                    result.retained.append(entry)
                    continue
                except ApiError as e:
                    if e.is_definitive:
                        logger.error(
                            'Dropping queued check-in %s: %s', entry.code, e.detail
                        )
                        result.rejected.append(entry)
                        handled.append(item)
                    else:
                        if e.requires_auth:
                            logger.error(
                                'Session refused, keeping queued check-in %s', entry.code
                            )
                        result.retained.append(entry)
                    continue
                result.resolved.append(entry)
                handled.append(item)

            logger.info(
                'Offline queue drained: %s resolved, %s rejected, %s retained',
                len(result.resolved),
                len(result.rejected),
                len(result.retained),
            )
            return result
        finally:
            self._discard(handled)
            self._drain_lock.release()
