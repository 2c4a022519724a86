from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel

from app.client import operations
from app.client.errors import ConnectivityUnavailable, NotSignedIn
from app.client.offline_queue import DrainResult, OfflineCheckInQueue, QueuedCheckIn
from app.client.storage import LocalStore
from app.client.transport import EventClient
from app.core.config import settings
from app.core.logger import logger

SESSION_KEY = 'local_session'


class CheckInOutcomeStatus(str, Enum):
    SUCCESS = 'success'
    ALREADY_CHECKED_IN = 'already_checked_in'
    QUEUED = 'queued'


class CheckInOutcome(BaseModel):
    status: CheckInOutcomeStatus
    attendee: Optional[Dict[str, Any]] = None
    checked_in_at: Optional[str] = None
    queued: Optional[QueuedCheckIn] = None


class AppContext:
    """Session and offline queue of one client station.

    Passed explicitly to whatever drives the station instead of living in
    module globals. Both pieces of state survive restarts through the
    local store.
    """

    def __init__(
        self,
        client: Optional[EventClient] = None,
        store: Optional[LocalStore] = None,
        online: bool = True,
    ):
        self.client = client or EventClient()
        self.store = store or LocalStore(settings.CLIENT_STATE_PATH)
        self.queue = OfflineCheckInQueue(self.store)
        self.online = online
        self.session: Optional[Dict[str, Any]] = None
        self._load_session()

    def _load_session(self) -> None:
        session = self.store.get(SESSION_KEY)
        if not session:
            return
        if not isinstance(session, dict) or 'access_token' not in session:
            logger.error('Failed to parse stored session, discarding it')
            self.store.remove(SESSION_KEY)
            return
        self.session = session
        self.client.token = session['access_token']

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self.session['user'] if self.session else None

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        data = self.client.execute(operations.Login(email=email, password=password))
        self.session = {'access_token': data['access_token'], 'user': data['user']}
        self.client.token = data['access_token']
        self.store.set(SESSION_KEY, self.session)
        logger.info('Signed in as %s', data['user']['email'])
        return data['user']

    def sign_out(self) -> None:
        self.session = None
        self.client.token = None
        self.store.remove(SESSION_KEY)

    def execute(self, operation: operations.Operation) -> Any:
        return self.client.execute(operation)

    def check_in(self, code: str) -> CheckInOutcome:
        """Check in from the scanner, falling back to the offline queue."""
        if not self.user:
            raise NotSignedIn()
        operator_id = self.user['id']

        if not self.online:
            return self._queue(code, operator_id)

        try:
            data = self._submit(QueuedCheckIn(code=code, operator_id=operator_id))
        except ConnectivityUnavailable:
            self.online = False
            return self._queue(code, operator_id)

        return CheckInOutcome(
            status=CheckInOutcomeStatus(data['status']),
            attendee=data['attendee'],
            checked_in_at=data.get('checked_in_at'),
        )

    def _queue(self, code: str, operator_id: str) -> CheckInOutcome:
        entry = self.queue.enqueue(code, operator_id)
        return CheckInOutcome(status=CheckInOutcomeStatus.QUEUED, queued=entry)

    def _submit(self, entry: QueuedCheckIn) -> Any:
        return self.client.execute(
            operations.CheckIn(code=entry.code, operator_id=entry.operator_id)
        )

    def set_online(self, online: bool) -> Optional[DrainResult]:
        """Connectivity notification. Coming back online drains the queue."""
        was_online = self.online
        self.online = online
        if online and not was_online:
            logger.info('Connectivity restored')
            return self.retry()
        return None

    def retry(self) -> Optional[DrainResult]:
        """Manual retry of queued check-ins."""
        if not len(self.queue):
            return DrainResult()
        return self.queue.drain(self._submit)
