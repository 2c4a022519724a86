from typing import Optional


class ConnectivityUnavailable(Exception):
    """The API could not be reached. Check-ins are queued instead."""

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason
        super().__init__(reason or 'API unreachable')


class ApiError(Exception):
    def __init__(self, status_code: int, detail: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail or f'API error {status_code}'
        super().__init__(self.detail)

    @property
    def requires_auth(self) -> bool:
        """The session was refused. Signing in again makes the request valid."""
        return self.status_code in (401, 403)

    @property
    def is_definitive(self) -> bool:
        """Rejected by the API itself; resending the same request will not help."""
        return 400 <= self.status_code < 500 and not self.requires_auth


class NotSignedIn(Exception):
    def __init__(self):
        super().__init__('No active session')
