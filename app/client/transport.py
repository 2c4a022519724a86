from typing import Any, Optional, Union

import requests
from pydantic import TypeAdapter

from app.client.errors import ApiError, ConnectivityUnavailable
from app.client.operations import Operation
from app.core.config import settings
from app.core.logger import logger

operation_adapter = TypeAdapter(Operation)


class EventClient:
    """Single entry point from a client station to the API.

    ``http`` is anything exposing ``request(method, url, ...)`` the way
    ``requests.Session`` does, which lets tests plug in FastAPI's TestClient.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Any = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (settings.API_URL if base_url is None else base_url).rstrip('/')
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout or settings.CLIENT_TIMEOUT_SECONDS
        self.token: Optional[str] = None

    def execute(self, operation: Union[Operation, dict]) -> Any:
        if isinstance(operation, dict):
            operation = operation_adapter.validate_python(operation)

        request = operation.to_request()
        headers = {}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'

        logger.debug('%s %s (%s)', request.method, request.path, operation.kind)
        try:
            response = self.http.request(
                request.method,
                f'{self.base_url}{request.path}',
                params=request.params,
                json=request.json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error('API unreachable for %s: %s', operation.kind, e)
            raise ConnectivityUnavailable(str(e))

        if response.status_code >= 400:
            try:
                detail = response.json().get('detail')
            except (ValueError, AttributeError):
                detail = None
            logger.error(
                'API error %s for %s: %s', response.status_code, operation.kind, detail
            )
            raise ApiError(response.status_code, detail)

        # A truncated or mangled body leaves the outcome unknown
        try:
            return response.json()
        except ValueError as e:
            logger.error('Unreadable API response for %s: %s', operation.kind, e)
            raise ConnectivityUnavailable(f'Unreadable response: {e}')
