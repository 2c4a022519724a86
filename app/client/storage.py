import json
import os
from typing import Any, Callable, Dict

from filelock import FileLock

from app.core.logger import logger


class LocalStore:
    """Small JSON key/value file that keeps client state across restarts.

    Every access holds a lock file next to the state file, so several client
    processes on one station can share it.
    """

    def __init__(self, path: str, timeout: float = 5):
        self.path = path
        self._lock = FileLock(f'{path}.lock', timeout=timeout)

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, 'r') as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                logger.error('Discarding unreadable client state %s: %s', self.path, e)
                return {}

    def _write(self, data: Dict[str, Any]) -> None:
        tmp_path = f'{self.path}.{os.getpid()}.tmp'
        with open(tmp_path, 'w') as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self.path)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def update(self, key: str, func: Callable[[Any], Any], default: Any = None) -> Any:
        """Read, transform and write back one key under a single lock.

        A result of None removes the key.
        """
        with self._lock:
            data = self._read()
            value = func(data.get(key, default))
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
            self._write(data)
            return value
