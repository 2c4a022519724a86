import uuid
from datetime import datetime, timezone


def current_time() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


def normalize_email(value: str) -> str:
    return value.strip().lower()


def percentage(part: float, total: float) -> int:
    if not total:
        return 0
    return round(part / total * 100)
