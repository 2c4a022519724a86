from typing import List

from pydantic import BaseModel


class CountItem(BaseModel):
    name: str
    value: int


class DashboardStats(BaseModel):
    total_attendees: int
    checked_in: int
    check_in_rate: int
    total_revenue: float
    remaining_revenue: float
    collection_rate: int
    by_seat_class: List[CountItem]
    by_governorate: List[CountItem]


class LiveCounter(BaseModel):
    total: int
    checked_in: int
    percentage: int
