from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class DayStatus(BaseModel):
    is_open: bool
    opened_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    duration_hours: Optional[float] = None
