from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Outcome(str, Enum):
    UPDATED = 'updated'
    ABOVE_THRESHOLD = 'above_threshold'
    INCOMPLETE = 'incomplete'
    MALFORMED = 'malformed'
    DEVICE_NOT_FOUND = 'device_not_found'
    PROPERTY_MISSING = 'property_missing'
    CONFLICT = 'conflict'
    ERROR = 'error'


@dataclass
class RecordResult:
    line_number: int
    outcome: Outcome
    device_id: Optional[str] = None
    previous_rate: Optional[int] = None
    new_rate: Optional[int] = None
    message: Optional[str] = None
