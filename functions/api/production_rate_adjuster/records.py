import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from production_rate_adjuster.errors import MalformedRecord

QUALITY_THRESHOLD = 90


@dataclass(frozen=True)
class QualityRecord:
    device_name: str
    window_end: Optional[datetime] = None
    total_good: Optional[float] = None
    total_produced: Optional[float] = None
    good_percentage: Optional[float] = None

    @property
    def is_actionable(self) -> bool:
        return bool(self.device_name) and self.good_percentage is not None


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def parse_record(line: str) -> QualityRecord:
    """Parse one NDJSON line produced by the KPI aggregation job.

    Raises MalformedRecord when the line is not a JSON object. Fields that are
    missing or of the wrong type are left as None rather than rejected.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise MalformedRecord(f'invalid JSON: {e}') from e

    if not isinstance(data, dict):
        raise MalformedRecord(f'expected a JSON object, got {type(data).__name__}')

    device_name = data.get('DeviceName')
    return QualityRecord(
        device_name=device_name if isinstance(device_name, str) else '',
        window_end=_timestamp(data.get('WindowEnd')),
        total_good=_number(data.get('TotalGood')),
        total_produced=_number(data.get('TotalProduced')),
        good_percentage=_number(data.get('GoodPercentage')),
    )


def is_below_threshold(record: QualityRecord) -> bool:
    return record.good_percentage is not None and record.good_percentage < QUALITY_THRESHOLD


def to_device_id(device_name: str) -> str:
    return device_name.replace(' ', '-').lower()
