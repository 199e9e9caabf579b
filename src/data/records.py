import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from src.data.exceptions import MalformedTimeError


class Severity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value, default: "Severity" = None) -> "Severity":
        """Map a raw severity label to the enum, falling back to ``default`` (Medium)"""
        if default is None:
            default = cls.MEDIUM
        if isinstance(value, cls):
            return value
        if value is None:
            return default
        label = str(value).strip().capitalize()
        for member in cls:
            if member.value == label:
                return member
        return default


@dataclass(frozen=True)
class IncidentRecord:
    incident_id: str
    date: date
    time: str
    category: str
    description: str
    latitude: float
    longitude: float
    district: Optional[str] = None
    severity: Severity = Severity.MEDIUM

    def __post_init__(self):
        # Accept plain labels such as "High"
        object.__setattr__(self, "severity", Severity.parse(self.severity))

    @property
    def coordinates(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class DailyCount:
    date: date
    count: int
    is_forecast: bool = False

    def to_dict(self):
        return {
            "date": self.date.isoformat(),
            "count": self.count,
            "predicted": self.is_forecast
        }


@dataclass(frozen=True)
class CategoryStat:
    category: str
    count: int
    percentage: int

    def to_dict(self):
        return {"category": self.category, "count": self.count, "percentage": self.percentage}


@dataclass(frozen=True)
class HourlyStat:
    hour: int
    count: int

    def to_dict(self):
        return {"hour": self.hour, "count": self.count}


@dataclass(frozen=True)
class DistrictStat:
    district: str
    count: int

    def to_dict(self):
        return {"district": self.district, "count": self.count}


@dataclass(frozen=True)
class SeverityStat:
    severity: Severity
    count: int

    def to_dict(self):
        return {"severity": self.severity.value, "count": self.count}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, unlike Python's banker's rounding"""
    return int(math.floor(value + 0.5))


def parse_hour(record: IncidentRecord) -> int:
    """Hour of day from an HH:MM time field, or its leading two digits when there is no colon"""
    raw = record.time
    text = str(raw).strip()
    leading = text.split(":")[0] if ":" in text else text[:2]
    try:
        hour = int(leading.strip())
    except (TypeError, ValueError):
        raise MalformedTimeError(raw, record.incident_id) from None

    if not 0 <= hour <= 23:
        raise MalformedTimeError(raw, record.incident_id)
    return hour


def is_strictly_increasing(series) -> bool:
    return all(earlier.date < later.date for earlier, later in zip(series, series[1:]))
