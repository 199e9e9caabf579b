import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from src.data.exceptions import EmptyInputError, InvalidParameterError, MalformedTimeError
from src.data.records import (
    CategoryStat, DailyCount, DistrictStat, HourlyStat, IncidentRecord,
    Severity, SeverityStat, parse_hour, round_half_up
)

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "incident_id", "date", "time", "category", "description",
    "latitude", "longitude", "district", "severity"
]


def records_to_frame(records: Sequence[IncidentRecord]) -> pd.DataFrame:
    """One row per record; columns exist even when there are no records"""
    rows = [
        {
            "incident_id": record.incident_id,
            "date": record.date,
            "time": record.time,
            "category": record.category,
            "description": record.description,
            "latitude": record.latitude,
            "longitude": record.longitude,
            "district": record.district,
            "severity": record.severity.value
        }
        for record in records
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


class IncidentAggregator:
    """Groups incident records by category, hour, day, district and severity.

    Every method builds its own frame from the input and returns fresh value
    objects, so repeated calls on the same records give identical results.
    """

    def category_stats(self, records: Sequence[IncidentRecord]) -> List[CategoryStat]:
        total = len(records)
        if total == 0:
            raise EmptyInputError("Cannot compute category percentages for zero records")

        df = records_to_frame(records)
        counts = df.groupby("category", sort=False).size().sort_values(ascending=False, kind="stable")

        return [
            CategoryStat(
                category=str(category),
                count=int(count),
                percentage=round_half_up(count / total * 100)
            )
            for category, count in counts.items()
        ]

    def hourly_stats(self, records: Sequence[IncidentRecord]) -> List[HourlyStat]:
        hours = []
        skipped = 0
        for record in records:
            try:
                hours.append(parse_hour(record))
            except MalformedTimeError as e:
                skipped += 1
                logger.warning(f"Skipping record in hourly aggregation: {e}")

        if skipped:
            logger.info(f"Hourly aggregation skipped {skipped} of {len(records)} records")

        counts = pd.Series(hours, dtype="int64").value_counts().reindex(range(24), fill_value=0)
        return [HourlyStat(hour=int(hour), count=int(count)) for hour, count in counts.items()]

    def daily_counts(self, records: Sequence[IncidentRecord]) -> List[DailyCount]:
        if not records:
            return []

        df = records_to_frame(records)
        df["date"] = pd.to_datetime(df["date"])
        counts = df.groupby("date").size().sort_index()

        return [
            DailyCount(date=timestamp.date(), count=int(count))
            for timestamp, count in counts.items()
        ]

    def district_stats(self, records: Sequence[IncidentRecord]) -> List[DistrictStat]:
        df = records_to_frame(records)
        df = df[df["district"].notna() & (df["district"] != "")]
        if df.empty:
            return []

        counts = df.groupby("district", sort=False).size().sort_values(ascending=False, kind="stable")
        return [DistrictStat(district=str(name), count=int(count)) for name, count in counts.items()]

    def severity_stats(self, records: Sequence[IncidentRecord]) -> List[SeverityStat]:
        df = records_to_frame(records)
        counts = df.groupby("severity").size()
        return [
            SeverityStat(severity=severity, count=int(counts[severity.value]))
            for severity in Severity
            if severity.value in counts.index
        ]

    def count_on(self, records: Sequence[IncidentRecord], as_of: date) -> int:
        """Number of records dated exactly ``as_of``"""
        return sum(1 for record in records if record.date == as_of)

    def filter_by_date_range(self, records: Sequence[IncidentRecord], days: Optional[int],
                             as_of: date) -> List[IncidentRecord]:
        """Keep records dated on or after ``as_of - days``; ``days=None`` keeps everything"""
        if days is None:
            return list(records)
        if days < 0:
            raise InvalidParameterError(f"Date range must be non-negative, got {days}")

        cutoff = as_of - timedelta(days=days)
        return [record for record in records if record.date >= cutoff]

    def peak_hour(self, hourly: Sequence[HourlyStat]) -> Optional[HourlyStat]:
        if not hourly:
            return None
        # max() keeps the first maximal element
        return max(hourly, key=lambda stat: stat.count)

    def overview(self, records: Sequence[IncidentRecord], as_of: date) -> Dict[str, Any]:
        """Headline numbers for a record set as seen on ``as_of``"""
        districts = {record.district for record in records if record.district}
        return {
            "total_incidents": len(records),
            "unique_districts": len(districts),
            "high_severity_incidents": sum(1 for r in records if r.severity is Severity.HIGH),
            "incidents_on_as_of_date": self.count_on(records, as_of),
            "as_of": as_of.isoformat()
        }
