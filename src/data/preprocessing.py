import io
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from config import INGESTION_CONFIG
from src.data.aggregation import records_to_frame
from src.data.records import IncidentRecord, Severity

logger = logging.getLogger(__name__)

LATITUDE_ALIASES = ["latitude", "lat"]
LONGITUDE_ALIASES = ["longitude", "lng", "lon"]


class IncidentDataPreprocessor:
    """Turns CSV text or synthetic draws into defaulted, type-correct incident records"""

    def __init__(self, config: Dict[str, Any] = None):
        self.config = dict(INGESTION_CONFIG)
        if config:
            self.config.update(config)

    def parse_csv(self, csv_text: str, as_of: date) -> List[IncidentRecord]:
        """Parse CSV text with a header row into incident records"""
        if not csv_text.strip():
            return []

        df = pd.read_csv(io.StringIO(csv_text.strip()), dtype=str, keep_default_na=False,
                         skipinitialspace=True)
        return self._records_from_frame(df, as_of)

    def load_csv(self, path: Union[str, Path], as_of: date) -> List[IncidentRecord]:
        """Load incident records from a CSV file on disk"""
        path = Path(path)
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
        records = self._records_from_frame(df, as_of)
        logger.info(f"Loaded {len(records)} incidents from {path}")
        return records

    def _records_from_frame(self, df: pd.DataFrame, as_of: date) -> List[IncidentRecord]:
        df = df.rename(columns=lambda name: str(name).strip().lower()).fillna("")

        records = []
        for index, row in enumerate(df.to_dict("records")):
            values = {key: str(value).strip() for key, value in row.items()}
            records.append(self._build_record(values, index, as_of))
        return records

    def _build_record(self, values: Dict[str, str], index: int, as_of: date) -> IncidentRecord:
        latitude, longitude = self._parse_location(values, index)

        raw_severity = values.get("severity", "")
        severity = Severity.parse(raw_severity or None, Severity(self.config["default_severity"]))
        if raw_severity and severity.value != raw_severity.capitalize():
            logger.warning(f"Row {index + 1}: unknown severity {raw_severity!r}, using {severity.value}")

        return IncidentRecord(
            incident_id=values.get("id") or f"imported_{index + 1}",
            date=self._parse_date(values.get("date", ""), as_of, index),
            time=values.get("time") or self.config["default_time"],
            category=values.get("category") or self.config["default_category"],
            description=values.get("description") or self.config["default_description"],
            latitude=latitude,
            longitude=longitude,
            district=values.get("district") or None,
            severity=severity
        )

    def _parse_date(self, raw: str, as_of: date, index: int) -> date:
        if not raw:
            return as_of
        parsed = pd.to_datetime(raw, errors="coerce")
        if pd.isna(parsed):
            logger.warning(f"Row {index + 1}: unparseable date {raw!r}, using {as_of.isoformat()}")
            return as_of
        return parsed.date()

    def _parse_location(self, values: Dict[str, str], index: int):
        default_lat, default_lon = self.config["default_location"]
        latitude = self._first_float(values, LATITUDE_ALIASES)
        longitude = self._first_float(values, LONGITUDE_ALIASES)

        if latitude is None or not -90 <= latitude <= 90:
            if latitude is not None:
                logger.warning(f"Row {index + 1}: latitude {latitude} out of range, using default")
            latitude = default_lat
        if longitude is None or not -180 <= longitude <= 180:
            if longitude is not None:
                logger.warning(f"Row {index + 1}: longitude {longitude} out of range, using default")
            longitude = default_lon

        return latitude, longitude

    @staticmethod
    def _first_float(values: Dict[str, str], aliases: List[str]) -> Optional[float]:
        for alias in aliases:
            raw = values.get(alias)
            if not raw:
                continue
            try:
                value = float(raw)
            except ValueError:
                continue
            if np.isfinite(value):
                return value
        return None

    def generate_sample_data(self, n_records: int = None,
                             random_state: Optional[int] = None) -> List[IncidentRecord]:
        """Synthetic incidents scattered around a few hotspot centres"""
        if n_records is None:
            n_records = self.config["sample_size"]

        rng = np.random.default_rng(random_state)
        start = pd.Timestamp(self.config["sample_start_date"]).date()
        centers = self.config["hotspot_centers"]
        categories = self.config["categories"]
        districts = self.config["districts"]
        severities = list(Severity)
        jitter = self.config["sample_jitter"]

        records = []
        for i in range(n_records):
            center_lat, center_lng = centers[rng.integers(len(centers))]
            hour = int(rng.integers(24))
            minute = int(rng.integers(60))

            records.append(IncidentRecord(
                incident_id=f"crime_{i + 1}",
                date=start + timedelta(days=int(rng.integers(self.config["sample_days"]))),
                time=f"{hour:02d}:{minute:02d}",
                category=str(rng.choice(categories)),
                description=f"Crime incident {i + 1}",
                latitude=center_lat + (rng.random() - 0.5) * jitter,
                longitude=center_lng + (rng.random() - 0.5) * jitter,
                district=str(rng.choice(districts)),
                severity=severities[rng.integers(len(severities))]
            ))

        logger.info(f"Generated {n_records} synthetic incidents")
        return records

    def to_dataframe(self, records: Sequence[IncidentRecord]) -> pd.DataFrame:
        return records_to_frame(records)

    def get_data_summary(self, records: Sequence[IncidentRecord]) -> Dict[str, Any]:
        """Generate summary statistics for the dataset"""
        df = self.to_dataframe(records)
        if df.empty:
            return {"total_incidents": 0}

        return {
            "total_incidents": len(df),
            "unique_categories": int(df["category"].nunique()),
            "unique_districts": int(df["district"].nunique()),
            "date_range": {
                "start": min(df["date"]).isoformat(),
                "end": max(df["date"]).isoformat()
            },
            "bounds": {
                "min_lat": float(df["latitude"].min()),
                "max_lat": float(df["latitude"].max()),
                "min_lng": float(df["longitude"].min()),
                "max_lng": float(df["longitude"].max())
            },
            "severity_distribution": {str(k): int(v) for k, v in df["severity"].value_counts().items()}
        }
