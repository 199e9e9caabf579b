import logging
import math
from typing import Any, Dict, List, Sequence

import numpy as np

from config import RISK_CONFIG
from src.data.exceptions import EmptyInputError, MalformedTimeError
from src.data.records import IncidentRecord, Severity, parse_hour

logger = logging.getLogger(__name__)


class IncidentRiskScorer:
    """Additive risk heuristic over time of day, category and severity.

    Within each factor exactly one bucket applies, tested in priority order.
    The three contributions top out at 0.3 + 0.4 + 0.3, so the clamp to 1.0
    only bounds rounding.
    """

    def __init__(self):
        self.config = RISK_CONFIG
        self.high_risk_categories = set(RISK_CONFIG["high_risk_categories"])
        self.medium_risk_categories = set(RISK_CONFIG["medium_risk_categories"])

    def _time_factor(self, hour: int) -> float:
        weights = self.config["time_weights"]
        night_start, night_end = self.config["night_hours"]

        if hour >= night_start or hour <= night_end:
            return weights["night"]
        if hour >= self.config["evening_start"] or hour <= self.config["morning_end"]:
            return weights["evening_morning"]
        return weights["day"]

    def _category_factor(self, category: str) -> float:
        weights = self.config["category_weights"]
        if category in self.high_risk_categories:
            return weights["high"]
        if category in self.medium_risk_categories:
            return weights["medium"]
        return weights["low"]

    def _severity_factor(self, severity: Severity) -> float:
        weights = self.config["severity_weights"]
        return weights.get(severity.value, weights["Low"])

    def score(self, record: IncidentRecord) -> float:
        """Risk score in [0, 1]; raises MalformedTimeError for an unparseable time"""
        hour = parse_hour(record)
        total = math.fsum([
            self._time_factor(hour),
            self._category_factor(record.category),
            self._severity_factor(record.severity)
        ])
        return min(1.0, total)

    def score_records(self, records: Sequence[IncidentRecord]) -> List[float]:
        return [self.score(record) for record in records]

    def get_risk_statistics(self, records: Sequence[IncidentRecord]) -> Dict[str, Any]:
        """Get statistics about record risk scores"""
        scores = []
        skipped = 0
        for record in records:
            try:
                scores.append(self.score(record))
            except MalformedTimeError as e:
                skipped += 1
                logger.warning(f"Skipping record in risk statistics: {e}")

        if not scores:
            raise EmptyInputError("No scorable records for risk statistics")

        scores = np.array(scores)
        return {
            "mean_risk": float(np.mean(scores)),
            "std_risk": float(np.std(scores)),
            "max_risk": float(np.max(scores)),
            "min_risk": float(np.min(scores)),
            "high_risk_share": float(np.sum(scores > self.config["high_risk_threshold"]) / scores.size),
            "low_risk_share": float(np.sum(scores < self.config["low_risk_threshold"]) / scores.size),
            "scored_records": int(scores.size),
            "skipped_records": skipped
        }
