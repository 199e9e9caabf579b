import logging
import math
from datetime import timedelta
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from config import FORECAST_CONFIG
from src.data.exceptions import InsufficientHistoryError, InvalidParameterError
from src.data.records import DailyCount, is_strictly_increasing, round_half_up

logger = logging.getLogger(__name__)


def _validate_horizon(horizon_days) -> None:
    if isinstance(horizon_days, bool) or not isinstance(horizon_days, (int, np.integer)) or horizon_days < 0:
        raise InvalidParameterError(f"Forecast horizon must be a non-negative integer, got {horizon_days!r}")


class TrendForecaster:
    """Lightweight trend + sinusoidal seasonality + bounded noise forecaster.

    The projection is a heuristic, not a fitted statistical model: the level is
    the mean of the most recent counts, the seasonal term swings by at most
    ``seasonality`` of that level and the noise is uniform in
    [-noise_amplitude, noise_amplitude]. Counts are clamped at zero.
    """

    def __init__(self, random_state: Optional[int] = None, config: Dict[str, Any] = None):
        self.config = dict(FORECAST_CONFIG)
        if config:
            self.config.update(config)
        self.rng = np.random.default_rng(random_state)

    def recent_trend(self, series: Sequence[DailyCount]) -> float:
        window = series[-self.config["trend_window"]:]
        return sum(point.count for point in window) / len(window)

    def forecast(self, series: Sequence[DailyCount], horizon_days: int = None) -> List[DailyCount]:
        if horizon_days is None:
            horizon_days = self.config["horizon_days"]
        _validate_horizon(horizon_days)

        if len(series) < 1:
            raise InsufficientHistoryError("Forecasting needs at least one historical day")
        if not is_strictly_increasing(series):
            raise InvalidParameterError("Daily series must be sorted by strictly increasing date")

        level = self.recent_trend(series)
        last_date = series[-1].date
        seasonality = self.config["seasonality"]
        frequency = self.config["seasonal_frequency"]
        noise = self.config["noise_amplitude"]

        forecast = []
        for i in range(1, horizon_days + 1):
            value = (
                level
                + math.sin(i * frequency) * seasonality * level
                + self.rng.uniform(-noise, noise)
            )
            forecast.append(DailyCount(
                date=last_date + timedelta(days=i),
                count=max(0, round_half_up(value)),
                is_forecast=True
            ))

        logger.info(f"Forecast {horizon_days} days from {last_date.isoformat()} at level {level:.2f}")
        return forecast

    def project_linear_trend(self, counts: Sequence[int], horizon_days: int = None) -> List[int]:
        """Recent average plus the mean day-over-day change, extrapolated linearly"""
        if horizon_days is None:
            horizon_days = self.config["horizon_days"]
        _validate_horizon(horizon_days)

        if len(counts) < self.config["linear_min_history"]:
            return []

        window = counts[-self.config["linear_trend_window"]:]
        recent_avg = sum(window) / len(window)
        slope = float(np.diff(np.asarray(counts, dtype=float)).mean())
        amplitude = self.config["linear_seasonal_amplitude"]
        noise = self.config["linear_noise_amplitude"]

        predictions = []
        for i in range(1, horizon_days + 1):
            seasonal = math.sin(i * self.config["seasonal_frequency"]) * amplitude
            value = recent_avg + slope * i + seasonal + self.rng.uniform(-noise, noise)
            predictions.append(max(0, round_half_up(value)))
        return predictions

    @staticmethod
    def summarize(history: Sequence[DailyCount], forecast: Sequence[DailyCount]) -> Dict[str, Any]:
        """Average daily counts before and after the forecast boundary"""
        avg_historical = round_half_up(sum(p.count for p in history) / len(history)) if history else 0
        avg_forecast = round_half_up(sum(p.count for p in forecast) / len(forecast)) if forecast else 0
        trend_change = None
        if avg_historical:
            trend_change = round((avg_forecast - avg_historical) / avg_historical * 100, 1)

        return {
            "historical_days": len(history),
            "forecast_days": len(forecast),
            "avg_historical": avg_historical,
            "avg_forecast": avg_forecast,
            "trend_change_pct": trend_change
        }
