import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from clustering.cluster_analysis import SINGLE_PASS, KMEANS, IncidentCluster, IncidentClusterAnalyzer
from config import CLUSTERING_CONFIG, FORECAST_CONFIG, REPORT_CONFIG
from prediction.classifier import ClassifierReport, IncidentClassifierStub
from prediction.forecasting import TrendForecaster
from risk.risk_model import IncidentRiskScorer
from src.data.aggregation import IncidentAggregator
from src.data.exceptions import EmptyInputError
from src.data.records import (
    CategoryStat, DailyCount, DistrictStat, HourlyStat, IncidentRecord,
    Severity, SeverityStat, round_half_up
)

logger = logging.getLogger(__name__)


def date_range_label(days: Optional[int]) -> str:
    if days is None:
        return REPORT_CONFIG["all_time_label"]
    return REPORT_CONFIG["range_label"].format(days=days)


@dataclass(frozen=True)
class IncidentReport:
    generated_at: datetime
    date_range: str
    total_incidents: int
    category_breakdown: List[CategoryStat]
    district_breakdown: List[DistrictStat]
    severity_breakdown: List[SeverityStat]
    hourly_breakdown: List[HourlyStat]
    daily_series: List[DailyCount]
    forecast: List[DailyCount]
    clusters: List[IncidentCluster]
    clustering_method: str
    summary: Dict[str, Any]
    classifier_report: Optional[ClassifierReport] = None
    risk_statistics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generatedAt": self.generated_at.isoformat(),
            "dateRange": self.date_range,
            "totalIncidents": self.total_incidents,
            "categoryBreakdown": [stat.to_dict() for stat in self.category_breakdown],
            "districtBreakdown": [stat.to_dict() for stat in self.district_breakdown],
            "severityBreakdown": [stat.to_dict() for stat in self.severity_breakdown],
            "hourlyBreakdown": [stat.to_dict() for stat in self.hourly_breakdown],
            "clusters": len(self.clusters),
            "clusteringMethod": self.clustering_method,
            "clusterDetails": [cluster.to_dict() for cluster in self.clusters],
            "timeSeriesSummary": {
                "dailyAverage": self.summary["daily_average"],
                "peakDay": self.summary["peak_day"]
            },
            "forecast": [point.to_dict() for point in self.forecast],
            "summary": self.summary,
            "classifierReport": self.classifier_report.to_dict() if self.classifier_report else None,
            "riskStatistics": self.risk_statistics
        }


class IncidentReportBuilder:
    def __init__(self, random_state: Optional[int] = None):
        self.aggregator = IncidentAggregator()
        self.cluster_analyzer = IncidentClusterAnalyzer(random_state=random_state)
        self.forecaster = TrendForecaster(random_state=random_state)
        self.risk_scorer = IncidentRiskScorer()
        self.classifier = IncidentClassifierStub(random_state=random_state)

    def assemble(self, total_incidents: int,
                 category_breakdown: List[CategoryStat],
                 district_breakdown: List[DistrictStat],
                 severity_breakdown: List[SeverityStat],
                 hourly_breakdown: List[HourlyStat],
                 daily_series: List[DailyCount],
                 forecast: List[DailyCount],
                 clusters: List[IncidentCluster],
                 generated_at: datetime,
                 days: Optional[int] = None,
                 clustering_method: str = SINGLE_PASS,
                 classifier_report: Optional[ClassifierReport] = None,
                 risk_statistics: Dict[str, Any] = None,
                 overview: Dict[str, Any] = None,
                 forecast_summary: Dict[str, Any] = None) -> IncidentReport:
        """Bundle computed outputs, picking headline values without recomputing them"""
        top_category = category_breakdown[0] if category_breakdown else None
        top_district = district_breakdown[0] if district_breakdown else None
        peak_day = max(daily_series, key=lambda point: point.count) if daily_series else None
        peak_hour = self.aggregator.peak_hour(hourly_breakdown)

        summary = {
            "total_incidents": total_incidents,
            "top_category": top_category.category if top_category else None,
            "top_category_percentage": top_category.percentage if top_category else None,
            "top_district": top_district.district if top_district else None,
            "top_district_count": top_district.count if top_district else None,
            "high_severity_clusters": sum(1 for c in clusters if c.severity is Severity.HIGH),
            "peak_hour": peak_hour.hour if peak_hour and peak_hour.count else None,
            "peak_day": peak_day.to_dict() if peak_day else None,
            "daily_average": round_half_up(total_incidents / len(daily_series)) if daily_series else 0,
            "overview": dict(overview or {}),
            "forecast": dict(forecast_summary or {})
        }

        return IncidentReport(
            generated_at=generated_at,
            date_range=date_range_label(days),
            total_incidents=total_incidents,
            category_breakdown=list(category_breakdown),
            district_breakdown=list(district_breakdown),
            severity_breakdown=list(severity_breakdown),
            hourly_breakdown=list(hourly_breakdown),
            daily_series=list(daily_series),
            forecast=list(forecast),
            clusters=list(clusters),
            clustering_method=clustering_method,
            summary=summary,
            classifier_report=classifier_report,
            risk_statistics=dict(risk_statistics or {})
        )

    def run_complete_analysis(self, records: Sequence[IncidentRecord], as_of: date,
                              k: int = None, days: Optional[int] = None,
                              horizon_days: int = None, converged: bool = False,
                              generated_at: Optional[datetime] = None) -> IncidentReport:
        """Filter by date range, run every component, then assemble the report"""
        if k is None:
            k = CLUSTERING_CONFIG["default_k"]
        if horizon_days is None:
            horizon_days = FORECAST_CONFIG["horizon_days"]
        if generated_at is None:
            generated_at = datetime.now()

        selected = self.aggregator.filter_by_date_range(records, days, as_of)
        logger.info(f"Analysing {len(selected)} of {len(records)} incidents ({date_range_label(days)})")

        category_breakdown = self.aggregator.category_stats(selected)
        daily_series = self.aggregator.daily_counts(selected)

        if converged:
            clusters = self.cluster_analyzer.cluster_converged(selected, k)
        else:
            clusters = self.cluster_analyzer.cluster(selected, k)

        forecast = self.forecaster.forecast(daily_series, horizon_days)

        try:
            risk_statistics = self.risk_scorer.get_risk_statistics(selected)
        except EmptyInputError as e:
            logger.warning(f"Risk statistics unavailable: {e}")
            risk_statistics = {}

        report = self.assemble(
            total_incidents=len(selected),
            category_breakdown=category_breakdown,
            district_breakdown=self.aggregator.district_stats(selected),
            severity_breakdown=self.aggregator.severity_stats(selected),
            hourly_breakdown=self.aggregator.hourly_stats(selected),
            daily_series=daily_series,
            forecast=forecast,
            clusters=clusters,
            generated_at=generated_at,
            days=days,
            clustering_method=KMEANS if converged else SINGLE_PASS,
            classifier_report=self.classifier.generate_report(selected),
            risk_statistics=risk_statistics,
            overview=self.aggregator.overview(selected, as_of),
            forecast_summary=self.forecaster.summarize(daily_series, forecast)
        )

        logger.info(f"Report ready: {len(clusters)} clusters, "
                    f"{report.summary['high_severity_clusters']} high-severity")
        return report
