import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Sequence, Union

import geopandas as gpd
from shapely.geometry import Point

from clustering.cluster_analysis import SINGLE_PASS, IncidentCluster
from config import FILE_PATTERNS, PROCESSED_DATA_DIR
from reporting.report_builder import IncidentReport

logger = logging.getLogger(__name__)


def clusters_to_geodataframe(clusters: Sequence[IncidentCluster]) -> gpd.GeoDataFrame:
    """Cluster centroids as WGS84 points, one row per cluster"""
    rows = [
        {
            "cluster_id": cluster.cluster_id,
            "size": cluster.size,
            "severity": cluster.severity.value,
            "center_lat": cluster.center_lat,
            "center_lng": cluster.center_lng
        }
        for cluster in clusters
    ]
    geometry = [Point(cluster.center_lng, cluster.center_lat) for cluster in clusters]
    return gpd.GeoDataFrame(
        rows,
        columns=["cluster_id", "size", "severity", "center_lat", "center_lng"],
        geometry=geometry,
        crs="EPSG:4326"
    )


class ReportExporter:
    def __init__(self, output_dir: Union[str, Path] = None):
        self.output_dir = Path(output_dir) if output_dir is not None else PROCESSED_DATA_DIR

    def _target(self, filename: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir / filename

    def export_report(self, report: IncidentReport, filename: str = None) -> str:
        """Export report to JSON"""
        if filename is None:
            filename = FILE_PATTERNS["incident_report"].format(date=report.generated_at.strftime("%Y-%m-%d"))

        filepath = self._target(filename)
        with open(filepath, "w") as f:
            json.dump(report.to_dict(), f, indent=2)

        logger.info(f"Report exported to {filepath}")
        return str(filepath)

    def export_clusters_geojson(self, clusters: Sequence[IncidentCluster],
                                method: str = SINGLE_PASS, filename: str = None) -> str:
        """Export cluster centroids to GeoJSON"""
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = FILE_PATTERNS["cluster_geojson"].format(method=method, timestamp=timestamp)

        filepath = self._target(filename)
        clusters_to_geodataframe(clusters).to_file(filepath, driver="GeoJSON")

        logger.info(f"Cluster centroids exported to {filepath}")
        return str(filepath)
