import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial.distance import cdist
from sklearn.cluster import KMeans
from sklearn.metrics import silhouette_score

from config import CLUSTERING_CONFIG
from src.data.exceptions import InvalidParameterError
from src.data.records import IncidentRecord, Severity, round_half_up

logger = logging.getLogger(__name__)

SINGLE_PASS = "single_pass"
KMEANS = "kmeans"


@dataclass(frozen=True)
class IncidentCluster:
    cluster_id: int
    center_lat: float
    center_lng: float
    incidents: Tuple[IncidentRecord, ...]
    severity: Severity

    @property
    def size(self) -> int:
        return len(self.incidents)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.cluster_id,
            "center_lat": self.center_lat,
            "center_lng": self.center_lng,
            "size": self.size,
            "severity": self.severity.value,
            "incident_ids": [incident.incident_id for incident in self.incidents]
        }


def severity_for_size(size: int) -> Severity:
    """Severity tier of a cluster, a function of member count alone"""
    if size >= CLUSTERING_CONFIG["high_severity_min_size"]:
        return Severity.HIGH
    if size >= CLUSTERING_CONFIG["medium_severity_min_size"]:
        return Severity.MEDIUM
    return Severity.LOW


class IncidentClusterAnalyzer:
    def __init__(self, random_state: Optional[int] = None):
        if random_state is None:
            random_state = CLUSTERING_CONFIG["random_state"]
        self.rng = np.random.default_rng(random_state)
        self.random_state = random_state

    @staticmethod
    def _validate_k(k) -> None:
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k <= 0:
            raise InvalidParameterError(f"Number of clusters must be a positive integer, got {k!r}")

    @staticmethod
    def prepare_clustering_data(records: Sequence[IncidentRecord]) -> np.ndarray:
        """(n, 2) array of raw latitude/longitude degrees"""
        return np.array([record.coordinates for record in records], dtype=float).reshape(-1, 2)

    def cluster(self, records: Sequence[IncidentRecord], k: int = None) -> List[IncidentCluster]:
        """Single-pass clustering: random centroids inside the bounding box, one
        assignment, one centroid update. Not iterated to convergence."""
        if k is None:
            k = CLUSTERING_CONFIG["default_k"]
        self._validate_k(k)

        if not records:
            return []

        X = self.prepare_clustering_data(records)
        lower = X.min(axis=0)
        upper = X.max(axis=0)

        # Each coordinate drawn independently and uniformly within the bounds
        seeds = lower + (upper - lower) * self.rng.random((k, 2))

        # argmin keeps the first minimum, so ties go to the lowest cluster index
        labels = cdist(X, seeds, metric="euclidean").argmin(axis=1)

        clusters = self._build_clusters(records, X, labels, k)
        logger.info(f"Single-pass clustering: {len(records)} incidents into {len(clusters)} of {k} clusters")
        return clusters

    def cluster_converged(self, records: Sequence[IncidentRecord], k: int = None,
                          max_iter: int = None) -> List[IncidentCluster]:
        """Lloyd's k-means iterated to convergence; an alternative to ``cluster``"""
        if k is None:
            k = CLUSTERING_CONFIG["default_k"]
        if max_iter is None:
            max_iter = CLUSTERING_CONFIG["kmeans_max_iter"]
        self._validate_k(k)

        if not records:
            return []

        X = self.prepare_clustering_data(records)
        n_clusters = min(k, len(np.unique(X, axis=0)))

        kmeans = KMeans(
            n_clusters=n_clusters,
            max_iter=max_iter,
            n_init=CLUSTERING_CONFIG["kmeans_n_init"],
            random_state=self.random_state
        )
        labels = kmeans.fit_predict(X)

        clusters = self._build_clusters(records, X, labels, n_clusters)
        logger.info(f"K-means clustering converged after {kmeans.n_iter_} iterations "
                    f"with {len(clusters)} clusters")
        return clusters

    @staticmethod
    def _build_clusters(records: Sequence[IncidentRecord], X: np.ndarray,
                        labels: np.ndarray, k: int) -> List[IncidentCluster]:
        clusters = []
        for label in range(k):
            member_idx = np.flatnonzero(labels == label)
            if len(member_idx) == 0:
                continue

            center_lat, center_lng = X[member_idx].mean(axis=0)
            clusters.append(IncidentCluster(
                cluster_id=len(clusters),
                center_lat=float(center_lat),
                center_lng=float(center_lng),
                incidents=tuple(records[i] for i in member_idx),
                severity=severity_for_size(len(member_idx))
            ))
        return clusters

    @staticmethod
    def identify_hotspots(clusters: Sequence[IncidentCluster]) -> List[IncidentCluster]:
        """Clusters in the High severity tier"""
        return [cluster for cluster in clusters if cluster.severity is Severity.HIGH]

    def evaluate_clustering(self, clusters: Sequence[IncidentCluster]) -> Dict[str, Any]:
        """Silhouette score and inertia of a clustering result"""
        points = []
        labels = []
        inertia = 0.0
        for cluster in clusters:
            X = self.prepare_clustering_data(cluster.incidents)
            center = np.array([cluster.center_lat, cluster.center_lng])
            inertia += float(((X - center) ** 2).sum())
            points.append(X)
            labels.extend([cluster.cluster_id] * len(X))

        n_points = len(labels)
        silhouette = None
        if len(clusters) >= 2 and n_points > len(clusters):
            silhouette = float(silhouette_score(np.vstack(points), labels))

        return {
            "n_clusters": len(clusters),
            "n_incidents": n_points,
            "inertia": inertia,
            "silhouette_score": silhouette,
            "cluster_sizes": [cluster.size for cluster in clusters]
        }

    @staticmethod
    def summarize_clusters(clusters: Sequence[IncidentCluster], total: int) -> Dict[str, Any]:
        n_clusters = len(clusters)
        return {
            "n_clusters": n_clusters,
            "high_severity_clusters": sum(1 for c in clusters if c.severity is Severity.HIGH),
            "avg_incidents_per_cluster": round_half_up(total / n_clusters) if n_clusters else 0,
            "shares": {
                c.cluster_id: round(c.size / total * 100, 1) if total else 0.0
                for c in clusters
            }
        }
