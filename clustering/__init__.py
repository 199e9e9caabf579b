"""
Spatial Clustering Module for Incident Hotspot Mapping

Partitions geotagged incidents into hotspot clusters and labels each cluster
with a severity tier derived from its member count.

Main Components:
- cluster_analysis.py: single-pass and converged k-means clustering, hotspot
  selection and cluster evaluation

Usage:
    from clustering import IncidentClusterAnalyzer
    analyzer = IncidentClusterAnalyzer(random_state=42)
    clusters = analyzer.cluster(records, k=5)
"""

from .cluster_analysis import (
    IncidentCluster,
    IncidentClusterAnalyzer,
    severity_for_size,
    SINGLE_PASS,
    KMEANS
)

__version__ = "1.0.0"
__author__ = "Crime Hotspot Mapping Team"

__all__ = [
    "IncidentCluster",
    "IncidentClusterAnalyzer",
    "severity_for_size",
    "SINGLE_PASS",
    "KMEANS"
]
