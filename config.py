from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent
DATA_DIR = PROJECT_ROOT / "data"
PROCESSED_DATA_DIR = DATA_DIR / "processed"

# Clustering parameters
CLUSTERING_CONFIG = {
    "default_k": 5,
    "high_severity_min_size": 51,
    "medium_severity_min_size": 21,
    "kmeans_max_iter": 300,
    "kmeans_n_init": 10,
    "random_state": None
}

# Forecasting parameters
FORECAST_CONFIG = {
    "horizon_days": 30,
    "trend_window": 30,
    "seasonality": 0.1,
    "seasonal_frequency": 0.2,
    "noise_amplitude": 1.0,
    "linear_trend_window": 7,
    "linear_min_history": 3,
    "linear_seasonal_amplitude": 2.0,
    "linear_noise_amplitude": 1.5
}

# Risk scoring parameters
RISK_CONFIG = {
    "night_hours": (22, 5),
    "evening_start": 18,
    "morning_end": 8,
    "time_weights": {"night": 0.3, "evening_morning": 0.2, "day": 0.1},
    "high_risk_categories": ["Assault", "Robbery", "Burglary"],
    "medium_risk_categories": ["Theft", "Vandalism"],
    "category_weights": {"high": 0.4, "medium": 0.2, "low": 0.1},
    "severity_weights": {"High": 0.3, "Medium": 0.2, "Low": 0.1},
    "high_risk_threshold": 0.7,
    "low_risk_threshold": 0.3
}

# Classifier report stub parameters (lower bound, spread)
CLASSIFIER_CONFIG = {
    "accuracy": (0.78, 0.15),
    "precision": (0.75, 0.15),
    "recall": (0.72, 0.15),
    "decimals": 2
}

# Ingestion defaults and synthetic data generation
INGESTION_CONFIG = {
    "default_category": "Unknown",
    "default_description": "No description",
    "default_time": "00:00",
    "default_severity": "Medium",
    "default_location": (40.7128, -74.0060),
    "sample_size": 500,
    "sample_start_date": "2024-01-01",
    "sample_days": 365,
    "sample_jitter": 0.05,
    "categories": ["Theft", "Assault", "Burglary", "Vandalism", "Drug Offense", "Fraud", "Robbery"],
    "districts": ["Downtown", "Northside", "Southside", "Westend", "Eastside"],
    "hotspot_centers": [
        (40.7128, -74.0060),
        (40.7589, -73.9851),
        (40.6892, -74.0445)
    ]
}

# Report assembly
REPORT_CONFIG = {
    "all_time_label": "All time",
    "range_label": "Last {days} days"
}

# File naming conventions
FILE_PATTERNS = {
    "incident_report": "incident_report_{date}.json",
    "cluster_geojson": "clusters_{method}_{timestamp}.geojson",
    "log_file": "analysis.log"
}
