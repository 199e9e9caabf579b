#!/usr/bin/env python3
"""
Launch Script for Incident Hotspot Analysis
Loads incident records, runs the analysis pipeline and exports the report
"""

import sys
import os
import argparse
import logging
from datetime import date, datetime

# Add project root to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from config import CLUSTERING_CONFIG, FORECAST_CONFIG, FILE_PATTERNS, INGESTION_CONFIG
from reporting.exporter import ReportExporter
from reporting.report_builder import IncidentReportBuilder
from src.data.exceptions import IncidentAnalysisError
from src.data.preprocessing import IncidentDataPreprocessor


def setup_logging(log_level=logging.INFO):
    """Setup logging configuration"""
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(FILE_PATTERNS["log_file"]),
            logging.StreamHandler(sys.stdout)
        ]
    )
    return logging.getLogger(__name__)


def load_records(args, as_of):
    """Load records from CSV or generate a synthetic sample"""
    logger = logging.getLogger(__name__)
    preprocessor = IncidentDataPreprocessor()

    if args.input:
        return preprocessor.load_csv(args.input, as_of)

    n_records = INGESTION_CONFIG["sample_size"] if args.sample is None else args.sample
    logger.info(f"No input file given, generating {n_records} sample incidents")
    return preprocessor.generate_sample_data(n_records, random_state=args.seed)


def run_analysis(args):
    """Run the complete analysis pipeline"""
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("Incident Hotspot Analysis")
    logger.info("=" * 60)

    try:
        as_of = date.fromisoformat(args.as_of) if args.as_of else date.today()
    except ValueError:
        logger.error(f"Invalid --as-of date: {args.as_of!r}, expected YYYY-MM-DD")
        return False

    try:
        records = load_records(args, as_of)

        builder = IncidentReportBuilder(random_state=args.seed)
        start_time = datetime.now()
        report = builder.run_complete_analysis(
            records,
            as_of=as_of,
            k=args.clusters,
            days=args.days,
            horizon_days=args.horizon,
            converged=args.converged
        )
        logger.info(f"Analysis completed in {datetime.now() - start_time}")

        summary = report.summary
        logger.info(f"Total incidents: {summary['total_incidents']}")
        logger.info(f"Top category: {summary['top_category']} ({summary['top_category_percentage']}%)")
        logger.info(f"Top district: {summary['top_district']}")
        logger.info(f"High-severity hotspots: {summary['high_severity_clusters']}")
        if summary["peak_hour"] is not None:
            logger.info(f"Peak hour: {summary['peak_hour']}:00")

        exporter = ReportExporter()
        exporter.export_report(report, args.output)
        if args.geojson:
            exporter.export_clusters_geojson(report.clusters, method=report.clustering_method)

        return True

    except IncidentAnalysisError as e:
        logger.error(f"Analysis failed: {e}")
        return False
    except OSError as e:
        logger.error(f"Could not read or write data: {e}")
        return False


def main():
    """Main function"""
    parser = argparse.ArgumentParser(
        description="Incident Hotspot Analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python launch.py                              # Analyse 500 synthetic incidents
  python launch.py --input incidents.csv        # Analyse a CSV export
  python launch.py --days 30 --as-of 2024-12-31 # Last 30 days only
  python launch.py --clusters 8 --converged     # Converged k-means with 8 clusters
        """
    )

    parser.add_argument("--input", type=str, help="CSV file with incident records")
    parser.add_argument("--sample", type=int, help="Number of synthetic incidents when no input is given")
    parser.add_argument("--clusters", type=int, default=CLUSTERING_CONFIG["default_k"],
                        help="Number of clusters (default: %(default)s)")
    parser.add_argument("--converged", action="store_true",
                        help="Use k-means iterated to convergence instead of single-pass clustering")
    parser.add_argument("--horizon", type=int, default=FORECAST_CONFIG["horizon_days"],
                        help="Forecast horizon in days (default: %(default)s)")
    parser.add_argument("--days", type=int, help="Only analyse the last N days (default: all time)")
    parser.add_argument("--as-of", type=str, help="Reference date YYYY-MM-DD (default: today)")
    parser.add_argument("--seed", type=int, help="Random seed for clustering, forecast noise and sampling")
    parser.add_argument("--output", type=str, help="Report filename inside the processed data directory")
    parser.add_argument("--geojson", action="store_true", help="Also export cluster centroids as GeoJSON")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="INFO",
                        help="Logging level")

    args = parser.parse_args()

    log_level = getattr(logging, args.log_level.upper())
    logger = setup_logging(log_level)

    success = run_analysis(args)
    if success:
        logger.info("Analysis pipeline completed successfully!")
    else:
        logger.error("Analysis pipeline failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
