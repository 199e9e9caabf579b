"""Classifier-quality report stub.

No model is fitted here. The report draws each score uniformly from a fixed
band (see ``CLASSIFIER_CONFIG``) and derives F1 from precision and recall, so
the four numbers are mutually consistent without pretending to have been
measured.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Optional, Sequence

import numpy as np

from config import CLASSIFIER_CONFIG
from src.data.exceptions import EmptyInputError
from src.data.records import IncidentRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifierReport:
    accuracy: float
    precision: float
    recall: float
    f1_score: float

    def to_dict(self):
        return asdict(self)


def harmonic_mean(precision: float, recall: float) -> float:
    if precision + recall == 0:
        return 0.0
    return 2 * precision * recall / (precision + recall)


class IncidentClassifierStub:
    def __init__(self, random_state: Optional[int] = None):
        self.rng = np.random.default_rng(random_state)

    def _draw(self, metric: str) -> float:
        low, spread = CLASSIFIER_CONFIG[metric]
        return low + self.rng.random() * spread

    def generate_report(self, records: Sequence[IncidentRecord]) -> ClassifierReport:
        if not records:
            raise EmptyInputError("Cannot report classifier quality without records")

        decimals = CLASSIFIER_CONFIG["decimals"]
        accuracy = self._draw("accuracy")
        precision = self._draw("precision")
        recall = self._draw("recall")
        f1 = harmonic_mean(precision, recall)

        report = ClassifierReport(
            accuracy=round(accuracy, decimals),
            precision=round(precision, decimals),
            recall=round(recall, decimals),
            f1_score=round(f1, decimals)
        )
        logger.info(f"Classifier report stub for {len(records)} records: {report}")
        return report
