"""Body composition screening against height/weight and circumference tables."""

from .evaluator import BodyCompositionEvaluator, BodyCompResult, BodyCompStatus
from .tables import BodyCompositionTables, load_default_tables, load_tables

__all__ = [
    "BodyCompositionEvaluator",
    "BodyCompResult",
    "BodyCompStatus",
    "BodyCompositionTables",
    "load_default_tables",
    "load_tables",
]
