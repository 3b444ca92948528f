"""Evaluation — инкрементальное вычисление периодов действия observance.

- Evaluator: базовый контракт (границы окна, накопленные periods)
- RecurrenceEvaluator: моменты начала одного observance (DTSTART/RDATE/RRULE/EXDATE)
- TimeZoneEvaluator: непрерывная шкала observance часового пояса
"""

from .evaluator import (
    EvaluationConfig,
    EvaluationPreconditionError,
    Evaluator,
    Observance,
    ObservanceContractViolation,
    ObservanceEvaluator,
    ObservanceSource,
)
from .recurrence_evaluator import RecurrenceEvaluator, RecurrenceSource
from .timezone_evaluator import TimeZoneEvaluator

__all__ = [
    # Config
    "EvaluationConfig",
    # Exceptions
    "EvaluationPreconditionError",
    "ObservanceContractViolation",
    # Protocols
    "Observance",
    "ObservanceEvaluator",
    "ObservanceSource",
    "RecurrenceSource",
    # Evaluators
    "Evaluator",
    "RecurrenceEvaluator",
    "TimeZoneEvaluator",
]
