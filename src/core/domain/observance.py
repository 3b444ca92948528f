"""
TimeZoneObservance — Observance часового пояса (STANDARD / DAYLIGHT)

Под-правило часового пояса с собственным моментом начала действия,
смещениями и правилами повторения. Предоставляет evaluator моментов
начала действия (RecurrenceEvaluator).

Время start/rdates/exdates задаётся в локальном времени observance,
как в VTIMEZONE.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from .utc_offset import UTCOffset

if TYPE_CHECKING:
    from src.evaluation.evaluator import EvaluationConfig
    from src.evaluation.recurrence_evaluator import RecurrenceEvaluator


# =============================================================================
# ENUMS
# =============================================================================


class ObservanceKind(str, Enum):
    """Тип observance"""

    STANDARD = "STANDARD"
    DAYLIGHT = "DAYLIGHT"


# =============================================================================
# OBSERVANCE
# =============================================================================


@dataclass(eq=False)
class TimeZoneObservance:
    """
    Observance часового пояса.

    Сравнение по identity: два observance с одинаковыми данными —
    разные источники occurrence.

    Поля:
    - kind: STANDARD / DAYLIGHT
    - start: момент начала действия (DTSTART), обязателен для evaluation
    - offset_from / offset_to: смещение до / после перехода
    - name: TZNAME (например, "CET")
    - rrules: правила повторения в формате RRULE ("FREQ=YEARLY;BYMONTH=3;...")
    - rdates / exdates: явные и исключённые моменты
    """

    kind: ObservanceKind
    start: Optional[datetime]
    offset_from: UTCOffset
    offset_to: UTCOffset
    name: Optional[str] = None
    rrules: List[str] = field(default_factory=list)
    rdates: List[datetime] = field(default_factory=list)
    exdates: List[datetime] = field(default_factory=list)
    config: Optional["EvaluationConfig"] = None

    _evaluator: Optional["RecurrenceEvaluator"] = field(
        default=None, init=False, repr=False
    )

    def get_evaluator(self) -> Optional["RecurrenceEvaluator"]:
        """
        Evaluator моментов начала действия.

        Returns:
            Один и тот же RecurrenceEvaluator на всё время жизни observance;
            None если у observance нет start
        """
        if self.start is None:
            return None
        if self._evaluator is None:
            from src.evaluation.recurrence_evaluator import RecurrenceEvaluator

            self._evaluator = RecurrenceEvaluator(self, self.config)
        return self._evaluator

    def __repr__(self) -> str:
        label = self.name or self.kind.value
        return f"TimeZoneObservance({label}, start={self.start}, offset_to={self.offset_to})"
