"""
Period / Occurrence — Интервалы времени и их источники

Period — value type: интервал [start, end), где end может быть не задан
до разрешения (evaluator'ы observance знают только моменты начала).

Occurrence — пара (source, period): какой observance произвёл данный интервал.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Period immutable (frozen=True): разрешение end создаёт НОВЫЙ экземпляр,
   общий список periods и Occurrence никогда не делят изменяемое состояние
2. Разрешённый end не может быть раньше start
3. Порядок Period определяется только start
4. Occurrence равны только при ИДЕНТИЧНОМ source и равном period
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Final, Optional

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Минимальный шаг datetime; используется для вычисления end по соседнему start
SMALLEST_TIME_UNIT: Final[timedelta] = timedelta(microseconds=1)


# =============================================================================
# PERIOD
# =============================================================================


class Period(BaseModel):
    """
    Интервал времени [start, end).

    Immutable модель (frozen=True). end=None означает "ещё не разрешён":
    конец вычисляется позже из соседства с другими интервалами.
    Изменение end выполняется только через resolve(), который возвращает
    новый экземпляр.
    """

    start: datetime = Field(..., description="Начало интервала")
    end: Optional[datetime] = Field(
        None, description="Конец интервала (None до разрешения)"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_end_not_before_start(self) -> "Period":
        """Разрешённый end не может предшествовать start."""
        if self.end is not None and self.end < self.start:
            raise ValueError(
                f"Period end {self.end.isoformat()} precedes start {self.start.isoformat()}"
            )
        return self

    @property
    def is_resolved(self) -> bool:
        """True если конец интервала известен."""
        return self.end is not None

    @property
    def duration(self) -> Optional[timedelta]:
        """Длительность интервала или None для неразрешённого."""
        if self.end is None:
            return None
        return self.end - self.start

    def resolve(self, end: datetime) -> "Period":
        """
        Новый Period с тем же start и заданным end.

        Args:
            end: Конец интервала

        Returns:
            Новый экземпляр Period (исходный не меняется)

        Raises:
            ValidationError: Если end < start
        """
        return Period(start=self.start, end=end)

    def contains(self, dt: datetime) -> bool:
        """
        Проверка попадания момента в интервал.

        end трактуется как последний покрытый момент: после заполнения
        промежутков end = start следующего интервала минус SMALLEST_TIME_UNIT,
        поэтому соседние интервалы не перекрываются и не оставляют дыр.
        Неразрешённый интервал открыт справа.
        """
        if dt < self.start:
            return False
        return self.end is None or dt <= self.end

    def __lt__(self, other: "Period") -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return self.start < other.start


# =============================================================================
# OCCURRENCE
# =============================================================================


@dataclass(frozen=True, eq=False)
class Occurrence:
    """
    Конкретная пара (observance, period), полученная при evaluation.

    Равенство: тот же самый объект source (по identity) и равный period.
    Два observance с одинаковыми данными остаются разными источниками.
    """

    source: Any
    period: Optional[Period]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Occurrence):
            return NotImplemented
        return self.source is other.source and self.period == other.period

    def __hash__(self) -> int:
        return hash((id(self.source), self.period))

    @property
    def start(self) -> Optional[datetime]:
        """Начало period или None если period не задан."""
        if self.period is None:
            return None
        return self.period.start

    def with_period(self, period: Period) -> "Occurrence":
        """Новый Occurrence того же source с заменённым period."""
        return Occurrence(source=self.source, period=period)
