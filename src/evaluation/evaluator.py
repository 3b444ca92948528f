"""Evaluator — базовый контракт инкрементального вычисления периодов.

Evaluator накапливает периоды по мере расширения окна запросов:
- evaluation_start_bounds двигается только раньше
- evaluation_end_bounds двигается только позже
- periods только растёт до clear()

Повторный запрос уже покрытого окна не пересчитывает историю.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from dateutil.relativedelta import relativedelta

from src.core.domain.period import SMALLEST_TIME_UNIT, Period
from src.core.domain.utc_offset import UTCOffset


# =============================================================================
# EXCEPTIONS
# =============================================================================


class EvaluationPreconditionError(AssertionError):
    """Не задано обязательное значение времени при вызове evaluate().

    Дефект вызывающего кода, не восстанавливаемая ошибка.
    """
    pass


class ObservanceContractViolation(AssertionError):
    """Observance часового пояса не удовлетворяет контракту.

    Каждый observance обязан иметь момент начала действия (DTSTART)
    и предоставлять evaluator. Нарушение означает дефект объектной модели.
    """
    pass


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class EvaluationConfig:
    """Конфигурация evaluation.

    - lookahead: на сколько вперёд от нормализованного start_time вычисляются
      observance (по умолчанию один календарный год; эвристика, часовые пояса
      со сменой правил реже раза в год могут требовать большего)
    - time_unit: шаг, на который end периода отстоит от start следующего
    """
    lookahead: relativedelta = field(default_factory=lambda: relativedelta(years=1))
    time_unit: timedelta = SMALLEST_TIME_UNIT


# =============================================================================
# PROTOCOLS
# =============================================================================


@runtime_checkable
class ObservanceEvaluator(Protocol):
    """Всё, что умеет вычислять упорядоченные периоды в окне."""

    def evaluate(
        self,
        start_time: datetime,
        from_time: datetime,
        to_time: datetime,
    ) -> List[Period]:
        ...


class Observance(Protocol):
    """Observance часового пояса, как его видит TimeZoneEvaluator."""

    start: Optional[datetime]
    offset_to: UTCOffset

    def get_evaluator(self) -> Optional[ObservanceEvaluator]:
        ...


class ObservanceSource(Protocol):
    """Часовой пояс: упорядоченный набор observance."""

    @property
    def observances(self) -> Sequence[Observance]:
        ...


# =============================================================================
# BASE EVALUATOR
# =============================================================================


class Evaluator(ABC):
    """Базовый evaluator с учётом границ вычисленного окна."""

    def __init__(self, config: Optional[EvaluationConfig] = None):
        self.config = config or EvaluationConfig()

        self.evaluation_start_bounds: Optional[datetime] = None
        self.evaluation_end_bounds: Optional[datetime] = None
        self.periods: List[Period] = []

    @abstractmethod
    def evaluate(
        self,
        start_time: datetime,
        from_time: datetime,
        to_time: datetime,
    ) -> List[Period]:
        """Вычисление периодов в окне [from_time, to_time).

        Args:
            start_time: опорный момент (DTSTART или момент запроса)
            from_time: начало окна
            to_time: конец окна (не включительно)

        Returns:
            Упорядоченные по start периоды; что именно возвращается,
            определяет подкласс (окно или общий список periods)
        """

    def clear(self) -> None:
        """Сброс границ и всех накопленных буферов."""
        self.evaluation_start_bounds = None
        self.evaluation_end_bounds = None
        self.periods.clear()

    def is_covered(self, from_time: datetime, to_time: datetime) -> bool:
        """True если окно целиком внутри уже вычисленных границ."""
        if self.evaluation_start_bounds is None or self.evaluation_end_bounds is None:
            return False
        return (
            self.evaluation_start_bounds <= from_time
            and to_time <= self.evaluation_end_bounds
        )

    def _extend_start_bounds(self, candidate: datetime) -> None:
        if self.evaluation_start_bounds is None or candidate < self.evaluation_start_bounds:
            self.evaluation_start_bounds = candidate

    def _extend_end_bounds(self, candidate: datetime) -> None:
        if self.evaluation_end_bounds is None or self.evaluation_end_bounds < candidate:
            self.evaluation_end_bounds = candidate

    @staticmethod
    def _require(value: Optional[datetime], name: str) -> datetime:
        if value is None:
            raise EvaluationPreconditionError(f"{name} must not be None")
        return value
