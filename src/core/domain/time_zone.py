"""
TimeZone — Часовой пояс как упорядоченный набор observance

Вычисление периодов делегируется TimeZoneEvaluator (один на часовой пояс,
кэш растёт вместе с горизонтом запросов).
"""

from datetime import datetime
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from .observance import TimeZoneObservance
from .period import Occurrence, Period
from .utc_offset import UTCOffset

if TYPE_CHECKING:
    from src.core.containers.composite_list import CompositeList
    from src.evaluation.evaluator import EvaluationConfig
    from src.evaluation.timezone_evaluator import TimeZoneEvaluator


class TimeZone:
    """
    Часовой пояс (VTIMEZONE).

    observances хранятся в порядке объявления; этот порядок используется
    при evaluation и как порядок разрешения совпадающих start.
    """

    def __init__(
        self,
        tzid: str,
        observances: Optional[Iterable[TimeZoneObservance]] = None,
        config: Optional["EvaluationConfig"] = None
    ):
        """
        Args:
            tzid: идентификатор часового пояса (например, "Europe/Berlin")
            observances: observance в порядке объявления
            config: конфигурация evaluation
        """
        if not tzid:
            raise ValueError("tzid is required")

        self.tzid = tzid
        self.config = config
        self._observances: List[TimeZoneObservance] = list(observances or [])
        self._evaluator: Optional["TimeZoneEvaluator"] = None

    @property
    def observances(self) -> Tuple[TimeZoneObservance, ...]:
        """Снимок observance; изменение состава только через add_observance()."""
        return tuple(self._observances)

    def add_observance(self, observance: TimeZoneObservance) -> None:
        """
        Добавление observance.

        Накопленные периоды сбрасываются: новое правило может изменить
        концы уже разрешённых периодов.
        """
        self._observances.append(observance)
        if self._evaluator is not None:
            self._evaluator.clear()

    def get_evaluator(self) -> "TimeZoneEvaluator":
        """TimeZoneEvaluator этого часового пояса (создаётся один раз)."""
        if self._evaluator is None:
            from src.evaluation.timezone_evaluator import TimeZoneEvaluator

            self._evaluator = TimeZoneEvaluator(self, self.config)
        return self._evaluator

    def observance_at(self, dt: datetime) -> Optional[Occurrence]:
        """
        Observance, действующий в момент dt.

        Вычисление расширяется до горизонта dt + lookahead, если нужно.

        Returns:
            Occurrence с разрешённым period, содержащим dt; None если dt
            раньше начала действия всех observance
        """
        evaluator = self.get_evaluator()
        evaluator.evaluate(dt, dt, dt)
        return evaluator.occurrence_at(dt)

    def utc_offset_at(self, dt: datetime) -> Optional[UTCOffset]:
        """Смещение относительно UTC, действующее в момент dt."""
        occurrence = self.observance_at(dt)
        if occurrence is None:
            return None
        return occurrence.source.offset_to

    def observance_periods(self) -> "CompositeList[Period]":
        """
        Сырые периоды всех observance одним списком.

        Составной список ссылается на собственные списки periods evaluator'ов
        observance (без копирования): порядок — порядок объявления observance,
        внутри — порядок start.
        """
        from src.core.containers.composite_list import CompositeList

        composite: "CompositeList[Period]" = CompositeList()
        for observance in self._observances:
            evaluator = observance.get_evaluator()
            if evaluator is not None:
                composite.add_list(evaluator.periods)
        return composite

    def __repr__(self) -> str:
        return f"TimeZone({self.tzid!r}, observances={len(self._observances)})"
