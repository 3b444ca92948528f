"""RecurrenceEvaluator — моменты начала действия одного observance.

Источники моментов (в терминах iCalendar):
- DTSTART (опорный момент evaluate)
- RDATE — явные даты
- RRULE — правила, разворачиваются через dateutil.rrule
- EXDATE — исключаемые даты

Каждый момент превращается в Period(start=момент) без end: конец действия
observance определяется только соседством с другими observance
(см. TimeZoneEvaluator).

Вычисление инкрементальное: пересчитываются только непокрытые части окна.
"""

import bisect
from datetime import datetime
from operator import attrgetter
from typing import Dict, List, Optional, Protocol, Sequence, Set, Tuple

from dateutil.rrule import rruleset, rrulestr
from loguru import logger

from src.core.domain.period import Period
from src.evaluation.evaluator import EvaluationConfig, Evaluator


_period_start = attrgetter("start")


class RecurrenceSource(Protocol):
    """Данные повторения observance."""

    rrules: Sequence[str]
    rdates: Sequence[datetime]
    exdates: Sequence[datetime]


class RecurrenceEvaluator(Evaluator):
    """Инкрементальный evaluator моментов начала observance."""

    def __init__(
        self,
        recurrence: RecurrenceSource,
        config: Optional[EvaluationConfig] = None
    ):
        """
        Args:
            recurrence: данные повторения (rrules/rdates/exdates)
            config: конфигурация evaluation
        """
        super().__init__(config)
        self.recurrence = recurrence

        self._starts: Set[datetime] = set()
        self._rule_sets: Dict[datetime, rruleset] = {}

    def evaluate(
        self,
        start_time: datetime,
        from_time: datetime,
        to_time: datetime,
    ) -> List[Period]:
        """Моменты начала observance в окне [from_time, to_time).

        Уже вычисленная часть окна не пересчитывается; новые моменты
        вставляются в periods с сохранением порядка по start.

        Returns:
            Новый список periods, чей start попадает в окно. Накопленные
            за пределами окна (в т.ч. от прежнего, более широкого запроса)
            не возвращаются.
        """
        anchor = self._require(start_time, "start_time")
        from_time = self._require(from_time, "from_time")
        to_time = self._require(to_time, "to_time")

        if not from_time < to_time:
            return []

        windows = self._uncovered_windows(from_time, to_time)
        if not windows:
            return self._periods_in(from_time, to_time)

        rule_set = self._rule_set(anchor)
        added = 0
        for lo, hi in windows:
            for instant in self._instants(rule_set, lo, hi):
                if instant in self._starts:
                    continue
                self._starts.add(instant)
                bisect.insort(self.periods, Period(start=instant))
                added += 1

        self._extend_start_bounds(from_time)
        self._extend_end_bounds(to_time)

        logger.debug(
            f"Recurrence evaluated: windows={len(windows)}, new_periods={added}, "
            f"bounds=[{self.evaluation_start_bounds}, {self.evaluation_end_bounds})"
        )
        return self._periods_in(from_time, to_time)

    def clear(self) -> None:
        super().clear()
        self._starts.clear()
        self._rule_sets.clear()

    def _uncovered_windows(
        self,
        from_time: datetime,
        to_time: datetime
    ) -> List[Tuple[datetime, datetime]]:
        """Части запроса вне вычисленных границ.

        Окна всегда примыкают к текущим границам, поэтому покрытая область
        остаётся непрерывной даже для запроса далеко за её пределами.
        """
        if self.evaluation_start_bounds is None or self.evaluation_end_bounds is None:
            return [(from_time, to_time)]

        windows = []
        if from_time < self.evaluation_start_bounds:
            windows.append((from_time, self.evaluation_start_bounds))
        if self.evaluation_end_bounds < to_time:
            windows.append((self.evaluation_end_bounds, to_time))
        return windows

    def _periods_in(self, from_time: datetime, to_time: datetime) -> List[Period]:
        """Срез отсортированных periods со start в [from_time, to_time)."""
        lo = bisect.bisect_left(self.periods, from_time, key=_period_start)
        hi = bisect.bisect_left(self.periods, to_time, key=_period_start)
        return self.periods[lo:hi]

    def _rule_set(self, anchor: datetime) -> rruleset:
        """rruleset для опорного момента (кэшируется)."""
        cached = self._rule_sets.get(anchor)
        if cached is not None:
            return cached

        rule_set = rruleset()
        if self.recurrence.rrules:
            # Несколько правил разбираются одним rrulestr
            parsed_rule = rrulestr("\n".join(self.recurrence.rrules), dtstart=anchor)
            if isinstance(parsed_rule, rruleset):
                rule_set = parsed_rule
            else:
                rule_set.rrule(parsed_rule)

        rule_set.rdate(anchor)
        for rdate in self.recurrence.rdates:
            rule_set.rdate(rdate)
        for exdate in self.recurrence.exdates:
            rule_set.exdate(exdate)

        self._rule_sets[anchor] = rule_set
        return rule_set

    @staticmethod
    def _instants(rule_set: rruleset, lo: datetime, hi: datetime) -> List[datetime]:
        """Моменты rule_set в полуоткрытом окне [lo, hi)."""
        return [dt for dt in rule_set.between(lo, hi, inc=True) if dt < hi]
