"""TimeZoneEvaluator — непрерывная шкала действия observance часового пояса.

Evaluator'ы observance знают только моменты смены смещения (start).
Конец действия observance не известен в изоляции: он определяется
следующим по времени observance. Поэтому после каждого вычисления:
1. Occurrence сортируются по start (стабильная сортировка)
2. end каждого = start следующего минус time_unit
3. end последнего = evaluation_end_bounds

Горизонт вычисления: offset_to.offset(start_time) + lookahead (1 год по
умолчанию). Эвристика: часовые пояса, меняющие правила реже раза в год,
могут требовать большего lookahead (EvaluationConfig).
"""

from datetime import datetime
from typing import List, Optional, Set, Tuple

from loguru import logger

from src.core.domain.period import Occurrence, Period
from src.evaluation.evaluator import (
    EvaluationConfig,
    Evaluator,
    ObservanceContractViolation,
    ObservanceSource,
)


def _occurrence_sort_key(occurrence: Occurrence) -> Tuple[int, Optional[datetime]]:
    """Occurrence без period/start сортируются раньше остальных."""
    if occurrence.period is None:
        return (0, None)
    return (1, occurrence.period.start)


class TimeZoneEvaluator(Evaluator):
    """Evaluator периодов действия observance часового пояса."""

    def __init__(
        self,
        time_zone: ObservanceSource,
        config: Optional[EvaluationConfig] = None
    ):
        """
        Args:
            time_zone: часовой пояс (упорядоченный набор observance)
            config: конфигурация evaluation (lookahead, time_unit)
        """
        super().__init__(config)
        self.time_zone = time_zone

        # Occurrence с разрешёнными end, в порядке start
        self.occurrences: List[Occurrence] = []

        # Сырые occurrence, как их вернули evaluator'ы observance
        self._raw_occurrences: List[Occurrence] = []
        self._raw_index: Set[Occurrence] = set()

    def evaluate(
        self,
        start_time: datetime,
        from_time: datetime,
        to_time: datetime,
    ) -> List[Period]:
        """Вычисление периодов observance до горизонта start_time + lookahead.

        from_time/to_time не ограничивают вычисление: каждый observance
        вычисляется от собственного start до горизонта.

        Returns:
            Общий список periods (разрешённые, упорядоченные, без перекрытий)
        """
        start_time = self._require(start_time, "start_time")

        evaluated = False
        new_end = self.evaluation_end_bounds

        for observance in list(self.time_zone.observances):
            evaluator = observance.get_evaluator()
            if observance.start is None:
                raise ObservanceContractViolation(
                    f"Observance {observance!r} has no effective start"
                )
            if evaluator is None:
                raise ObservanceContractViolation(
                    f"Observance {observance!r} does not provide an evaluator"
                )

            self._extend_start_bounds(observance.start)

            normalized = observance.offset_to.offset(start_time)
            horizon = normalized + self.config.lookahead

            if self.evaluation_end_bounds is not None and not self.evaluation_end_bounds < horizon:
                continue

            periods = evaluator.evaluate(observance.start, observance.start, horizon)
            for period in periods:
                self._add_raw(Occurrence(source=observance, period=period))

            if new_end is None or new_end < horizon:
                new_end = horizon
            evaluated = True

        if evaluated:
            self.evaluation_end_bounds = new_end
            self._process_occurrences()
            logger.debug(
                f"Time zone evaluated: occurrences={len(self.occurrences)}, "
                f"bounds=[{self.evaluation_start_bounds}, {self.evaluation_end_bounds})"
            )

        return self.periods

    def clear(self) -> None:
        super().clear()
        self.occurrences.clear()
        self._raw_occurrences.clear()
        self._raw_index.clear()

    def occurrence_at(self, dt: datetime) -> Optional[Occurrence]:
        """Occurrence, чей разрешённый period содержит dt (без вычисления)."""
        for occurrence in self.occurrences:
            if occurrence.period is not None and occurrence.period.contains(dt):
                return occurrence
        return None

    def _add_raw(self, occurrence: Occurrence) -> None:
        """Добавление сырого occurrence, если равного ещё нет."""
        if occurrence in self._raw_index:
            return
        self._raw_index.add(occurrence)
        self._raw_occurrences.append(occurrence)

    def _process_occurrences(self) -> None:
        """Сортировка и заполнение промежутков.

        end вычисляется заново на каждом вызове: расширение горизонта
        меняет end последнего occurrence и добавляет новые.
        """
        self._raw_occurrences.sort(key=_occurrence_sort_key)

        resolved: List[Occurrence] = []
        timed = [o for o in self._raw_occurrences if o.period is not None]
        for i, current in enumerate(timed):
            if i + 1 < len(timed):
                end = timed[i + 1].period.start - self.config.time_unit
                # Совпадающие start: период вырождается в точку
                if end < current.period.start:
                    end = current.period.start
            else:
                end = self.evaluation_end_bounds
            resolved.append(current.with_period(current.period.resolve(end)))

        untimed = [o for o in self._raw_occurrences if o.period is None]
        self.occurrences[:] = untimed + resolved
        self.periods[:] = [o.period for o in resolved]
