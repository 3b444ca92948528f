"""
UTCOffset — Смещение локального времени относительно UTC

Значения TZOFFSETFROM / TZOFFSETTO у observance часового пояса.

Соглашение:
- offset(dt): UTC → локальное время (dt + смещение)
- to_utc(dt): локальное время → UTC (dt - смещение)
"""

from datetime import datetime, timedelta
from typing import Final

from pydantic import BaseModel, Field


# Смещение строго меньше суток по модулю
MAX_OFFSET_SECONDS: Final[int] = 24 * 60 * 60 - 1


class UTCOffset(BaseModel):
    """
    Смещение относительно UTC в секундах.

    Immutable модель (frozen=True).
    """

    seconds: int = Field(
        ...,
        ge=-MAX_OFFSET_SECONDS,
        le=MAX_OFFSET_SECONDS,
        description="Смещение в секундах (отрицательное — западнее Гринвича)",
    )

    model_config = {"frozen": True}

    @classmethod
    def of(cls, hours: int = 0, minutes: int = 0, seconds: int = 0) -> "UTCOffset":
        """
        Создание смещения из часов/минут/секунд.

        Знак задаётся компонентами: UTCOffset.of(-5) == UTCOffset(seconds=-18000),
        UTCOffset.of(-3, -30) — Ньюфаундленд.
        """
        return cls(seconds=hours * 3600 + minutes * 60 + seconds)

    @property
    def is_positive(self) -> bool:
        return self.seconds >= 0

    def as_timedelta(self) -> timedelta:
        return timedelta(seconds=self.seconds)

    def offset(self, dt: datetime) -> datetime:
        """UTC → локальное время."""
        return dt + self.as_timedelta()

    def to_utc(self, dt: datetime) -> datetime:
        """Локальное время → UTC."""
        return dt - self.as_timedelta()

    def __str__(self) -> str:
        sign = "+" if self.is_positive else "-"
        total = abs(self.seconds)
        hours, rest = divmod(total, 3600)
        minutes, secs = divmod(rest, 60)
        text = f"{sign}{hours:02d}{minutes:02d}"
        if secs:
            text += f"{secs:02d}"
        return text
