"""Number and date conventions for the locales the formatter supports."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

_EN_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True, slots=True)
class LocaleConventions:
    code: str
    thousands_sep: str = ","
    decimal_sep: str = "."
    months: tuple[str, ...] = _EN_MONTHS
    date_pattern: str = "{month} {day}, {year}"
    clock_24h: bool = False

    def format_number(self, value: float | int | Decimal, decimals: int) -> str:
        quantum = Decimal(1).scaleb(-decimals)
        rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
        sign = "-" if rounded < 0 else ""
        integral, _, fraction = f"{abs(rounded):f}".partition(".")
        groups: list[str] = []
        while len(integral) > 3:
            groups.insert(0, integral[-3:])
            integral = integral[:-3]
        groups.insert(0, integral)
        text = self.thousands_sep.join(groups)
        if decimals > 0:
            text = f"{text}{self.decimal_sep}{fraction.ljust(decimals, '0')}"
        return f"{sign}{text}"

    def format_date(self, moment: datetime, *, with_time: bool) -> str:
        text = self.date_pattern.format(
            day=moment.day,
            month=self.months[moment.month - 1],
            year=moment.year,
        )
        if with_time:
            text = f"{text} {self.format_time(moment)}"
        return text

    def format_time(self, moment: datetime) -> str:
        if self.clock_24h:
            return f"{moment.hour:02d}:{moment.minute:02d}"
        hour = moment.hour % 12 or 12
        suffix = "AM" if moment.hour < 12 else "PM"
        return f"{hour}:{moment.minute:02d} {suffix}"


LOCALES: dict[str, LocaleConventions] = {
    "en_US": LocaleConventions("en_US"),
    "en_GB": LocaleConventions("en_GB", date_pattern="{day} {month} {year}", clock_24h=True),
    "de_DE": LocaleConventions(
        "de_DE",
        thousands_sep=".",
        decimal_sep=",",
        months=("Jan.", "Feb.", "März", "Apr.", "Mai", "Juni", "Juli", "Aug.", "Sept.", "Okt.", "Nov.", "Dez."),
        date_pattern="{day}. {month} {year}",
        clock_24h=True,
    ),
    "fr_FR": LocaleConventions(
        "fr_FR",
        thousands_sep=" ",
        decimal_sep=",",
        months=("janv.", "févr.", "mars", "avr.", "mai", "juin", "juil.", "août", "sept.", "oct.", "nov.", "déc."),
        date_pattern="{day} {month} {year}",
        clock_24h=True,
    ),
    "es_ES": LocaleConventions(
        "es_ES",
        thousands_sep=".",
        decimal_sep=",",
        months=("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"),
        date_pattern="{day} {month} {year}",
        clock_24h=True,
    ),
    "ja_JP": LocaleConventions(
        "ja_JP",
        months=tuple(f"{index}月" for index in range(1, 13)),
        date_pattern="{year}年{month}{day}日",
        clock_24h=True,
    ),
}

_LANGUAGE_DEFAULTS = {code.split("_", 1)[0]: code for code in reversed(list(LOCALES))}


def get_conventions(locale: str | None) -> LocaleConventions:
    """Return conventions for ``locale`` (``en-GB``, ``de``...), defaulting to ``en_US``."""
    if not locale:
        return LOCALES["en_US"]
    normalized = locale.replace("-", "_").split(".", 1)[0]
    if normalized in LOCALES:
        return LOCALES[normalized]
    language = normalized.split("_", 1)[0].lower()
    return LOCALES[_LANGUAGE_DEFAULTS.get(language, "en_US")]


__all__ = ["LOCALES", "LocaleConventions", "get_conventions"]
