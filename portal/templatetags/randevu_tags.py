from django import template
from django.utils import timezone

from ..schedule import hhmm as _hhmm, parse_date, parse_instant

register = template.Library()

MONTHS = ["Ocak", "Şubat", "Mart", "Nisan", "Mayıs", "Haziran",
          "Temmuz", "Ağustos", "Eylül", "Ekim", "Kasım", "Aralık"]


@register.filter
def hhmm(value):
    return _hhmm(value)


@register.filter
def tr_date(value):
    """'2025-10-15' → '15 Ekim 2025'."""
    day = parse_date(value)
    if day is None:
        return value or ""
    return f"{day.day} {MONTHS[day.month - 1]} {day.year}"


@register.filter
def tr_datetime(value):
    """ISO zaman damgası → yerel '15 Ekim 2025 14:30'."""
    instant = parse_instant(value)
    if instant is None:
        return value or ""
    if timezone.is_aware(instant):
        instant = timezone.localtime(instant)
    return f"{tr_date(instant.date())} {instant:%H:%M}"
