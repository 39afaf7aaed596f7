"""
Randevu listeleri için tarih/saat yardımcıları.

API tarihleri `YYYY-MM-DD`, saatleri `HH:MM[:SS]` olarak döner; burada hepsi
yerel saatte naive datetime olarak karşılaştırılır.
"""
from datetime import date as ddate, datetime, time as dtime, timedelta

from django.utils.dateparse import parse_datetime

PERIODS = ("today", "week", "month")

# Pazartesi ile başlayan sıra; değerler API'nin gün numaraları (Pazar=0)
DAY_ORDER = [1, 2, 3, 4, 5, 6, 0]
DAY_LABELS = {1: "Pzt", 2: "Sal", 3: "Çar", 4: "Per", 5: "Cum", 6: "Cts", 0: "Paz"}

DEFAULT_START = "09:00"
DEFAULT_END = "17:00"


def default_hours():
    return [
        {"dayOfWeek": d, "startTime": DEFAULT_START, "endTime": DEFAULT_END}
        for d in DAY_ORDER
    ]


def parse_date(value) -> ddate | None:
    if isinstance(value, ddate):
        return value
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


def parse_clock(value) -> dtime | None:
    """'14:30' veya '14:30:00' → time; geçersizse None."""
    if isinstance(value, dtime):
        return value
    if not value:
        return None
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(str(value).split(".")[0], fmt).time()
        except ValueError:
            continue
    return None


def hhmm(value) -> str:
    t = parse_clock(value)
    return t.strftime("%H:%M") if t else (value or "")


def _combine(item, key) -> datetime:
    day = parse_date(item.get("date"))
    if day is None:
        return datetime.min
    return datetime.combine(day, parse_clock(item.get(key)) or dtime(0, 0))


def appointment_start(item) -> datetime:
    return _combine(item, "startTime")


def appointment_end(item) -> datetime:
    return _combine(item, "endTime")


def partition_appointments(items, now: datetime):
    """(yaklaşan, geçmiş); `now` anında başlayan randevu yaklaşandır."""
    ordered = sorted(items, key=appointment_start)
    upcoming = [a for a in ordered if appointment_start(a) >= now]
    past = [a for a in ordered if appointment_start(a) < now]
    return upcoming, past


def waiting_range(period: str, reference: datetime):
    """[başlangıç, bitiş) aralığı: bugün, bu hafta (Pzt-Pzt) veya bu ay."""
    today = datetime.combine(reference.date(), dtime(0, 0))
    if period == "today":
        return today, today + timedelta(days=1)
    if period == "week":
        monday = today - timedelta(days=today.weekday())
        return monday, monday + timedelta(days=7)
    if period == "month":
        first = today.replace(day=1)
        if first.month == 12:
            return first, first.replace(year=first.year + 1, month=1)
        return first, first.replace(month=first.month + 1)
    raise ValueError(f"unknown period: {period}")


def parse_instant(value) -> datetime | None:
    """API zaman damgası ('...T07:05:00.1234567+00:00' dahil) → datetime; geçersizse None."""
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return parse_datetime(str(value))
    except ValueError:
        return None


def checked_in_order(item):
    instant = parse_instant(item.get("checkedInAt"))
    return instant.timestamp() if instant else float("inf")


def match_name(item, query: str, *fields) -> bool:
    q = (query or "").strip().lower()
    if not q:
        return True
    fields = fields or ("fullName",)
    return any(q in str(item.get(f) or "").lower() for f in fields)


def _in_window(item, start, end, now) -> bool:
    day = parse_date(item.get("date"))
    if day is None:
        return False
    return start <= datetime.combine(day, dtime(0, 0)) < end and appointment_start(item) >= now


def filter_waiting(items, period: str, now: datetime, query: str = ""):
    start, end = waiting_range(period, now)
    result = [a for a in items if _in_window(a, start, end, now)]
    result.sort(key=checked_in_order)
    return [a for a in result if match_name(a, query)]


def count_waiting(items, now: datetime) -> dict:
    counts = {}
    for period in PERIODS:
        start, end = waiting_range(period, now)
        counts[period] = sum(1 for a in items if _in_window(a, start, end, now))
    return counts


def validate_time_ranges(entries) -> list:
    """Başlangıcı bitişinden önce olmayan her kayıt için bir hata mesajı."""
    errors = []
    for entry in entries:
        start = parse_clock(entry.get("startTime"))
        end = parse_clock(entry.get("endTime"))
        label = DAY_LABELS.get(entry.get("dayOfWeek"), entry.get("dayOfWeek"))
        if start is None or end is None:
            errors.append(f"{label}: geçersiz saat.")
        elif start >= end:
            errors.append(f"{label}: başlangıç saati bitiş saatinden önce olmalıdır.")
    return errors


def hourly_distribution(items):
    rows = {}
    for a in items:
        start = parse_clock(a.get("startTime"))
        if start is None:
            continue
        row = rows.setdefault(start.hour, {"hour": start.hour, "count": 0, "checkedIn": 0})
        row["count"] += 1
        if a.get("checkedInAt"):
            row["checkedIn"] += 1
    return [rows[h] for h in sorted(rows)]
