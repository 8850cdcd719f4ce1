from datetime import date, datetime, timedelta, timezone

# Múi giờ Việt Nam (UTC+7)
VIETNAM_TIMEZONE = timezone(timedelta(hours=7))


def now() -> datetime:
    """Lấy datetime hiện tại theo UTC+7 và bỏ tzinfo (naive).
    Đây là hàm chuẩn cho toàn bộ dự án.
    """
    return datetime.now(VIETNAM_TIMEZONE).replace(tzinfo=None)


def now_tzinfo() -> datetime:
    return datetime.now(VIETNAM_TIMEZONE)


def today() -> date:
    """Ngày lịch hiện tại theo UTC+7, dùng cho streak và nhật ký hoạt động."""
    return now().date()


def epoch_millis() -> int:
    return int(now_tzinfo().timestamp() * 1000)


def to_vietnam_naive(dt: datetime | None) -> datetime | None:
    """Chuyển datetime sang UTC+7 và bỏ tzinfo; naive được giữ nguyên."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        return dt.astimezone(VIETNAM_TIMEZONE).replace(tzinfo=None)
    return dt


def year_bounds(year: int) -> tuple[datetime, datetime]:
    return datetime(year, 1, 1), datetime(year + 1, 1, 1)
