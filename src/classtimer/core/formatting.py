"""Display helpers: clock strings, readable phrases and progress."""


def format_time(seconds: int) -> str:
    """Format *seconds* as ``MM:SS``.

    Minutes are never carried into hours, so 3661 renders as ``61:01``.
    """
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def get_readable_time_remaining(seconds: int) -> str:
    """Describe *seconds* in words, e.g. ``"2 minutes 30 seconds"``."""
    minutes, secs = divmod(seconds, 60)
    if minutes == 0:
        return _plural(secs, "second")
    if secs == 0:
        return _plural(minutes, "minute")
    return f"{_plural(minutes, 'minute')} {_plural(secs, 'second')}"


def get_progress(remaining_seconds: float, total_seconds: float) -> float:
    """Return the elapsed share of *total_seconds* as a percentage.

    A zero total reports 0.  Out-of-range *remaining_seconds* is not clamped.
    """
    if total_seconds == 0:
        return 0.0
    return ((total_seconds - remaining_seconds) / total_seconds) * 100
