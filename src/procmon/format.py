"""Formatting helpers for procmon values."""


def elapsed_time(seconds: int) -> str:
    """Format a duration in seconds as ``HH:MM:SS``."""
    if seconds < 0:
        raise ValueError("time cannot be negative")
    hours, rest = divmod(int(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
