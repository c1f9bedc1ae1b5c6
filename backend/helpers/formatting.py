"""
Formatting helpers - human-readable durations and rate limit summaries.
"""

from datetime import datetime, timezone


def format_duration(seconds):
    """Format a number of seconds as e.g. '1 hour 5 minutes' or '42 seconds'."""
    seconds = max(0, int(seconds))
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)

    def unit(n, name):
        return f"{n} {name}" if n == 1 else f"{n} {name}s"

    if hours:
        return unit(hours, "hour") + (f" {unit(minutes, 'minute')}" if minutes else "")
    if minutes:
        return unit(minutes, "minute") + (f" {unit(secs, 'second')}" if secs else "")
    return unit(secs, "second")


def rate_limit_info(snapshot, now=None):
    """Summarize a RateLimitSnapshot for the _rate_limit_info response field."""
    now = now or datetime.now(timezone.utc)
    wait = (snapshot.reset_at - now).total_seconds()
    reset = snapshot.reset_at.strftime("%Y-%m-%d %H:%M:%S UTC")
    if wait > 0:
        return (f"{snapshot.remaining}/{snapshot.limit} API requests remaining. "
                f"Resets in {format_duration(wait)} (at {reset}).")
    return f"{snapshot.remaining}/{snapshot.limit} API requests remaining. Reset at {reset}."
