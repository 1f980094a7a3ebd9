"""
Weekly Resampling

Collapses candles of any granularity into one candle per calendar week.
"""

from datetime import datetime, timezone

from cryptochart.schemas.market import Candle, sort_candles


def week_key(timestamp: int) -> tuple[int, int]:
    """
    Week bucket of a unix timestamp (UTC).

    The week number is the ISO (Thursday-anchored) week; the year is the
    calendar year of the date itself, so a week that straddles New Year is
    split at the year boundary.
    """
    day = datetime.fromtimestamp(timestamp, tz=timezone.utc).date()
    return day.year, day.isocalendar()[1]


def _collapse(bucket: list[Candle]) -> Candle:
    if len(bucket) == 1:
        return bucket[0]
    first, last = bucket[0], bucket[-1]
    return Candle(
        time=first.time,
        open=first.open,
        high=max(c.high for c in bucket),
        low=min(c.low for c in bucket),
        close=last.close,
    )


def resample_weekly(series: list[Candle]) -> list[Candle]:
    """
    Resample to weekly candles.

    Candles are grouped into contiguous runs sharing the week of the run's
    first candle. Each run becomes one candle: first time/open, max high,
    min low, last close.
    """
    weekly: list[Candle] = []
    bucket: list[Candle] = []
    anchor = None

    for candle in sort_candles(series):
        key = week_key(candle.time)
        if bucket and key != anchor:
            weekly.append(_collapse(bucket))
            bucket = []
        if not bucket:
            anchor = key
        bucket.append(candle)

    # Flush the last week
    if bucket:
        weekly.append(_collapse(bucket))

    return weekly
