"""Conversion between business-local wall-clock time and UTC instants."""

from datetime import UTC, date, datetime, time, timedelta

import pytz


class TimezoneConfigurationError(RuntimeError):
    """Raised when the configured business timezone cannot be resolved."""


class BusinessClock:
    """Clock bound to one fixed business timezone.

    Every stored instant is UTC. Client-submitted wall-clock values are
    always interpreted in the business timezone, whatever offset they carry.
    """

    def __init__(self, timezone_name: str) -> None:
        try:
            self.tz = pytz.timezone(timezone_name)
        except pytz.UnknownTimeZoneError as e:
            raise TimezoneConfigurationError(
                f"Unknown business timezone '{timezone_name}'"
            ) from e
        self.timezone_name = timezone_name

    def __repr__(self) -> str:
        return f"BusinessClock({self.timezone_name!r})"

    def now(self) -> datetime:
        """Current UTC instant."""
        return datetime.now(UTC)

    def to_absolute(self, local_dt: datetime) -> datetime:
        """Interpret civil fields as business-local time and return the UTC instant.

        Any offset on the input is discarded first. For ambiguous or
        non-existent wall times pytz resolves to standard time.
        """
        naive = local_dt.replace(tzinfo=None)
        return self.tz.localize(naive).astimezone(UTC)

    def to_local(self, instant: datetime) -> datetime:
        """UTC instant as aware business-local time (offset kept)."""
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        return instant.astimezone(self.tz)

    def to_local_display(self, instant: datetime) -> datetime:
        """UTC instant as naive business-local wall-clock time."""
        return self.to_local(instant).replace(tzinfo=None)

    def at_local(self, day: date, hour: int) -> datetime:
        """Aware business-local datetime for ``day`` at ``hour``:00."""
        return self.tz.localize(datetime.combine(day, time(hour=hour)))

    def local_day_bounds(self, day: date) -> tuple[datetime, datetime]:
        """UTC range [local midnight, local midnight + 24h) for ``day``."""
        start = self.to_absolute(datetime.combine(day, time.min))
        return start, start + timedelta(hours=24)
