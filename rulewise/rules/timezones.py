"""
Time zone resolution for temporal conditions.

Provides:
- TimeZoneDatabase: provider protocol (offset lookup + zone validity)
- ZoneInfoDatabase: default provider backed by zoneinfo / tzdata
- FixedOffsetDatabase: deterministic provider for tests and fixed setups
- parse_timestamp: parser for the timestamp literal grammar
- TimeZoneResolver: per-call zone scope stack + instant/wall-clock projection

Timestamp literal grammar:
    YYYY-MM-DDTHH:MM:SS[z<zone-id>]

    "2015-01-01T00:00:00"                 zone from enclosing tz scope (or UTC)
    "2015-01-01T00:00:00zUTC"             zone given in the literal
    "2015-01-01T00:00:00z America/Denver" whitespace after 'z' allowed

Precedence: in-literal zone > visible tz scope > default zone.

Instants are represented as aware datetimes in UTC. Equality and ordering
compare instants; weekday extraction uses zone-local wall clock.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Iterator, Mapping, Protocol, runtime_checkable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InvalidTimestamp


UTC_ZONE = "UTC"

TIMESTAMP_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:z\s*(?P<zone>\S.*?))?\s*$"
)


# =============================================================================
# Time Zone Database providers
# =============================================================================

@runtime_checkable
class TimeZoneDatabase(Protocol):
    """Offset/validity lookup by zone identifier. Pure and read-only."""

    def offset(self, zone_id: str, instant: datetime) -> timedelta: ...

    def is_valid(self, zone_id: str) -> bool: ...


@lru_cache(maxsize=256)
def _load_zone(zone_id: str) -> ZoneInfo:
    return ZoneInfo(zone_id)


class ZoneInfoDatabase:
    """
    Default provider using the IANA database via zoneinfo.

    The tzdata distribution supplies the database on platforms without a
    system copy.
    """

    def offset(self, zone_id: str, instant: datetime) -> timedelta:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        offset = instant.astimezone(_load_zone(zone_id)).utcoffset()
        return offset if offset is not None else timedelta(0)

    def is_valid(self, zone_id: str) -> bool:
        if not zone_id:
            return False
        try:
            _load_zone(zone_id)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            return False
        return True

    def __repr__(self) -> str:
        return "ZoneInfoDatabase()"


class FixedOffsetDatabase:
    """
    Provider with one constant offset per zone (no DST).

    Examples:
        db = FixedOffsetDatabase({"America/New_York": -5, "Asia/Tokyo": 9})
        db.offset("America/New_York", now)  # timedelta(hours=-5)
    """

    def __init__(self, offsets: Mapping[str, timedelta | int | float] | None = None):
        self._offsets: dict[str, timedelta] = {UTC_ZONE: timedelta(0)}
        for zone_id, value in (offsets or {}).items():
            if not isinstance(value, timedelta):
                value = timedelta(hours=value)
            self._offsets[zone_id] = value

    def offset(self, zone_id: str, instant: datetime) -> timedelta:
        return self._offsets[zone_id]

    def is_valid(self, zone_id: str) -> bool:
        return zone_id in self._offsets

    def __repr__(self) -> str:
        return f"FixedOffsetDatabase({sorted(self._offsets)})"


# =============================================================================
# Timestamp parsing
# =============================================================================

def parse_timestamp(text: str) -> tuple[datetime, str | None]:
    """
    Parse a timestamp literal into wall-clock fields and its own zone.

    Args:
        text: Literal like "2015-01-01T00:00:00" or "2015-01-01T00:00:00zUTC"

    Returns:
        Tuple of (naive wall-clock datetime, in-literal zone id or None)

    Raises:
        InvalidTimestamp: If the literal does not match the grammar or a
            date-time field is out of range.
    """
    match = TIMESTAMP_PATTERN.match(text.strip())
    if match is None:
        raise InvalidTimestamp(
            f"'{text}' does not match YYYY-MM-DDTHH:MM:SS[z<zone-id>]"
        )
    fields = {name: int(match.group(name)) for name in
              ("year", "month", "day", "hour", "minute", "second")}
    try:
        wall = datetime(**fields)
    except ValueError as e:
        raise InvalidTimestamp(f"'{text}': {e}") from e
    return wall, match.group("zone")


# =============================================================================
# Resolver
# =============================================================================

class TimeZoneResolver:
    """
    Per-call zone scope stack and temporal normalization.

    A tz node pushes its zone; all/any/cond and leaf children push a barrier
    (None) that hides enclosing zones unless inherit_scope is set. The
    effective zone is the top of the stack when it is a zone, else the
    default zone.

    Not shared between calls: each evaluation owns one resolver.
    """

    def __init__(
        self,
        database: TimeZoneDatabase,
        default_zone: str = UTC_ZONE,
        inherit_scope: bool = False,
    ):
        self._db = database
        self._default_zone = default_zone
        self._inherit = inherit_scope
        self._stack: list[str | None] = []

    @property
    def database(self) -> TimeZoneDatabase:
        return self._db

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def effective_zone(self) -> str:
        """Zone used for literals and naive datetimes without their own zone."""
        if self._inherit:
            for entry in reversed(self._stack):
                if entry is not None:
                    return entry
            return self._default_zone
        if self._stack and self._stack[-1] is not None:
            return self._stack[-1]
        return self._default_zone

    @contextmanager
    def scope(self, zone_id: str) -> Iterator[str]:
        """Push a tz scope for the duration of the block."""
        self.validate_zone(zone_id, kind="tz")
        self._stack.append(zone_id)
        try:
            yield zone_id
        finally:
            self._stack.pop()

    @contextmanager
    def barrier(self) -> Iterator[None]:
        """Hide enclosing tz scopes for the duration of the block."""
        self._stack.append(None)
        try:
            yield
        finally:
            self._stack.pop()

    def validate_zone(self, zone_id: str, kind: str | None = None) -> None:
        if not self._db.is_valid(zone_id):
            raise InvalidTimestamp(f"unknown time zone '{zone_id}'", kind=kind)

    def local_to_instant(self, wall: datetime, zone_id: str) -> datetime:
        """
        Convert zone-local wall clock to a UTC instant.

        Uses the offset at the naive guess, then re-checks at the candidate
        instant so wall clocks near a DST transition land on the right side.
        """
        guess = wall.replace(tzinfo=timezone.utc)
        first = self._db.offset(zone_id, guess)
        instant = guess - first
        second = self._db.offset(zone_id, instant)
        if second != first:
            instant = guess - second
        return instant

    def instant_to_local(self, instant: datetime, zone_id: str) -> datetime:
        """Convert a UTC instant to naive zone-local wall clock."""
        offset = self._db.offset(zone_id, instant)
        return (instant + offset).replace(tzinfo=None)

    def _split(self, value: str | datetime) -> tuple[datetime, str | None, bool]:
        # (datetime, zone, is_aware_instant)
        if isinstance(value, datetime):
            if value.tzinfo is not None and value.utcoffset() is not None:
                return value.astimezone(timezone.utc), None, True
            return value, None, False
        wall, zone_id = parse_timestamp(value)
        if zone_id is not None:
            self.validate_zone(zone_id)
        return wall, zone_id, False

    def to_instant(self, value: str | datetime) -> datetime:
        """
        Normalize a temporal value to an absolute UTC instant.

        Args:
            value: Timestamp literal or datetime (aware = instant,
                naive = wall clock in the effective zone)

        Raises:
            InvalidTimestamp: On malformed literals or unknown zones.
        """
        moment, zone_id, is_instant = self._split(value)
        if is_instant:
            return moment
        zone_id = zone_id or self.effective_zone
        self.validate_zone(zone_id)
        return self.local_to_instant(moment, zone_id)

    def to_local(self, value: str | datetime) -> datetime:
        """
        Project a temporal value onto zone-local wall clock.

        Literals with their own zone project into that zone; everything else
        projects into the effective zone.
        """
        moment, zone_id, is_instant = self._split(value)
        zone_id = zone_id or self.effective_zone
        self.validate_zone(zone_id)
        if not is_instant:
            moment = self.local_to_instant(moment, zone_id)
        return self.instant_to_local(moment, zone_id)


def weekday_index(local: datetime) -> int:
    """Weekday with Sunday=0 .. Saturday=6."""
    return local.isoweekday() % 7


__all__ = [
    "UTC_ZONE",
    "TIMESTAMP_PATTERN",
    "TimeZoneDatabase",
    "ZoneInfoDatabase",
    "FixedOffsetDatabase",
    "parse_timestamp",
    "TimeZoneResolver",
    "weekday_index",
]
