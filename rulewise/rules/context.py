"""
Per-call evaluation context.

EvalContext wraps one call's fact mapping and owns all per-call state:
- memoized lazy values (forced at most once, then cached)
- the time zone scope stack

A RuleSet builds a fresh EvalContext for every call, so nothing is shared
between concurrent evaluations of the same RuleSet.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .timezones import TimeZoneDatabase, TimeZoneResolver, UTC_ZONE, ZoneInfoDatabase
from .types import ABSENT, Lazy, is_lazy

logger = logging.getLogger(__name__)


class EvalContext:
    """
    Context resolver for one evaluation call.

    Attributes:
        zones: TimeZoneResolver carrying this call's tz scope stack

    Example:
        ctx = EvalContext({"amount": 314, "rate": Lazy(fetch_rate)})
        ctx.resolve("rate")     # invokes fetch_rate()
        ctx.resolve("rate")     # cached, fetch_rate not called again
        ctx.resolve("missing")  # ABSENT
    """

    def __init__(
        self,
        facts: Mapping[str, Any] | None = None,
        tz_database: TimeZoneDatabase | None = None,
        default_zone: str = UTC_ZONE,
        inherit_tz_scope: bool = False,
    ):
        # Private copy: memoization never writes through to the caller's mapping
        self._facts: dict[str, Any] = dict(facts or {})
        self._memo: dict[str, Any] = {}
        self._forced: list[str] = []
        self.zones = TimeZoneResolver(
            tz_database if tz_database is not None else ZoneInfoDatabase(),
            default_zone=default_zone,
            inherit_scope=inherit_tz_scope,
        )

    def resolve(self, key: str) -> Any:
        """
        Resolve a key to its value, forcing lazy values once.

        Args:
            key: Context label

        Returns:
            The stored value, the forced result of a lazy value, or ABSENT
            when the key is not mapped.

        Exceptions raised by a lazy thunk propagate unchanged and leave the
        entry unforced.
        """
        if key not in self._facts:
            return ABSENT
        if key in self._memo:
            return self._memo[key]
        value = self._facts[key]
        if is_lazy(value):
            result = value.force() if isinstance(value, Lazy) else value()
            self._memo[key] = result
            self._forced.append(key)
            logger.debug("forced lazy value %s -> %r", key, result)
            return result
        return value

    def __contains__(self, key: str) -> bool:
        return key in self._facts

    @property
    def forced_keys(self) -> tuple[str, ...]:
        """Keys whose lazy values were forced during this call, in order."""
        return tuple(self._forced)

    def __repr__(self) -> str:
        return f"EvalContext(keys={sorted(self._facts)}, forced={self._forced})"


__all__ = ["EvalContext"]
