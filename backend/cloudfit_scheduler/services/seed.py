"""Demo dataset used when ``SEED_DEMO_DATA`` is enabled."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from ..domain.models import Role, TimeSlot
from .registry import SchedulingRegistry

logger = logging.getLogger(__name__)


def seed_demo_data(registry: SchedulingRegistry, now: datetime | None = None) -> None:
    """Populate ``registry`` with sample users, availability and interviews.

    Availability is laid out relative to ``now`` (tomorrow and the day after),
    so the two sample interviews always fit.
    """
    now = now or datetime.now().replace(second=0, microsecond=0)
    tomorrow = now + timedelta(days=1)
    day_after = now + timedelta(days=2)

    def hours(base: datetime, start: int, end: int) -> TimeSlot:
        return TimeSlot(base + timedelta(hours=start), base + timedelta(hours=end))

    alice = registry.add_person("Alice Johnson", "alice@cloudfit.com", Role.HR_MANAGER)
    registry.add_person("Bob Smith", "bob@cloudfit.com", Role.HR_MANAGER)
    carol = registry.add_person("Carol Davis", "carol@cloudfit.com", Role.INTERVIEWER)
    david = registry.add_person("David Wilson", "david@cloudfit.com", Role.INTERVIEWER)
    registry.add_person("Eve Brown", "eve@cloudfit.com", Role.INTERVIEWER)

    registry.add_availability(alice, hours(tomorrow, 0, 8))
    registry.add_availability(alice, hours(day_after, 0, 6))
    registry.add_availability(carol, hours(tomorrow, 0, 4))
    registry.add_availability(carol, hours(day_after, 0, 8))
    registry.add_availability(david, hours(tomorrow, 2, 6))

    for candidate, position, slot in (
        ("John Doe", "Software Engineer", hours(tomorrow, 1, 2)),
        ("Jane Smith", "Product Manager", hours(day_after, 2, 3)),
    ):
        result = registry.book_interview(candidate, position, alice, carol, slot)
        if not result.ok:
            logger.warning(
                "demo interview not booked", extra={"error": result.error.kind}
            )
    logger.info("demo data seeded")
