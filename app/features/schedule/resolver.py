# Schedule Feature - Resolver
"""
Decide which medications apply on a calendar day and group them by time slot.

Everything here is pure: no store access, no clock reads.
"""

import calendar
from datetime import date, timedelta
from typing import Dict, Iterable, List, Sequence

from app.features.medications.schemas import MedicationDefinition
from app.shared.dates import DateLike, to_calendar_day


DAILY = "Diario"
TUE_THU_SAT = "Martes, Jueves, Sábados"
LAST_TUESDAY = "Último Martes del Mes"
AS_NEEDED = "Según necesidad"

TUESDAY = 1  # date.weekday()
THURSDAY = 3
SATURDAY = 5

SLOT_ORDER = [
    "Ayunas",
    "Mañana Post desayuno",
    "Antes de Comer 13hs",
    "Tarde 18hs",
    "Noche",
    "Mensual",
]


def last_tuesday_of_month(year: int, month: int) -> date:
    """Walk back from the month's last day until a Tuesday is found."""
    day = date(year, month, calendar.monthrange(year, month)[1])
    while day.weekday() != TUESDAY:
        day -= timedelta(days=1)
    return day


def is_scheduled(definition: MedicationDefinition, day: DateLike) -> bool:
    """
    Per-definition inclusion rule.

    Unrecognised frequency strings count as daily.
    """
    day = to_calendar_day(day)
    rule = definition.frequency

    if rule == DAILY:
        return True
    if rule == TUE_THU_SAT:
        return day.weekday() in (TUESDAY, THURSDAY, SATURDAY)
    if rule == LAST_TUESDAY:
        return day == last_tuesday_of_month(day.year, day.month)
    if rule == AS_NEEDED:
        return False
    return True


def _slot_rank(slot: str) -> int:
    try:
        return SLOT_ORDER.index(slot)
    except ValueError:
        return len(SLOT_ORDER)


def group_by_slot(definitions: Iterable[MedicationDefinition]) -> Dict[str, List[MedicationDefinition]]:
    """
    Group definitions by time slot in display order.

    Listed slots come first in SLOT_ORDER order; unlisted slots follow in
    first-seen order (sorted() is stable). Members keep source order.
    """
    groups: Dict[str, List[MedicationDefinition]] = {}
    for definition in definitions:
        groups.setdefault(definition.time_slot, []).append(definition)

    return {slot: groups[slot] for slot in sorted(groups, key=_slot_rank)}


def resolve_schedule(
    definitions: Sequence[MedicationDefinition],
    day: DateLike,
) -> Dict[str, List[MedicationDefinition]]:
    """
    Medications active on `day`, grouped by time slot.

    Args:
        definitions: Ordered medication definitions
        day: Target calendar day (date, datetime or YYYY-MM-DD)

    Returns:
        Ordered mapping of time slot to the definitions given in that slot
    """
    day = to_calendar_day(day)
    return group_by_slot(d for d in definitions if is_scheduled(d, day))


def as_needed_guidance(definitions: Sequence[MedicationDefinition]) -> List[MedicationDefinition]:
    """Reference-only entries shown beside the checklist."""
    return [
        d for d in definitions
        if d.frequency == AS_NEEDED or d.time_slot == AS_NEEDED
    ]
