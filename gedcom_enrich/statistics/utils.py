"""
Helpers shared by statistics collectors.

Values are read from enrichment metadata when present and derived from the raw
event dates otherwise, so collectors also work on unenriched individuals.
"""
from __future__ import annotations

from typing import Optional

from gedcom_enrich.date_utils import extract_year
from gedcom_enrich.model import Individual, LifeEvent


def birth_year(person: Individual) -> Optional[int]:
    if person.metadata is not None and person.metadata.birth_year is not None:
        return person.metadata.birth_year
    return extract_year(person.birth.date) if person.birth else None


def death_year(person: Individual) -> Optional[int]:
    if person.metadata is not None and person.metadata.death_year is not None:
        return person.metadata.death_year
    return extract_year(person.death.date) if person.death else None


def lifespan_years(person: Individual) -> Optional[int]:
    """Whole years between birth and death; None when either is unknown or negative."""
    born, died = birth_year(person), death_year(person)
    if born is None or died is None or died < born:
        return None
    return died - born


def is_alive(person: Individual) -> bool:
    if person.metadata is not None:
        return person.metadata.is_alive
    return not (person.death and person.death.date)


def event_country(event: Optional[LifeEvent]) -> Optional[str]:
    """ISO2 code of a resolved event, or None."""
    if event is None or event.country is None:
        return None
    return event.country.iso2


def event_place(event: Optional[LifeEvent]) -> Optional[str]:
    if event is None or not event.place or not event.place.strip():
        return None
    return event.place.strip()


def decade_of(year: int) -> int:
    return (year // 10) * 10
