"""
validation.py - Post-condition checks on anonymized output.

Module: gedcom_enrich.anonymization.validation
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Mapping, Union

from .anonymizer import INDIVIDUAL_PREFIX, PERSON_PREFIX
from .model import AnonymizationResult, AnonymizedIndividual

logger = logging.getLogger(__name__)

ANONYMIZED_PREFIXES = (INDIVIDUAL_PREFIX, PERSON_PREFIX)


@dataclass
class ValidationReport:
    is_valid: bool = True
    issues: List[str] = field(default_factory=list)


def _as_dicts(data: Any) -> Dict[str, Dict[str, Any]]:
    if isinstance(data, AnonymizationResult):
        return {pid: person.to_dict() for pid, person in data.individuals.items()}
    if isinstance(data, Mapping) and isinstance(data.get('individuals'), Mapping):
        data = data['individuals']
    return {
        pid: person.to_dict() if isinstance(person, AnonymizedIndividual) else dict(person)
        for pid, person in data.items()
    }


def validate_anonymization(
    data: Union[AnonymizationResult, Mapping[str, Any]],
) -> ValidationReport:
    """
    Check that anonymized individuals carry no PII.

    Flags any individual whose name lacks an anonymization prefix, whose
    birth/death holds anything besides a year, or that has a place anywhere
    under birth/death.

    Args:
        data: An AnonymizationResult, its to_dict() export, or individuals keyed by id
            (as AnonymizedIndividual objects or exported dicts).

    Returns:
        ValidationReport: is_valid is False when any issue was found.
    """
    report = ValidationReport()
    for pid, person in _as_dicts(data).items():
        name = person.get('name')
        if not isinstance(name, str) or not name.startswith(ANONYMIZED_PREFIXES):
            report.issues.append(f"Individual {pid} has a name that is not anonymized")
        for event_type in ('birth', 'death'):
            event = person.get(event_type)
            if event is None:
                continue
            if not isinstance(event, Mapping):
                report.issues.append(f"Individual {pid} has {event_type} data that is not a year")
                continue
            if 'place' in event:
                report.issues.append(f"Individual {pid} has {event_type} location data")
            extra = sorted(set(event) - {'year', 'place'})
            if extra:
                report.issues.append(f"Individual {pid} has {event_type} fields other than year: {extra}")

    report.is_valid = not report.issues
    if not report.is_valid:
        logger.warning(f"Anonymization validation found {len(report.issues)} issues")
    return report
