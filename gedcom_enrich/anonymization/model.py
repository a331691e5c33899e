from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from gedcom_enrich.model import RELATION_NAMES


@dataclass(frozen=True)
class AnonymizedIndividual:
    """
    An individual with PII removed.

    birth/death hold at most a 'year' key; places, full dates and the
    countries resolved from places are never carried over.
    """
    xref_id: str
    name: str
    sex: Optional[str] = None
    birth: Optional[Dict[str, int]] = None
    death: Optional[Dict[str, int]] = None
    parents: FrozenSet[str] = field(default_factory=frozenset)
    spouses: FrozenSet[str] = field(default_factory=frozenset)
    children: FrozenSet[str] = field(default_factory=frozenset)
    siblings: FrozenSet[str] = field(default_factory=frozenset)
    generation: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'id': self.xref_id, 'name': self.name}
        if self.birth is not None:
            data['birth'] = dict(self.birth)
        if self.death is not None:
            data['death'] = dict(self.death)
        for relation in RELATION_NAMES:
            data[relation] = sorted(getattr(self, relation))
        data['generation'] = self.generation
        data['sex'] = self.sex
        data['metadata'] = dict(self.metadata)
        return data


@dataclass(frozen=True)
class AnonymizedFamily:
    xref_id: str
    husband: Optional[str] = None
    wife: Optional[str] = None
    children: Tuple[str, ...] = ()

    @property
    def number_of_children(self) -> int:
        return len(self.children)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.xref_id,
            'husband': self.husband,
            'wife': self.wife,
            'children': list(self.children),
            'number_of_children': self.number_of_children,
        }


@dataclass
class StrippingReport:
    """Counts of what anonymization removed, plus per-record warnings."""
    names_stripped: int = 0
    dates_stripped: int = 0
    locations_stripped: int = 0
    individuals_processed: int = 0
    families_processed: int = 0
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'names_stripped': self.names_stripped,
            'dates_stripped': self.dates_stripped,
            'locations_stripped': self.locations_stripped,
            'individuals_processed': self.individuals_processed,
            'families_processed': self.families_processed,
            'warnings': list(self.warnings),
        }


@dataclass
class AnonymizationResult:
    individuals: Dict[str, AnonymizedIndividual] = field(default_factory=dict)
    families: Dict[str, AnonymizedFamily] = field(default_factory=dict)
    report: StrippingReport = field(default_factory=StrippingReport)

    def to_dict(self) -> Dict[str, Any]:
        """Export shape: individuals and families keyed by id, plus the report."""
        return {
            'individuals': {pid: person.to_dict() for pid, person in self.individuals.items()},
            'families': {fid: family.to_dict() for fid, family in self.families.items()},
            'report': self.report.to_dict(),
        }
