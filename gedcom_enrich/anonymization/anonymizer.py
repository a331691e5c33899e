"""
anonymizer.py - Strip PII from an enriched population.

Names become synthetic identifiers, dates become years, and places (with the
countries resolved from them) are removed. Selected metadata is perturbed with
small random noise.

Module: gedcom_enrich.anonymization.anonymizer
"""
from __future__ import annotations

import logging
import random
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from gedcom_enrich.date_utils import extract_year
from gedcom_enrich.model import FamilyUnit, Individual, LifeEvent, RELATION_NAMES
from .config import AnonymizationConfig
from .masking import get_masker
from .model import AnonymizationResult, AnonymizedFamily, AnonymizedIndividual, StrippingReport

logger = logging.getLogger(__name__)

INDIVIDUAL_PREFIX = "Individual_"
PERSON_PREFIX = "Person_"

# metadata derived from event years; dropped together with the years
YEAR_METADATA = ('birth_year', 'death_year')
# pins the birth day and month; dropped whenever birth_month is masked
DAY_METADATA = ('zodiac_sign',)


class PIIAnonymizer:
    """
    Produces an anonymized copy of individuals and families.

    The anonymizer keeps no state between calls apart from its random source;
    a seeded random.Random makes the masking reproducible.

    Attributes:
        config (AnonymizationConfig): Naming strategy, year handling and masking.
        rng (random.Random): Source of masking noise.
    """

    def __init__(self, config: Optional[AnonymizationConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config if config is not None else AnonymizationConfig()
        self.rng = rng if rng is not None else random.Random()

    def anonymize(
        self,
        individuals: Union[Mapping[str, Individual], Iterable[Individual]],
        families: Union[Mapping[str, FamilyUnit], Iterable[FamilyUnit]] = (),
    ) -> AnonymizationResult:
        """
        Anonymize a population.

        Args:
            individuals: Enriched individuals, keyed by xref_id or as a list.
            families: Family units, keyed by xref_id or as a list.

        Returns:
            AnonymizationResult: Anonymized individuals and families plus a stripping report.
        """
        people = dict(individuals) if isinstance(individuals, Mapping) else {p.xref_id: p for p in individuals}
        family_list = list(families.values()) if isinstance(families, Mapping) else list(families)
        report = StrippingReport()
        names = self._names(people)

        anonymized: Dict[str, AnonymizedIndividual] = {}
        for pid, person in people.items():
            anonymized[pid] = self._anonymize_individual(person, names[pid], people, report)
            report.individuals_processed += 1

        anonymized_families: Dict[str, AnonymizedFamily] = {}
        for family in family_list:
            anonymized_families[family.xref_id] = self._anonymize_family(family, people, report)
            report.families_processed += 1

        logger.info(
            f"Anonymized {report.individuals_processed} individuals and {report.families_processed} families: "
            f"{report.names_stripped} names, {report.dates_stripped} dates, "
            f"{report.locations_stripped} locations stripped"
        )
        return AnonymizationResult(individuals=anonymized, families=anonymized_families, report=report)

    def _names(self, people: Mapping[str, Individual]) -> Dict[str, str]:
        if self.config.name_strategy == 'individual_id':
            return {pid: f"{INDIVIDUAL_PREFIX}{pid}" for pid in people}

        next_index: Dict[Optional[int], int] = {}
        names: Dict[str, str] = {}
        for pid, person in people.items():
            index = next_index.get(person.generation, 0)
            next_index[person.generation] = index + 1
            generation = 'unknown' if person.generation is None else person.generation
            names[pid] = f"{PERSON_PREFIX}{generation}_{index}"
        return names

    def _anonymize_individual(
        self,
        person: Individual,
        name: str,
        people: Mapping[str, Individual],
        report: StrippingReport,
    ) -> AnonymizedIndividual:
        if person.name:
            report.names_stripped += 1

        relations: Dict[str, frozenset] = {}
        for relation in RELATION_NAMES:
            ids = getattr(person, relation)
            known = frozenset(rid for rid in ids if rid in people)
            if len(known) != len(ids):
                self._warn(report, f"Individual {person.xref_id} references unknown {relation}: "
                                   f"{sorted(ids - known)}; references skipped")
            relations[relation] = known

        return AnonymizedIndividual(
            xref_id=person.xref_id,
            name=name,
            sex=person.sex,
            birth=self._strip_event(person.birth, report),
            death=self._strip_event(person.death, report),
            generation=person.generation,
            metadata=self._mask_metadata(person),
            **relations,
        )

    def _strip_event(self, event: Optional[LifeEvent], report: StrippingReport) -> Optional[Dict[str, int]]:
        if event is None:
            return None
        if event.date:
            report.dates_stripped += 1
        if event.place:
            report.locations_stripped += 1
        if not self.config.keep_years:
            return None
        year = extract_year(event.date)
        return {'year': year} if year is not None else {}

    def _mask_metadata(self, person: Individual) -> Dict[str, Any]:
        if person.metadata is None:
            return {}
        metadata = person.metadata.to_dict()
        if not self.config.keep_years:
            for key in YEAR_METADATA:
                metadata.pop(key, None)
        if 'birth_month' in self.config.masked_fields:
            for key in DAY_METADATA:
                metadata.pop(key, None)
        for field_name, kind in self.config.masked_fields.items():
            if field_name not in metadata:
                continue
            masker = get_masker(kind)
            if kind == 'lifespan':
                metadata[field_name] = masker(metadata[field_name], self.rng, self.config.lifespan_noise)
            elif kind == 'birth_month':
                metadata[field_name] = masker(metadata[field_name], self.rng, self.config.birth_month_noise)
            else:
                metadata[field_name] = masker(metadata[field_name], self.rng)
        return metadata

    def _anonymize_family(self, family: FamilyUnit, people: Mapping[str, Individual], report: StrippingReport) -> AnonymizedFamily:
        def _known(pid: Optional[str], role: str) -> Optional[str]:
            if pid is None or pid in people:
                return pid
            self._warn(report, f"Family {family.xref_id} references unknown {role} {pid}; reference skipped")
            return None

        children = tuple(cid for cid in family.children if _known(cid, 'child') is not None)
        return AnonymizedFamily(
            xref_id=family.xref_id,
            husband=_known(family.husband, 'husband'),
            wife=_known(family.wife, 'wife'),
            children=children,
        )

    @staticmethod
    def _warn(report: StrippingReport, message: str) -> None:
        logger.warning(message)
        report.warnings.append(message)
