"""
country_resolver.py - Cascading place-to-country resolution.

CountryResolver maps a free-text place ("Dallas, Texas, USA", "Cork",
"East Germany") to an ISO2 code with a confidence score. Tiers are tried in
strict order and the first hit wins:

    exact (1.0) > alias (0.95) > pattern (0.9) > region (0.85)
    > historical (0.75, only with a year) > partial word match (0.85)
    > fuzzy Levenshtein (0.3-0.6, kept only if >= 0.5)

The resolver holds no mutable state. Running statistics live in a
ResolverStatistics value that callers pass in and get back updated.

Module: gedcom_enrich.country_resolver
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Tuple, Union

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from .country_data import CountryData, NameCandidate, normalize_key
from .model import CountryMatch

logger = logging.getLogger(__name__)

EXACT_CONFIDENCE = 1.0
ALIAS_CONFIDENCE = 0.95
PATTERN_CONFIDENCE = 0.9
REGION_CONFIDENCE = 0.85
HISTORICAL_CONFIDENCE = 0.75
PARTIAL_CONFIDENCE = 0.85

MAX_FUZZY_DISTANCE = 3
MIN_FUZZY_CONFIDENCE = 0.5

# prefixes that usually name a historical state, left to the historical tier
HISTORICAL_PREFIXES = ('east ', 'west ', 'north ', 'south ', 'soviet ', 'former ')

TOKEN_SPLIT_RE = re.compile(r'[,\s]+')

NO_MATCH = CountryMatch(iso2=None, confidence=0.0, method='fuzzy')

CONFIDENCE_TIERS = ('high', 'medium', 'low', 'unmatched')
METHODS = ('exact', 'alias', 'pattern', 'region', 'historical', 'fuzzy', 'unmatched')


def confidence_tier(confidence: float) -> str:
    """Bucket a confidence: high >= 0.9, medium >= 0.7, low >= 0.5, otherwise unmatched."""
    if confidence >= 0.9:
        return 'high'
    if confidence >= 0.7:
        return 'medium'
    if confidence >= 0.5:
        return 'low'
    return 'unmatched'


def fuzzy_confidence(distance: int) -> float:
    return round(max(0.3, 0.6 - distance * 0.1), 2)


@dataclass(frozen=True)
class UnresolvedLocation:
    """A place string that no tier could resolve."""
    place: str
    individual_id: Optional[str] = None
    event_type: Optional[str] = None
    year: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'place': self.place,
            'individual_id': self.individual_id,
            'event_type': self.event_type,
            'year': self.year,
        }


@dataclass(frozen=True)
class ResolverStatistics:
    """
    Running statistics for one batch of lookups (typically one file).

    Values are never mutated; record() returns an updated copy.

    Attributes:
        total_locations (int): Number of lookups recorded.
        tiers (Dict[str, int]): Counts per confidence tier.
        methods (Dict[str, int]): Counts per match method, plus 'unmatched'.
        unresolved (Tuple[UnresolvedLocation, ...]): Every unmatched lookup, in order.
    """
    total_locations: int = 0
    tiers: Dict[str, int] = field(default_factory=lambda: {tier: 0 for tier in CONFIDENCE_TIERS})
    methods: Dict[str, int] = field(default_factory=lambda: {method: 0 for method in METHODS})
    unresolved: Tuple[UnresolvedLocation, ...] = ()

    def record(
        self,
        match: CountryMatch,
        place: Optional[str],
        individual_id: Optional[str] = None,
        event_type: Optional[str] = None,
        year: Optional[int] = None,
    ) -> ResolverStatistics:
        """
        Return new statistics with one more lookup recorded.

        Args:
            match (CountryMatch): Result of the lookup.
            place (Optional[str]): Place text that was looked up.
            individual_id (Optional[str]): Owning individual, for the unresolved log.
            event_type (Optional[str]): 'birth', 'death', ...
            year (Optional[int]): Year used as context.

        Returns:
            ResolverStatistics: Updated copy.
        """
        tiers = dict(self.tiers)
        methods = dict(self.methods)
        unresolved = self.unresolved
        if match.iso2:
            tier = confidence_tier(match.confidence)
            tiers[tier] = tiers.get(tier, 0) + 1
            methods[match.method] = methods.get(match.method, 0) + 1
        else:
            tiers['unmatched'] = tiers.get('unmatched', 0) + 1
            methods['unmatched'] = methods.get('unmatched', 0) + 1
            unresolved = unresolved + (UnresolvedLocation(place or '', individual_id, event_type, year),)
        return ResolverStatistics(
            total_locations=self.total_locations + 1,
            tiers=tiers,
            methods=methods,
            unresolved=unresolved,
        )

    def reset(self) -> ResolverStatistics:
        """Return empty statistics."""
        return ResolverStatistics()

    @property
    def matched_count(self) -> int:
        return self.total_locations - self.tiers.get('unmatched', 0)

    @property
    def match_rate(self) -> float:
        if not self.total_locations:
            return 0.0
        return self.matched_count / self.total_locations

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_locations': self.total_locations,
            'matched': dict(self.tiers),
            'methods': dict(self.methods),
            'match_rate': round(self.match_rate, 4),
            'unresolved_locations': [location.to_dict() for location in self.unresolved],
        }


class CountryResolver:
    """
    Resolves free-text places to countries.

    Construction loads the reference data and fails loudly if it is missing or
    malformed. Resolution itself never raises for any text input.

    Attributes:
        country_data (CountryData): Indexed reference data.
    """

    def __init__(self, country_data: Optional[CountryData] = None, data_file: Optional[Union[str, Path]] = None) -> None:
        """
        Initialize the resolver.

        Args:
            country_data (Optional[CountryData]): Pre-loaded reference data.
            data_file (Optional[Union[str, Path]]): YAML file to load when country_data is None.

        Raises:
            FileNotFoundError: If the data file does not exist.
            ValueError: If the data file is malformed.
        """
        self.country_data = country_data if country_data is not None else CountryData.load(data_file)
        self._word_patterns: List[Tuple[NameCandidate, Pattern[str]]] = [
            (candidate, re.compile(r'(?:^|[,\s])' + re.escape(candidate.key) + r'(?:$|[,\s])'))
            for candidate in self.country_data.name_candidates
        ]
        self._fuzzy_choices: List[str] = [candidate.key for candidate in self.country_data.name_candidates]

    def resolve(self, place: Optional[str], year: Optional[int] = None) -> CountryMatch:
        """
        Resolve a place string to a country.

        Args:
            place (Optional[str]): Free-text place.
            year (Optional[int]): Event year; enables the historical tier.

        Returns:
            CountryMatch: First successful tier, or a no-match result.
        """
        text = place.strip() if isinstance(place, str) else ''
        if not text:
            return NO_MATCH
        key = normalize_key(text)
        if not key:
            return NO_MATCH

        match = (
            self._match_exact(key)
            or self._match_alias(text, key)
            or self._match_pattern(text, key)
            or self._match_region(key)
        )
        if match is None and year is not None:
            match = self._match_historical(key, year)
        if match is None:
            match = self._match_partial(key) or self._match_fuzzy(key)
        return match or NO_MATCH

    def process_place(
        self,
        place: Optional[str],
        year: Optional[int] = None,
        individual_id: Optional[str] = None,
        event_type: Optional[str] = None,
        statistics: Optional[ResolverStatistics] = None,
    ) -> Tuple[CountryMatch, ResolverStatistics]:
        """
        Resolve a place and record the outcome.

        Args:
            place (Optional[str]): Free-text place.
            year (Optional[int]): Event year.
            individual_id (Optional[str]): Owning individual.
            event_type (Optional[str]): Event type the place belongs to.
            statistics (Optional[ResolverStatistics]): Statistics so far; fresh when None.

        Returns:
            Tuple[CountryMatch, ResolverStatistics]: The match and the updated statistics.
        """
        match = self.resolve(place, year)
        if not match.iso2:
            logger.debug(f"Unresolved place '{place}' ({event_type} of {individual_id}, year {year})")
        statistics = statistics if statistics is not None else ResolverStatistics()
        return match, statistics.record(match, place, individual_id, event_type, year)

    def _match_exact(self, key: str) -> Optional[CountryMatch]:
        code = key.upper()
        if len(code) == 2 and code in self.country_data.records:
            return CountryMatch(code, EXACT_CONFIDENCE, 'exact', matched_on=code)
        iso2 = self.country_data.iso3_to_iso2.get(code) if len(code) == 3 else None
        if iso2:
            return CountryMatch(iso2, EXACT_CONFIDENCE, 'exact', matched_on=code)
        return None

    def _match_alias(self, text: str, key: str) -> Optional[CountryMatch]:
        iso2 = self.country_data.alias_to_iso2.get(key)
        if iso2:
            return CountryMatch(iso2, ALIAS_CONFIDENCE, 'alias', matched_on=text)
        return None

    def _match_pattern(self, text: str, key: str) -> Optional[CountryMatch]:
        parts = [part.strip() for part in text.split(',')]
        if len(parts) < 2:
            return None
        last_part = parts[-1]
        if last_part:
            last_key = normalize_key(last_part)
            last_match = self._match_exact(last_key) or self._match_alias(last_part, last_key)
            if last_match:
                return CountryMatch(last_match.iso2, PATTERN_CONFIDENCE, 'pattern', matched_on=last_part)
        for iso2, pattern, regex in self.country_data.patterns:
            if regex.fullmatch(key):
                return CountryMatch(iso2, PATTERN_CONFIDENCE, 'pattern', matched_on=pattern)
        return None

    def _match_region(self, key: str) -> Optional[CountryMatch]:
        regions = self.country_data.region_to_iso2
        candidates = [key]
        # comma-separated parts from most to least significant, then single tokens
        parts = [part.strip() for part in key.split(',') if part.strip()]
        if len(parts) > 1:
            candidates.extend(reversed(parts))
        candidates.extend(token for token in TOKEN_SPLIT_RE.split(key) if token)
        for candidate in candidates:
            iso2 = regions.get(candidate)
            if iso2:
                return CountryMatch(iso2, REGION_CONFIDENCE, 'region', matched_on=candidate)
        return None

    def _match_historical(self, key: str, year: int) -> Optional[CountryMatch]:
        for historical in self.country_data.historical_names:
            if historical.key in key and historical.valid_in(year):
                return CountryMatch(
                    historical.iso2, HISTORICAL_CONFIDENCE, 'historical',
                    matched_on=historical.name, historical_year=year,
                )
        return None

    def _match_partial(self, key: str) -> Optional[CountryMatch]:
        if key.startswith(HISTORICAL_PREFIXES):
            return None
        best: Optional[NameCandidate] = None
        for candidate, regex in self._word_patterns:
            if best is not None and len(candidate.key) <= len(best.key):
                continue
            if regex.search(key):
                best = candidate
        if best is None:
            return None
        return CountryMatch(best.iso2, PARTIAL_CONFIDENCE, 'pattern', matched_on=best.name)

    def _match_fuzzy(self, key: str) -> Optional[CountryMatch]:
        if not self._fuzzy_choices:
            return None
        result = process.extractOne(
            key,
            self._fuzzy_choices,
            scorer=Levenshtein.distance,
            processor=None,
            score_cutoff=MAX_FUZZY_DISTANCE,
        )
        if result is None:
            return None
        _, distance, index = result
        confidence = fuzzy_confidence(int(distance))
        if confidence < MIN_FUZZY_CONFIDENCE:
            return None
        candidate = self.country_data.name_candidates[index]
        return CountryMatch(candidate.iso2, confidence, 'fuzzy', matched_on=candidate.name)
