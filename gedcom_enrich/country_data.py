"""
country_data.py - Country reference data for place-to-country resolution.

Loads the ISO2-keyed reference table (canonical name, ISO3, aliases, wildcard
patterns, regions and historical names) from YAML, validates it against
pycountry and builds the lowercase lookup tables used by CountryResolver.

Loading is all-or-nothing: a missing or malformed data file raises, there is
no partial-data fallback.

Module: gedcom_enrich.country_data
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Pattern, Tuple, Union

import pycountry
import pycountry_convert as pc
import yaml
from unidecode import unidecode

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / 'data' / 'country_matching.yaml'

SPACE_RE = re.compile(r'\s+')
ISO2_RE = re.compile(r'^[A-Z]{2}$')
PATTERN_TOKEN_RE = re.compile(r'(\*|\s*,\s*)')


def normalize_key(text: Optional[str]) -> str:
    """
    Normalize text for lookups: ASCII-fold accents, lowercase, collapse whitespace.

    Args:
        text (Optional[str]): Text to normalize.

    Returns:
        str: Normalized key, '' for None.
    """
    if not text:
        return ''
    return SPACE_RE.sub(' ', unidecode(str(text))).strip().lower()


def wildcard_to_regex(pattern: str) -> Pattern[str]:
    """
    Compile a wildcard pattern such as "*, USA" to a case-insensitive regex.

    '*' matches any text and the spaces around a comma are optional.
    """
    parts = []
    for token in PATTERN_TOKEN_RE.split(normalize_key(pattern)):
        if token == '*':
            parts.append('.*')
        elif token.strip() == ',':
            parts.append(r'\s*,\s*')
        elif token:
            parts.append(re.escape(token))
    return re.compile(''.join(parts), re.IGNORECASE)


@dataclass
class CountryRecord:
    """
    Reference data for one country.

    Attributes:
        iso2 (str): ISO 3166-1 alpha-2 code.
        canonical (str): Canonical name.
        iso3 (str): ISO 3166-1 alpha-3 code.
        aliases (List[str]): Alternative names.
        patterns (List[str]): Wildcard patterns, e.g. "*, USA".
        regions (List[str]): Sub-national regions, states or cities.
        historical_names (Dict[str, Tuple[int, int]]): Historical name -> inclusive (start, end) years.
    """
    iso2: str
    canonical: str
    iso3: str
    aliases: List[str] = field(default_factory=list)
    patterns: List[str] = field(default_factory=list)
    regions: List[str] = field(default_factory=list)
    historical_names: Dict[str, Tuple[int, int]] = field(default_factory=dict)

    @property
    def names(self) -> List[str]:
        """Canonical name followed by aliases."""
        return [self.canonical] + list(self.aliases)


@dataclass(frozen=True)
class HistoricalName:
    iso2: str
    name: str
    key: str
    start_year: int
    end_year: int

    def valid_in(self, year: int) -> bool:
        return self.start_year <= year <= self.end_year


@dataclass(frozen=True)
class NameCandidate:
    """A canonical name or alias, in reference-data order, used by partial and fuzzy matching."""
    iso2: str
    name: str
    key: str


class CountryData:
    """
    Indexed country reference data.

    Attributes:
        records (Dict[str, CountryRecord]): Records keyed by ISO2, in file order.
        iso3_to_iso2 (Dict[str, str]): Upper-case ISO3 -> ISO2.
        alias_to_iso2 (Dict[str, str]): Normalized canonical name or alias -> ISO2.
        region_to_iso2 (Dict[str, str]): Normalized region -> ISO2, only for regions owned by one country.
        patterns (List[Tuple[str, str, Pattern[str]]]): (iso2, pattern, compiled regex).
        historical_names (List[HistoricalName]): Historical names in file order.
        name_candidates (List[NameCandidate]): Canonical names and aliases in file order.
    """

    def __init__(self, records: Mapping[str, CountryRecord]) -> None:
        self.records: Dict[str, CountryRecord] = dict(records)
        self.iso3_to_iso2: Dict[str, str] = {}
        self.alias_to_iso2: Dict[str, str] = {}
        self.region_to_iso2: Dict[str, str] = {}
        self.patterns: List[Tuple[str, str, Pattern[str]]] = []
        self.historical_names: List[HistoricalName] = []
        self.name_candidates: List[NameCandidate] = []
        self._build_indexes()

    def _build_indexes(self) -> None:
        ambiguous_regions = set()
        for iso2, record in self.records.items():
            self.iso3_to_iso2[record.iso3.upper()] = iso2

            seen_keys = set()
            for name in record.names:
                key = normalize_key(name)
                if not key or key in seen_keys:
                    continue
                seen_keys.add(key)
                owner = self.alias_to_iso2.setdefault(key, iso2)
                if owner != iso2:
                    logger.warning(f"Alias '{name}' of {iso2} already belongs to {owner}; keeping {owner}")
                    continue
                self.name_candidates.append(NameCandidate(iso2=iso2, name=name, key=key))

            for region in record.regions:
                key = normalize_key(region)
                if not key:
                    continue
                owner = self.region_to_iso2.get(key)
                if owner is not None and owner != iso2:
                    ambiguous_regions.add(key)
                self.region_to_iso2.setdefault(key, iso2)

            for pattern in record.patterns:
                self.patterns.append((iso2, pattern, wildcard_to_regex(pattern)))

            for name, (start_year, end_year) in record.historical_names.items():
                self.historical_names.append(HistoricalName(
                    iso2=iso2, name=name, key=normalize_key(name),
                    start_year=start_year, end_year=end_year,
                ))

        for key in ambiguous_regions:
            logger.warning(f"Region '{key}' belongs to more than one country; ignored for region matching")
            del self.region_to_iso2[key]

    @classmethod
    def load(cls, data_file: Optional[Union[str, Path]] = None) -> CountryData:
        """
        Load reference data from a YAML file.

        Args:
            data_file (Optional[Union[str, Path]]): Path to the YAML file; the
                packaged country_matching.yaml when None.

        Returns:
            CountryData: Indexed reference data.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file cannot be parsed or a record is malformed.
        """
        path = Path(data_file) if data_file else DEFAULT_DATA_FILE
        if not path.exists():
            raise FileNotFoundError(f"Country reference data not found: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing country reference data {path}: {e}")
        country_data = cls.from_dict(data)
        logger.info(f"Loaded {len(country_data)} countries from {path}")
        return country_data

    @classmethod
    def from_dict(cls, data: Any) -> CountryData:
        """
        Build reference data from a mapping of ISO2 code -> record dict.

        Raises:
            ValueError: If the mapping or any record is malformed.
        """
        if not isinstance(data, Mapping) or not data:
            raise ValueError("Country reference data must be a non-empty mapping of ISO2 code to record")
        records = {}
        for key, raw in data.items():
            record = _parse_record(key, raw)
            records[record.iso2] = record
        return cls(records)

    def get(self, iso2: Optional[str]) -> Optional[CountryRecord]:
        if not iso2:
            return None
        return self.records.get(iso2.upper())

    def canonical_name(self, iso2: Optional[str]) -> Optional[str]:
        record = self.get(iso2)
        return record.canonical if record else None

    def __contains__(self, iso2: object) -> bool:
        return isinstance(iso2, str) and iso2.upper() in self.records

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[CountryRecord]:
        return iter(self.records.values())


def _string_list(iso2: str, raw: Mapping[str, Any], key: str) -> List[str]:
    value = raw.get(key) or []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"Country {iso2}: '{key}' must be a list of strings")
    return [item.strip() for item in value if item.strip()]


def _historical_names(iso2: str, raw: Mapping[str, Any]) -> Dict[str, Tuple[int, int]]:
    value = raw.get('historical_names') or {}
    if not isinstance(value, Mapping):
        raise ValueError(f"Country {iso2}: 'historical_names' must be a mapping of name to [start, end]")
    result = {}
    for name, years in value.items():
        if (not isinstance(years, (list, tuple)) or len(years) != 2
                or not all(isinstance(y, int) and not isinstance(y, bool) for y in years)):
            raise ValueError(f"Country {iso2}: historical name '{name}' needs [start_year, end_year]")
        start_year, end_year = years
        if start_year > end_year:
            raise ValueError(f"Country {iso2}: historical name '{name}' starts after it ends")
        result[str(name)] = (start_year, end_year)
    return result


def _parse_record(key: Any, raw: Any) -> CountryRecord:
    iso2 = str(key).strip().upper() if isinstance(key, str) else None
    if not iso2 or not ISO2_RE.match(iso2):
        raise ValueError(f"Invalid ISO2 country code in reference data: {key!r}")
    if not isinstance(raw, Mapping):
        raise ValueError(f"Country {iso2}: record must be a mapping")
    canonical = raw.get('canonical')
    if not isinstance(canonical, str) or not canonical.strip():
        raise ValueError(f"Country {iso2}: missing canonical name")

    known = pycountry.countries.get(alpha_2=iso2)
    iso3 = raw.get('iso3')
    if iso3 is None:
        if known is None:
            raise ValueError(f"Country {iso2}: no iso3 given and not a known ISO 3166 code")
        iso3 = known.alpha_3
        logger.debug(f"Country {iso2}: iso3 backfilled as {iso3}")
    elif not isinstance(iso3, str) or len(iso3.strip()) != 3:
        raise ValueError(f"Country {iso2}: iso3 must be a three-letter code")
    iso3 = iso3.strip().upper()
    if known is None:
        logger.warning(f"Country {iso2} is not a known ISO 3166 code")
    elif known.alpha_3 != iso3:
        logger.warning(f"Country {iso2}: iso3 {iso3} differs from ISO 3166 {known.alpha_3}")

    return CountryRecord(
        iso2=iso2,
        canonical=canonical.strip(),
        iso3=iso3,
        aliases=_string_list(iso2, raw, 'aliases'),
        patterns=_string_list(iso2, raw, 'patterns'),
        regions=_string_list(iso2, raw, 'regions'),
        historical_names=_historical_names(iso2, raw),
    )


def get_continent_for_country_code(country_code: Optional[str]) -> Optional[str]:
    """
    Get the continent name for a given ISO alpha-2 country code.

    Args:
        country_code (Optional[str]): The ISO alpha-2 country code.

    Returns:
        Optional[str]: The continent name if found, else None.
    """
    if not country_code or not country_code.strip():
        return None
    try:
        continent_code = pc.country_alpha2_to_continent_code(country_code.strip().upper())
        return pc.convert_continent_code_to_continent_name(continent_code)
    except KeyError:
        logger.debug(f"No continent mapping for country code '{country_code}'")
        return None
