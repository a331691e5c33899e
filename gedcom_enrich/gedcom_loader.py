"""
gedcom_loader.py - Read individuals and family units from a GEDCOM file.

Defines the GedcomLoader class, which turns INDI and FAM records into the
plain Individual and FamilyUnit records consumed by enrichment. Relationship
sets are left empty; the relationships enrichment stage rebuilds them from
the family units.

Module: gedcom_enrich.gedcom_loader
"""
from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from ged4py.model import Record
from ged4py.parser import GedcomReader

from .model import FamilyUnit, Individual, LifeEvent

logger = logging.getLogger(__name__)


class GedcomLoader:
    """
    Loads a GEDCOM file into individuals and family units.

    Attributes:
        gedcom_file (Path): Path to the GEDCOM file as given.
    """
    LINE_RE = re.compile(
        r'^(\d+)\s+(?:@[^@]+@\s+)?([A-Z0-9_]+)(.*)$'
    )  # allow optional @xref@ before the tag

    def __init__(self, gedcom_file: Union[str, Path]) -> None:
        """
        Initialize GedcomLoader.

        Args:
            gedcom_file (Union[str, Path]): Path to GEDCOM file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        self.gedcom_file = Path(gedcom_file)
        if not self.gedcom_file.is_file():
            raise FileNotFoundError(f"GEDCOM file not found: {self.gedcom_file}")

    def load(self) -> Tuple[Dict[str, Individual], Dict[str, FamilyUnit]]:
        """
        Read all INDI and FAM records.

        Returns:
            Tuple[Dict[str, Individual], Dict[str, FamilyUnit]]: Individuals and
                family units keyed by xref_id.
        """
        read_path = self._fixed_copy()
        try:
            with GedcomReader(str(read_path)) as reader:
                individuals = {
                    record.xref_id: self._create_individual(record)
                    for record in reader.records0('INDI')
                }
                families = {
                    record.xref_id: self._create_family(record)
                    for record in reader.records0('FAM')
                }
        except Exception as e:
            logger.error(f"Error reading GEDCOM file '{self.gedcom_file}': {e}")
            raise
        finally:
            if read_path != self.gedcom_file:
                os.remove(read_path)

        logger.info(f"Loaded {len(individuals)} individuals and {len(families)} families from {self.gedcom_file.name}")
        return individuals, families

    def _fixed_copy(self) -> Path:
        """
        Return a path to parse: a corrected temporary copy if CONC/CONT levels
        needed fixing, otherwise the original file.
        """
        temp_fd, temp_path = tempfile.mkstemp(suffix='.ged')
        os.close(temp_fd)
        try:
            fixed = self.fix_conc_cont_levels(self.gedcom_file, Path(temp_path))
        except Exception:
            os.remove(temp_path)
            raise
        if fixed:
            logger.warning(f"Corrected CONC/CONT levels in GEDCOM file '{self.gedcom_file}'")
            return Path(temp_path)
        os.remove(temp_path)
        return self.gedcom_file

    @classmethod
    def fix_conc_cont_levels(cls, input_path: Path, output_path: Path) -> bool:
        """
        Re-level CONC/CONT lines to one below the line they continue.

        Some exporters (e.g. Family Tree Maker) write them at the wrong level,
        which stops the file from parsing correctly.

        Returns:
            bool: True if any line was changed.
        """
        cont_level = None
        changed = False
        with open(input_path, 'r', encoding='utf-8', newline='', errors="replace") as infile, \
                open(output_path, 'w', encoding='utf-8', newline='') as outfile:
            for raw in infile:
                line = raw.rstrip('\r\n')
                m = cls.LINE_RE.match(line)
                if not m:
                    outfile.write(raw)
                    continue

                level_s, tag, rest = m.groups()
                level = int(level_s)

                if tag in ('CONC', 'CONT'):
                    fixed_level = cont_level if cont_level is not None else level
                    outfile.write(f"{fixed_level} {tag}{rest}\n")
                    if fixed_level != level:
                        changed = True
                else:
                    cont_level = level + 1
                    outfile.write(raw)
        return changed

    @staticmethod
    def _event(record: Optional[Record]) -> Optional[LifeEvent]:
        if not record:
            return None
        date = record.sub_tag('DATE')
        place = record.sub_tag('PLAC')
        return LifeEvent(
            date=str(date.value) if date and date.value is not None else None,
            place=place.value if place else None,
        )

    def _create_individual(self, record: Record) -> Individual:
        name = record.name.format() if record.sub_tag('NAME') else ''
        return Individual(
            xref_id=record.xref_id,
            name=name or 'Unknown',
            sex=record.sex,
            birth=self._event(record.sub_tag('BIRT')),
            death=self._event(record.sub_tag('DEAT')),
        )

    @staticmethod
    def _ref_id(ref: Optional[Record]) -> Optional[str]:
        # dangling pointers come back without a resolved record
        return getattr(ref, 'xref_id', None) if ref else None

    def _create_family(self, record: Record) -> FamilyUnit:
        children = tuple(
            child_id for child_id in (self._ref_id(child) for child in record.sub_tags('CHIL')) if child_id
        )
        return FamilyUnit(
            xref_id=record.xref_id,
            husband=self._ref_id(record.sub_tag('HUSB')),
            wife=self._ref_id(record.sub_tag('WIFE')),
            children=children,
        )
