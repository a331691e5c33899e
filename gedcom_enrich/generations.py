"""
generations.py - Relative generation numbers for a family graph.

Generation 0 is an arbitrary per-component baseline at the founders of each
connected component; it is not a birth-year cohort. Individuals that cannot be
reached from any founder keep generation None, meaning unknown.

Module: gedcom_enrich.generations
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import replace
from typing import Deque, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .model import FamilyUnit, Individual

logger = logging.getLogger(__name__)


class GenerationTracker:
    """
    Tracks people and their generations.

    Stores (person_id, generation) pairs in insertion order and provides
    utilities for lookup and grouping.

    Attributes:
        people_gen (List[Tuple[str, int]]): List of (person_id, generation) pairs.
        earliest_generation (Optional[int]): Lowest generation added.
        latest_generation (Optional[int]): Highest generation added.
    """
    def __init__(self) -> None:
        self.people_gen: List[Tuple[str, int]] = []
        self.earliest_generation: Optional[int] = None
        self.latest_generation: Optional[int] = None

    @classmethod
    def from_generations(cls, generations: Mapping[str, Optional[int]]) -> GenerationTracker:
        """Build a tracker from an id -> generation mapping, ignoring unknown generations."""
        tracker = cls()
        for pid, generation in generations.items():
            if generation is not None:
                tracker.add(pid, generation)
        return tracker

    def add(self, person_id: str, generation: int) -> None:
        self.people_gen.append((person_id, generation))
        if self.earliest_generation is None or generation < self.earliest_generation:
            self.earliest_generation = generation
        if self.latest_generation is None or generation > self.latest_generation:
            self.latest_generation = generation

    @property
    def num_generations(self) -> int:
        if self.earliest_generation is None:
            return 0
        return self.latest_generation - self.earliest_generation + 1

    def get_generation(self, generation: int) -> List[str]:
        return [pid for pid, gen in self.people_gen if gen == generation]

    def exists(self, person_id: str) -> bool:
        return any(pid == person_id for pid, _ in self.people_gen)

    def all(self) -> Dict[str, int]:
        """Return a dict mapping person_id to generation for all unique person_ids."""
        result = {}
        for pid, gen in self.people_gen:
            if pid not in result:
                result[pid] = gen
        return result

    def distribution(self) -> Dict[int, int]:
        """Return generation -> number of people, sorted by generation."""
        counts: Dict[int, int] = {}
        for _, gen in self.people_gen:
            counts[gen] = counts.get(gen, 0) + 1
        return dict(sorted(counts.items()))


class GenerationAssigner:
    """
    Assigns relative generations by breadth-first traversal from founders.

    Founders are individuals who are not listed as a child in any family unit
    with a known partner, and who are not married, directly or through a chain
    of spouses, to someone who is. A spouse who married into a line with known
    parents therefore takes the generation of that line instead of restarting
    at 0. Children of a family with no known partner (a parentless sibling
    group) count as founders.

    From an individual at generation g, spouses are visited at g and children
    at g + 1. Every id is visited at most once, so cyclic input terminates and
    the whole traversal is linear in individuals plus relations. Once the
    founders are exhausted, any individual still unvisited who is not a child
    seeds its own traversal at 0; only individuals inside parent cycles stay
    unknown.
    """

    def find_roots(self, individuals: Mapping[str, Individual], families: Optional[Iterable[FamilyUnit]] = None) -> List[str]:
        """
        Find founders to start the traversal from.

        Args:
            individuals (Mapping[str, Individual]): Individuals with relationship sets.
            families (Optional[Iterable[FamilyUnit]]): Family units; when omitted, an
                individual with any parent counts as a child.

        Returns:
            List[str]: Founder ids in input order.
        """
        child_ids = self._child_ids(individuals, families)

        married_into_line: Set[str] = set()
        seen: Set[str] = set()
        for start in individuals:
            if start in seen:
                continue
            group = self._spouse_group(individuals, start)
            seen |= group
            if group & child_ids:
                married_into_line |= group

        return [pid for pid in individuals if pid not in child_ids and pid not in married_into_line]

    def assign(self, individuals: Mapping[str, Individual], families: Optional[Iterable[FamilyUnit]] = None) -> Dict[str, Optional[int]]:
        """
        Compute a generation for every individual.

        Args:
            individuals (Mapping[str, Individual]): Individuals with relationship sets.
            families (Optional[Iterable[FamilyUnit]]): Family units used to identify children.

        Returns:
            Dict[str, Optional[int]]: Generation per id; None when unreachable.
        """
        families = list(families) if families is not None else None
        generations: Dict[str, Optional[int]] = {pid: None for pid in individuals}
        roots = self.find_roots(individuals, families)
        visited: Set[str] = set()
        self._walk(individuals, roots, generations, visited)

        # married-in spouses whose line was never reached
        child_ids = self._child_ids(individuals, families)
        stragglers = [pid for pid in individuals if pid not in visited and pid not in child_ids]
        for pid in stragglers:
            if pid not in visited:
                self._walk(individuals, [pid], generations, visited)

        if individuals and not roots and not stragglers:
            logger.warning(f"No founders found among {len(individuals)} individuals; all generations unknown")
            return generations

        unknown = len(individuals) - len(visited)
        logger.info(f"Assigned generations from {len(roots)} founders; {unknown} individuals unreachable")
        return generations

    @staticmethod
    def _walk(individuals: Mapping[str, Individual], seeds: Iterable[str],
              generations: Dict[str, Optional[int]], visited: Set[str]) -> None:
        queue: Deque[str] = deque()
        for seed in seeds:
            generations[seed] = 0
            visited.add(seed)
            queue.append(seed)

        while queue:
            pid = queue.popleft()
            generation = generations[pid]
            person = individuals[pid]
            # same-generation spouses go to the front so they settle before the next generation
            for spouse_id in sorted(person.spouses):
                if spouse_id in individuals and spouse_id not in visited:
                    visited.add(spouse_id)
                    generations[spouse_id] = generation
                    queue.appendleft(spouse_id)
            for child_id in sorted(person.children):
                if child_id in individuals and child_id not in visited:
                    visited.add(child_id)
                    generations[child_id] = generation + 1
                    queue.append(child_id)

    def apply(self, individuals: Mapping[str, Individual], families: Optional[Iterable[FamilyUnit]] = None) -> Dict[str, Individual]:
        """Return copies of the individuals with their generation set."""
        generations = self.assign(individuals, families)
        return {pid: replace(person, generation=generations[pid]) for pid, person in individuals.items()}

    @staticmethod
    def _child_ids(individuals: Mapping[str, Individual], families: Optional[Iterable[FamilyUnit]]) -> Set[str]:
        if families is None:
            return {pid for pid, person in individuals.items() if person.parents}
        # a family with no known partner does not make its children anyone's child
        return {
            child_id
            for family in families
            if any(pid in individuals for pid in family.partners)
            for child_id in family.children
        }

    @staticmethod
    def _spouse_group(individuals: Mapping[str, Individual], start: str) -> Set[str]:
        group = {start}
        stack = [start]
        while stack:
            person = individuals[stack.pop()]
            for spouse_id in person.spouses:
                if spouse_id in individuals and spouse_id not in group:
                    group.add(spouse_id)
                    stack.append(spouse_id)
        return group
