"""
relationships.py - Derive relationship sets and graph views from family units.

Family units are the ground truth: parents, children, spouses and siblings of
every individual are rebuilt from them. Edges, connected components and
ancestor/descendant closures are read-only views derived from those sets.

Module: gedcom_enrich.relationships
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, Iterator, List, Literal, Mapping, Optional, Set, Tuple

from .model import FamilyUnit, Individual, Issue, RELATION_NAMES

logger = logging.getLogger(__name__)

RelationshipKind = Literal["parent-child", "spouse", "sibling"]


@dataclass(frozen=True)
class Edge:
    """
    A derived relationship edge.

    Attributes:
        source_id (str): Parent for parent-child edges; first partner or sibling otherwise.
        target_id (str): Child for parent-child edges; the other partner or sibling otherwise.
        kind (RelationshipKind): 'parent-child', 'spouse' or 'sibling'.
        family_id (Optional[str]): Family unit the edge came from.
    """
    source_id: str
    target_id: str
    kind: RelationshipKind
    family_id: Optional[str] = None

    @property
    def edge_id(self) -> str:
        first, second = sorted((self.source_id, self.target_id))
        return f"{self.kind}:{self.family_id or 'unknown'}-{first}-{second}"

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            'id': self.edge_id,
            'source': self.source_id,
            'target': self.target_id,
            'relationship': self.kind,
            'family_id': self.family_id,
        }


@dataclass
class RelationshipGraph:
    """Individuals with rebuilt relationship sets, plus any record-local issues found."""
    individuals: Dict[str, Individual]
    issues: List[Issue] = field(default_factory=list)


class RelationshipGraphBuilder:
    """
    Builds parent/child/spouse/sibling sets from family units.

    Sets are unioned across family units, never overwritten, and never contain
    the owner's own id. References to unknown individuals are skipped for that
    relation only and reported as issues.
    """

    def build(self, individuals: Mapping[str, Individual], families: Iterable[FamilyUnit]) -> RelationshipGraph:
        """
        Derive relationship sets for every individual.

        Args:
            individuals (Mapping[str, Individual]): Individuals keyed by xref_id.
            families (Iterable[FamilyUnit]): Family units to derive relations from.

        Returns:
            RelationshipGraph: New Individual copies with relationship sets, and issues.
        """
        relations: Dict[str, Dict[str, Set[str]]] = {
            pid: {name: set() for name in RELATION_NAMES} for pid in individuals
        }
        issues: List[Issue] = []

        num_families = 0
        for family in families:
            num_families += 1
            self._add_family(family, individuals, relations, issues)

        enriched = {
            pid: replace(individual, **{name: frozenset(relations[pid][name]) for name in RELATION_NAMES})
            for pid, individual in individuals.items()
        }
        logger.info(f"Built relationships for {len(enriched)} individuals from {num_families} families ({len(issues)} issues)")
        return RelationshipGraph(individuals=enriched, issues=issues)

    def _add_family(
        self,
        family: FamilyUnit,
        individuals: Mapping[str, Individual],
        relations: Dict[str, Dict[str, Set[str]]],
        issues: List[Issue],
    ) -> None:
        partners: List[str] = []
        for role, pid in (('husband', family.husband), ('wife', family.wife)):
            if not pid:
                continue
            if not self._is_known(pid, role, family, individuals, issues):
                continue
            if pid in partners:
                self._self_reference(pid, f"is listed as both partners of family {family.xref_id}", family, issues)
                continue
            partners.append(pid)

        children: List[str] = []
        for child_id in family.children:
            if not child_id or child_id in children:
                continue
            if not self._is_known(child_id, 'child', family, individuals, issues):
                continue
            if child_id in partners:
                self._self_reference(child_id, f"is listed as both parent and child in family {family.xref_id}", family, issues)
                continue
            children.append(child_id)

        if len(partners) == 2:
            first, second = partners
            _link(relations, first, 'spouses', second)
            _link(relations, second, 'spouses', first)

        for child_id in children:
            for parent_id in partners:
                _link(relations, child_id, 'parents', parent_id)
                _link(relations, parent_id, 'children', child_id)
            for sibling_id in children:
                _link(relations, child_id, 'siblings', sibling_id)

    @staticmethod
    def _is_known(pid: str, role: str, family: FamilyUnit, individuals: Mapping[str, Individual], issues: List[Issue]) -> bool:
        if pid in individuals:
            return True
        message = f"Family {family.xref_id} references unknown {role} {pid}; relation skipped"
        logger.warning(message)
        issues.append(Issue(
            issue_type='unknown_reference',
            severity='warning',
            message=message,
            person_id=pid,
        ))
        return False

    @staticmethod
    def _self_reference(pid: str, detail: str, family: FamilyUnit, issues: List[Issue]) -> None:
        message = f"Individual {pid} {detail}; relation skipped"
        logger.warning(message)
        issues.append(Issue(
            issue_type='self_reference',
            severity='warning',
            message=message,
            person_id=pid,
        ))


def _link(relations: Dict[str, Dict[str, Set[str]]], owner: str, relation: str, other: str) -> None:
    if owner != other:
        relations[owner][relation].add(other)


def generate_edges(families: Iterable[FamilyUnit], individuals: Optional[Mapping[str, Individual]] = None) -> List[Edge]:
    """
    Generate the edge view of the family graph.

    Args:
        families (Iterable[FamilyUnit]): Family units.
        individuals (Optional[Mapping[str, Individual]]): When given, edges touching
            unknown ids are left out.

    Returns:
        List[Edge]: Parent-child, spouse and sibling edges, unique by edge_id.
    """
    edges: Dict[str, Edge] = {}

    def _known(pid: Optional[str]) -> bool:
        return bool(pid) and (individuals is None or pid in individuals)

    def _add(edge: Edge) -> None:
        if edge.source_id != edge.target_id and edge.edge_id not in edges:
            edges[edge.edge_id] = edge

    for family in families:
        partners = [pid for pid in family.partners if _known(pid)]
        children = [cid for cid in dict.fromkeys(family.children) if _known(cid)]

        if len(partners) == 2:
            _add(Edge(partners[0], partners[1], 'spouse', family.xref_id))
        for child_id in children:
            for parent_id in partners:
                _add(Edge(parent_id, child_id, 'parent-child', family.xref_id))
        for i, first in enumerate(children):
            for second in children[i + 1:]:
                _add(Edge(first, second, 'sibling', family.xref_id))

    return list(edges.values())


def connected_components(individuals: Mapping[str, Individual]) -> List[Set[str]]:
    """
    Group individuals into connected components over parent/child/spouse relations.

    Args:
        individuals (Mapping[str, Individual]): Individuals with relationship sets.

    Returns:
        List[Set[str]]: Components in discovery order.
    """
    components: List[Set[str]] = []
    visited: Set[str] = set()
    for start in individuals:
        if start in visited:
            continue
        component: Set[str] = set()
        queue = deque([start])
        visited.add(start)
        while queue:
            pid = queue.popleft()
            component.add(pid)
            person = individuals[pid]
            for other in person.parents | person.children | person.spouses:
                if other in individuals and other not in visited:
                    visited.add(other)
                    queue.append(other)
        components.append(component)
    return components


def _closure(individuals: Mapping[str, Individual], xref_id: str, relation: str) -> Set[str]:
    found: Set[str] = set()
    if xref_id not in individuals:
        return found
    stack = [xref_id]
    visited = {xref_id}
    while stack:
        person = individuals.get(stack.pop())
        if person is None:
            continue
        for other in getattr(person, relation):
            if other not in visited:
                visited.add(other)
                found.add(other)
                stack.append(other)
    return found


def collect_ancestors(individuals: Mapping[str, Individual], xref_id: str) -> Set[str]:
    """All ids reachable through parent links, excluding xref_id itself even for cyclic input."""
    return _closure(individuals, xref_id, 'parents')


def collect_descendants(individuals: Mapping[str, Individual], xref_id: str) -> Set[str]:
    """All ids reachable through child links, excluding xref_id itself even for cyclic input."""
    return _closure(individuals, xref_id, 'children')


def lineage_closures(individuals: Mapping[str, Individual], relation: str) -> Dict[str, FrozenSet[str]]:
    """
    Ancestor ('parents') or descendant ('children') sets for every individual at once.

    Each individual's set is the union of its direct relations and their
    already computed sets, so shared lines are walked once. Individuals that
    reach a cycle fall back to a plain traversal so their set never includes
    themselves.

    Args:
        individuals (Mapping[str, Individual]): Individuals with relationship sets.
        relation (str): 'parents' for ancestors, 'children' for descendants.

    Returns:
        Dict[str, FrozenSet[str]]: Closure per individual id.
    """
    memo: Dict[str, FrozenSet[str]] = {}
    in_progress: Set[str] = set()
    tainted: Set[str] = set()

    for start in individuals:
        if start in memo:
            continue
        in_progress.add(start)
        stack: List[Tuple[str, Iterator[str]]] = [(start, iter(getattr(individuals[start], relation)))]
        while stack:
            pid, pending = stack[-1]
            descended = False
            for other in pending:
                if other in in_progress:
                    tainted.add(pid)
                elif other in individuals and other not in memo:
                    in_progress.add(other)
                    stack.append((other, iter(getattr(individuals[other], relation))))
                    descended = True
                    break
            if descended:
                continue

            stack.pop()
            in_progress.discard(pid)
            related = getattr(individuals[pid], relation)
            if pid in tainted or any(other in tainted for other in related):
                tainted.add(pid)
                memo[pid] = frozenset(_closure(individuals, pid, relation))
                continue
            found: Set[str] = set(related)
            for other in related:
                found |= memo.get(other, frozenset())
            memo[pid] = frozenset(found)

    if tainted:
        logger.warning(f"{len(tainted)} individuals reach a cycle of '{relation}' links")
    return memo
