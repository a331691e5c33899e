"""
Tests for relationship derivation, edges, components and closures.
"""
import pytest

from gedcom_enrich.relationships import (
    Edge,
    RelationshipGraphBuilder,
    collect_ancestors,
    collect_descendants,
    connected_components,
    generate_edges,
    lineage_closures,
)


@pytest.fixture
def built_tree(sample_tree):
    individuals, families = sample_tree
    return RelationshipGraphBuilder().build(individuals, families)


class TestRelationshipGraphBuilder:
    def test_parent_child_links(self, built_tree):
        """Children get both partners as parents; parents get the child."""
        people = built_tree.individuals
        assert people["I3"].parents == {"I1", "I2"}
        assert people["I1"].children == {"I3"}
        assert people["I3"].children == {"I5", "I6"}

    def test_spouses_are_symmetric(self, built_tree):
        """Spouse links are recorded on both partners."""
        people = built_tree.individuals
        assert people["I1"].spouses == {"I2"}
        assert people["I2"].spouses == {"I1"}
        assert people["I3"].spouses == {"I4"}

    def test_siblings_exclude_self(self, built_tree):
        """Siblings come from shared family units and never include the owner."""
        people = built_tree.individuals
        assert people["I5"].siblings == {"I6"}
        assert people["I3"].siblings == set()
        for pid, person in people.items():
            for relation in (person.parents, person.spouses, person.children, person.siblings):
                assert pid not in relation

    def test_no_issues_for_clean_input(self, built_tree):
        """A consistent tree builds without issues."""
        assert built_tree.issues == []

    def test_input_is_not_mutated(self, sample_tree):
        """The builder returns copies; the input records keep empty relation sets."""
        individuals, families = sample_tree
        RelationshipGraphBuilder().build(individuals, families)
        assert individuals["I3"].parents == frozenset()

    def test_sets_are_unioned_across_families(self, make_individual, make_family):
        """A person in two families keeps relations from both."""
        people = {pid: make_individual(pid) for pid in ("I1", "I2", "I3", "I4", "I5")}
        families = [
            make_family("F1", husband="I1", wife="I2", children=["I4"]),
            make_family("F2", husband="I1", wife="I3", children=["I5"]),
        ]
        result = RelationshipGraphBuilder().build(people, families)
        assert result.individuals["I1"].spouses == {"I2", "I3"}
        assert result.individuals["I1"].children == {"I4", "I5"}
        # half-siblings do not share a family unit
        assert result.individuals["I4"].siblings == set()

    def test_unknown_reference_is_reported(self, make_individual, make_family):
        """An unknown child is skipped and reported; the rest of the family still links."""
        people = {pid: make_individual(pid) for pid in ("I1", "I2", "I3")}
        families = [make_family("F1", husband="I1", wife="I2", children=["I3", "I99"])]
        result = RelationshipGraphBuilder().build(people, families)
        assert result.individuals["I1"].children == {"I3"}
        assert result.individuals["I1"].spouses == {"I2"}
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.issue_type == 'unknown_reference'
        assert issue.person_id == "I99"
        assert "I99" not in result.individuals

    def test_unknown_partner_drops_spouse_link(self, make_individual, make_family):
        """With only one known partner there is no spouse link, but the child keeps that parent."""
        people = {pid: make_individual(pid) for pid in ("I1", "I3")}
        families = [make_family("F1", husband="I1", wife="I404", children=["I3"])]
        result = RelationshipGraphBuilder().build(people, families)
        assert result.individuals["I1"].spouses == set()
        assert result.individuals["I3"].parents == {"I1"}
        assert [issue.person_id for issue in result.issues] == ["I404"]

    def test_self_reference_partner(self, make_individual, make_family):
        """The same id as husband and wife is reported and produces no self link."""
        people = {pid: make_individual(pid) for pid in ("I1", "I2")}
        families = [make_family("F1", husband="I1", wife="I1", children=["I2"])]
        result = RelationshipGraphBuilder().build(people, families)
        assert result.individuals["I1"].spouses == set()
        assert result.individuals["I2"].parents == {"I1"}
        assert [issue.issue_type for issue in result.issues] == ['self_reference']

    def test_self_reference_child(self, make_individual, make_family):
        """A partner listed as their own child is reported and skipped as a child."""
        people = {pid: make_individual(pid) for pid in ("I1", "I2")}
        families = [make_family("F1", husband="I1", wife="I2", children=["I1"])]
        result = RelationshipGraphBuilder().build(people, families)
        assert "I1" not in result.individuals["I1"].parents
        assert result.individuals["I1"].children == set()
        assert result.individuals["I1"].spouses == {"I2"}
        assert result.issues[0].issue_type == 'self_reference'

    def test_duplicate_child_is_ignored(self, make_individual, make_family):
        """A child listed twice is linked once."""
        people = {pid: make_individual(pid) for pid in ("I1", "I2")}
        families = [make_family("F1", husband="I1", children=["I2", "I2"])]
        result = RelationshipGraphBuilder().build(people, families)
        assert result.individuals["I1"].children == {"I2"}
        assert result.individuals["I2"].siblings == set()
        assert result.issues == []


class TestGenerateEdges:
    def test_edge_counts_by_kind(self, sample_tree):
        """Two spouse edges, six parent-child edges and one sibling edge."""
        _, families = sample_tree
        edges = generate_edges(families)
        kinds = [edge.kind for edge in edges]
        assert kinds.count('spouse') == 2
        assert kinds.count('parent-child') == 6
        assert kinds.count('sibling') == 1

    def test_edge_ids_are_unique(self, make_family):
        """A family listed twice does not duplicate edges."""
        family = make_family("F1", husband="I1", wife="I2", children=["I3"])
        edges = generate_edges([family, family])
        assert len(edges) == len({edge.edge_id for edge in edges}) == 3

    def test_unknown_ids_filtered_with_individuals(self, sample_tree, make_family):
        """When individuals are given, edges to unknown ids are left out."""
        individuals, _ = sample_tree
        edges = generate_edges([make_family("F9", husband="I1", wife="I77", children=["I88"])], individuals)
        assert edges == []

    def test_parent_child_direction(self, make_family):
        """Parent-child edges run from parent to child."""
        edges = generate_edges([make_family("F1", wife="I2", children=["I3"])])
        assert edges == [Edge("I2", "I3", 'parent-child', "F1")]

    def test_edge_to_dict(self):
        edge = Edge("I1", "I2", 'spouse', "F1")
        assert edge.to_dict() == {
            'id': 'spouse:F1-I1-I2',
            'source': 'I1',
            'target': 'I2',
            'relationship': 'spouse',
            'family_id': 'F1',
        }


class TestComponentsAndClosures:
    def test_single_component(self, built_tree):
        components = connected_components(built_tree.individuals)
        assert components == [{"I1", "I2", "I3", "I4", "I5", "I6"}]

    def test_disconnected_components(self, make_individual, make_family):
        """Separate families form separate components; an isolated person is its own."""
        people = {pid: make_individual(pid) for pid in ("A1", "A2", "B1", "B2", "C1")}
        families = [
            make_family("FA", husband="A1", children=["A2"]),
            make_family("FB", husband="B1", wife="B2"),
        ]
        result = RelationshipGraphBuilder().build(people, families)
        components = connected_components(result.individuals)
        assert sorted(sorted(c) for c in components) == [["A1", "A2"], ["B1", "B2"], ["C1"]]

    def test_ancestors_and_descendants(self, built_tree):
        people = built_tree.individuals
        assert collect_ancestors(people, "I5") == {"I1", "I2", "I3", "I4"}
        assert collect_descendants(people, "I1") == {"I3", "I5", "I6"}
        assert collect_ancestors(people, "I1") == set()
        assert collect_descendants(people, "missing") == set()

    def test_closure_terminates_on_cycle(self, make_individual, make_family):
        """Cyclic parent links terminate and never include the starting id."""
        people = {pid: make_individual(pid) for pid in ("I1", "I2")}
        families = [
            make_family("F1", husband="I1", children=["I2"]),
            make_family("F2", husband="I2", children=["I1"]),
        ]
        result = RelationshipGraphBuilder().build(people, families)
        assert collect_ancestors(result.individuals, "I1") == {"I2"}
        assert collect_descendants(result.individuals, "I1") == {"I2"}

    def test_lineage_closures_match_single_walks(self, built_tree):
        people = built_tree.individuals
        ancestors = lineage_closures(people, 'parents')
        descendants = lineage_closures(people, 'children')
        for pid in people:
            assert ancestors[pid] == collect_ancestors(people, pid)
            assert descendants[pid] == collect_descendants(people, pid)

    def test_lineage_closures_on_cycle(self, make_individual, make_family):
        """Individuals reaching a cycle never count themselves."""
        people = {pid: make_individual(pid) for pid in ("I0", "I1", "I2")}
        families = [
            make_family("F0", husband="I0", children=["I1"]),
            make_family("F1", husband="I1", children=["I2"]),
            make_family("F2", husband="I2", children=["I1"]),
        ]
        result = RelationshipGraphBuilder().build(people, families)
        descendants = lineage_closures(result.individuals, 'children')
        assert descendants == {"I0": {"I1", "I2"}, "I1": {"I2"}, "I2": {"I1"}}
        ancestors = lineage_closures(result.individuals, 'parents')
        assert ancestors == {"I0": set(), "I1": {"I0", "I2"}, "I2": {"I0", "I1"}}

    def test_lineage_closures_deep_chain(self, make_individual, make_family):
        """A long single line is handled without recursion limits."""
        depth = 1500
        people = {f"I{n}": make_individual(f"I{n}") for n in range(depth)}
        families = [make_family(f"F{n}", husband=f"I{n}", children=[f"I{n + 1}"]) for n in range(depth - 1)]
        result = RelationshipGraphBuilder().build(people, families)
        descendants = lineage_closures(result.individuals, 'children')
        ancestors = lineage_closures(result.individuals, 'parents')
        assert len(descendants["I0"]) == depth - 1
        assert len(ancestors[f"I{depth - 1}"]) == depth - 1
        assert descendants[f"I{depth - 1}"] == set()
