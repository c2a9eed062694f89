"""Tests for HerdAnalyzer reports."""

from datetime import date

import numpy as np
import pytest

from pedigree_engine.herd import HerdAnalyzer
from pedigree_engine.models import AnimalSnapshot, AnimalStatus, Genetics, PedigreeEdge

from conftest import animal


@pytest.fixture
def analyzer():
    return HerdAnalyzer()


@pytest.fixture
def doe_line():
    """
    Four generations of does, each kid sired by a different buck.

        GGM -> GM -> M -> C
    """
    return AnimalSnapshot([
        animal("GGM", "female", date(2010, 1, 1)),
        animal("GM", "female", date(2012, 1, 1), mother_id="GGM"),
        animal("M", "female", date(2014, 1, 1), "BUCK1", "GM"),
        animal("C", "female", date(2016, 1, 1), "BUCK2", "M"),
        animal("BUCK2", "male", date(2012, 1, 1), status=AnimalStatus.SOLD),
    ])


def test_maternal_line_follows_mothers(analyzer, doe_line):
    tree = analyzer.maternal_line("C", doe_line)

    assert tree.root_id == "C"
    assert [(n.animal_id, n.generation) for n in tree.nodes] == [
        ("C", 0), ("M", 1), ("GM", 2), ("GGM", 3),
    ]
    assert tree.nodes[0].father_id == "BUCK2"
    assert tree.nodes[1].father_id == "BUCK1"
    assert PedigreeEdge(source="M", target="C") in tree.edges
    assert len(tree.edges) == 3


def test_maternal_line_depth(analyzer, doe_line):
    tree = analyzer.maternal_line("C", doe_line, generations=1)
    assert [n.animal_id for n in tree.nodes] == ["C", "M"]
    assert tree.edges == (PedigreeEdge(source="M", target="C"),)


def test_maternal_line_unknown_animal(analyzer, doe_line):
    tree = analyzer.maternal_line("nobody", doe_line)
    assert tree.nodes == ()
    assert tree.edges == ()


def test_maternal_line_stops_on_cycle(analyzer):
    snapshot = AnimalSnapshot([
        animal("A", "female", mother_id="B"),
        animal("B", "female", mother_id="A"),
    ])
    tree = analyzer.maternal_line("A", snapshot, generations=10)
    assert [n.animal_id for n in tree.nodes] == ["A", "B"]


def test_maternal_roots(analyzer, doe_line):
    assert analyzer.maternal_roots(doe_line) == ["GGM"]
    assert HerdAnalyzer.is_tree_root("BUCK2", doe_line)
    assert not HerdAnalyzer.is_tree_root("C", doe_line)
    assert not HerdAnalyzer.is_tree_root("nobody", doe_line)


def test_descendants_through_both_parents(analyzer, doe_line, sibling_herd):
    assert sorted(analyzer.descendants("GM", doe_line)) == ["C", "M"]
    assert analyzer.descendants("BUCK2", doe_line) == ["C"]
    assert sorted(analyzer.descendants("S", sibling_herd)) == ["X", "Y", "Z"]


def test_tree_stats(analyzer, doe_line):
    stats = analyzer.tree_stats("GM", doe_line)
    assert stats.total_ancestors == 1
    assert stats.total_descendants == 2
    assert stats.generations_back == 1
    assert stats.tree_size == 4


def test_tree_stats_unknown_animal(analyzer, doe_line):
    stats = analyzer.tree_stats("nobody", doe_line)
    assert (stats.total_ancestors, stats.total_descendants, stats.generations_back, stats.tree_size) == (0, 0, 0, 0)


def test_pedigree_insights(analyzer, sibling_herd):
    founder = HerdAnalyzer.pedigree_insights("S", sibling_herd)
    assert len(founder) == 1
    assert founder[0].startswith("No parentage information")

    assert HerdAnalyzer.pedigree_insights("X", sibling_herd) == ["Basic pedigree information available."]
    assert HerdAnalyzer.pedigree_insights("nobody", sibling_herd) == []


def test_pedigree_insights_missing_mother(analyzer, cousin_herd):
    insights = HerdAnalyzer.pedigree_insights("X1", cousin_herd)
    assert insights[0].startswith("Mother information missing")
    assert insights[1] == "Basic pedigree information available."


def test_diversity_of_uniform_herd(analyzer, sibling_herd):
    report = analyzer.genetic_diversity(sibling_herd)
    assert report.score == 50
    assert report.analysis.startswith("Moderate")
    assert len(report.recommendations) == 3


def test_diversity_of_varied_herd(analyzer):
    breeds = ["Alpine", "Boer", "Nubian", "Saanen", "Toggenburg"]
    colors = ["black", "brown", "white", "mixed", "red"]
    horns = ["polled", "horned"]
    snapshot = AnimalSnapshot([
        animal(f"A{i}", "female", breed=breeds[i],
               genetics=Genetics(coat_color=colors[i], horn_status=horns[i % 2]))
        for i in range(5)
    ])
    report = analyzer.genetic_diversity(snapshot)
    assert report.score == 90
    assert report.analysis == "Excellent genetic diversity"
    assert report.recommendations == ()


def test_diversity_penalizes_related_parents(analyzer, sibling_herd):
    snapshot = AnimalSnapshot(sibling_herd.animals + [
        animal("KID", "female", date(2020, 1, 1), "X", "Y"),
    ])
    assert HerdAnalyzer.potential_inbreeding_rate(snapshot) == pytest.approx(0.25)

    report = analyzer.genetic_diversity(snapshot)
    assert report.score == 30
    assert report.analysis.startswith("Low")
    assert any("new bloodlines" in r for r in report.recommendations)


def test_genotype_frequencies(analyzer):
    snapshot = AnimalSnapshot([
        animal("A", genetics=Genetics(horn_status="polled")),
        animal("B", genetics=Genetics(horn_status="horned")),
        animal("C", genetics=Genetics(horn_genotype="PP")),
        animal("D"),
    ])
    frequencies = analyzer.genotype_frequencies(snapshot, "horn_status")
    assert frequencies == pytest.approx({"Ph": 1 / 3, "hh": 1 / 3, "PP": 1 / 3})
    assert analyzer.heterozygosity(snapshot, "horn_status") == pytest.approx(1 / 3)
    assert analyzer.genotype_frequencies(snapshot, "wattles") == {}
    assert analyzer.genotype_frequencies(AnimalSnapshot(), "horn_status") == {}


def test_inbreeding_matrix(analyzer, sibling_herd):
    matrix = analyzer.inbreeding_matrix(["X", "S"], ["Y", "Z"], sibling_herd)
    assert matrix.shape == (2, 2)
    np.testing.assert_allclose(matrix, [[0.25, 0.125], [0.0, 0.0]])
