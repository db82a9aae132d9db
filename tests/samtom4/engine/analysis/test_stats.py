import pytest
from samtom4.engine.analysis.stats import StatsComputer


@pytest.fixture
def stats_computer():
    return StatsComputer()

def test_counts_each_column_kind(stats_computer: StatsComputer):
    stats = stats_computer.compute("GGTTCT--AGA", "GGTTC-CAAGG")
    assert stats.matches == 7
    assert stats.mismatches == 1
    assert stats.insertions == 1
    assert stats.deletions == 2
    assert stats.aligned_length == 11
    assert stats.percent_identity == pytest.approx(7 / 11 * 100)

def test_empty_alignment_has_zero_identity(stats_computer: StatsComputer):
    stats = stats_computer.compute("", "")
    assert stats.aligned_length == 0
    assert stats.percent_identity == 0

def test_identical_sequences_are_fully_identical(stats_computer: StatsComputer):
    assert stats_computer.compute("ACGT", "ACGT").percent_identity == 100

def test_soft_masked_reference_still_matches(stats_computer: StatsComputer):
    assert stats_computer.compute("ACGT", "acgT").matches == 4

@pytest.mark.parametrize("query_gapped,target_gapped", [
    ("A-C-G", "AT-TG"),
    ("----", "ACGT"),
    ("ACGT", "----"),
    ("AAAA", "CCCC"),
])
def test_identity_is_a_percentage(stats_computer: StatsComputer, query_gapped, target_gapped):
    stats = stats_computer.compute(query_gapped, target_gapped)
    assert stats.aligned_length == len(query_gapped)
    assert 0 <= stats.percent_identity <= 100

def test_target_gaps_are_insertions_and_query_gaps_are_deletions(stats_computer: StatsComputer):
    stats = stats_computer.compute("ACGT----", "----ACGT")
    assert stats.insertions == 4
    assert stats.deletions == 4
    assert stats.matches == 0
