import pytest
from samtom4.engine.analysis.catalog import ReferenceCatalog, arrange_header_names
from samtom4.engine.exceptions.conversion import DuplicateReferenceNameException, ReferenceCardinalityMismatchException, UnknownReferenceException
from samtom4.engine.structures.genomics import NamedString


@pytest.fixture
def fasta_references():
    return [
        NamedString("chr1 Escherichia coli chromosome", "ACGT" * 15),
        NamedString("chr2 plasmid pA", "TTGG" * 10)
    ]

def test_short_name_resolves_to_full_name():
    catalog = ReferenceCatalog.build([NamedString("chr1_full", "A" * 1000)], ["chr1"])
    assert catalog.resolve("chr1") == "chr1_full"
    assert catalog.index_of("chr1_full") == 0
    assert catalog.reference_for("chr1_full").length == 1000

def test_header_names_follow_fasta_order(fasta_references):
    assert arrange_header_names(fasta_references, ["chr2", "chr1"]) == ["chr1", "chr2"]

def test_unnamed_references_pair_by_position():
    sequences = [NamedString("alpha", "A"), NamedString("chr2", "C"), NamedString("gamma", "G")]
    assert arrange_header_names(sequences, ["x", "y", "chr2"]) == ["x", "chr2", "y"]

def test_catalog_reorders_references(fasta_references):
    catalog = ReferenceCatalog.build(fasta_references, ["chr2", "chr1"])
    assert [reference.short_name for reference in catalog.references] == ["chr1", "chr2"]
    assert catalog.resolve("chr2") == "chr2 plasmid pA"
    assert catalog.index_of("chr2 plasmid pA") == 1
    assert catalog.reference_for("chr1 Escherichia coli chromosome").length == 60

def test_short_name_mode_keeps_header_names(fasta_references):
    catalog = ReferenceCatalog.build(fasta_references, ["chr2", "chr1"], use_short_names=True)
    assert catalog.resolve("chr1") == "chr1"
    assert catalog.index_of("chr2") == 1
    for reference in catalog.references:
        assert reference.full_name == reference.short_name

def test_duplicate_short_names_are_fatal():
    sequences = [NamedString("a", "ACGT"), NamedString("b", "ACGT")]
    with pytest.raises(DuplicateReferenceNameException):
        ReferenceCatalog.build(sequences, ["chr1", "chr1"])

def test_cardinality_mismatch_is_fatal(fasta_references):
    with pytest.raises(ReferenceCardinalityMismatchException):
        ReferenceCatalog.build(fasta_references, ["chr1"])

@pytest.mark.parametrize("use_short_names", [False, True])
def test_unknown_reference_cannot_resolve(fasta_references, use_short_names):
    catalog = ReferenceCatalog.build(fasta_references, ["chr1", "chr2"], use_short_names=use_short_names)
    with pytest.raises(UnknownReferenceException):
        catalog.resolve("chr3")
    with pytest.raises(UnknownReferenceException):
        catalog.index_of("chr3")

def test_duplicate_full_names_are_fatal():
    sequences = [NamedString("chr1 copy", "ACGT"), NamedString("chr1 copy", "TTGG")]
    with pytest.raises(DuplicateReferenceNameException):
        ReferenceCatalog.build(sequences, ["chr1a", "chr1b"])
