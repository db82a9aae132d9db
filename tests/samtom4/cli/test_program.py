import tempfile
from os import path

from samtom4.cli import program

EXPECTED_M4_LINES = [
    "read1 chr1 Escherichia coli chromosome -50 100 0 0 10 30 0 0 10 60 60",
    "read2 chr1 Escherichia coli chromosome -20 63.6364 1 2 11 11 0 10 20 60 60",
    "read6 chr2 plasmid pA 0 100 0 5 9 9 0 4 8 40 30",
]

def run_program(*extra_args: str):
    with tempfile.TemporaryDirectory() as temp_dir:
        output_path = path.join(temp_dir, "out.m4")
        exit_code = program.run(["tests/resources/alignments.sam", "tests/resources/references.fasta", output_path, *extra_args])
        with open(output_path) as m4_handle:
            return exit_code, m4_handle.read().splitlines()

def test_sam_converts_to_m4():
    exit_code, lines = run_program()
    assert exit_code == 0
    assert lines == EXPECTED_M4_LINES

def test_header_is_printed_first():
    exit_code, lines = run_program("--header")
    assert exit_code == 0
    assert lines[0].startswith("qName tName score")
    assert lines[1:] == EXPECTED_M4_LINES

def test_short_reference_names_are_kept():
    exit_code, lines = run_program("--use-short-ref-name")
    assert exit_code == 0
    assert [line.split(" ")[1] for line in lines] == ["chr1", "chr1", "chr2"]

def test_skipped_records_are_warned_about(caplog):
    run_program()
    warnings = [log_record.getMessage() for log_record in caplog.records if log_record.levelname == "WARNING"]
    assert any("read4" in warning for warning in warnings)
    assert any("read5" in warning for warning in warnings)
    assert not any("read3" in warning for warning in warnings)

def test_mismatched_reference_sets_fail():
    with tempfile.TemporaryDirectory() as temp_dir:
        fasta_path = path.join(temp_dir, "one.fasta")
        with open(fasta_path, "w") as fasta_handle:
            fasta_handle.write(">chr1 only\nACGT\n")
        exit_code = program.run(["tests/resources/alignments.sam", fasta_path, path.join(temp_dir, "out.m4")])
        assert exit_code == 1

def test_missing_reference_fasta_fails(caplog):
    with tempfile.TemporaryDirectory() as temp_dir:
        exit_code = program.run(["tests/resources/alignments.sam", path.join(temp_dir, "missing.fasta"), path.join(temp_dir, "out.m4")])
    assert exit_code == 1
    assert any(log_record.levelname == "ERROR" and "missing.fasta" in log_record.getMessage() for log_record in caplog.records)

def test_missing_alignment_file_fails(caplog):
    with tempfile.TemporaryDirectory() as temp_dir:
        exit_code = program.run([path.join(temp_dir, "missing.sam"), "tests/resources/references.fasta", path.join(temp_dir, "out.m4")])
    assert exit_code == 1
    assert any(log_record.levelname == "ERROR" and "missing.sam" in log_record.getMessage() for log_record in caplog.records)
