from contextlib import AbstractContextManager
from io import TextIOWrapper
from os import PathLike
from typing import Any, Generator, Iterator, Union

import pysam
from Bio import SeqIO

from samtom4.engine.exceptions.conversion import InputUnavailableException
from samtom4.engine.structures.alignment import UNMAPPED_REFERENCE, CigarOperation, RawAlignmentRecord
from samtom4.engine.structures.genomics import NamedString

SCORE_TAG = "AS"
ORIGINAL_QUERY_LENGTH_TAG = "XQ"

def read_fasta(handle: Union[str, PathLike, TextIOWrapper]) -> Generator[NamedString, Any, None]:
    try:
        fasta_sequences = SeqIO.parse(handle, format="fasta")
    except OSError as e:
        raise InputUnavailableException(str(handle), str(e)) from e
    for fasta_sequence in fasta_sequences:
        # description holds the whole title line, not just the first word
        yield NamedString(fasta_sequence.description, str(fasta_sequence.seq))

def to_raw_alignment_record(segment: pysam.AlignedSegment) -> RawAlignmentRecord:
    reference_name = segment.reference_name
    if segment.is_unmapped or reference_name is None:
        reference_name = UNMAPPED_REFERENCE
    original_query_length = segment.get_tag(ORIGINAL_QUERY_LENGTH_TAG) if segment.has_tag(ORIGINAL_QUERY_LENGTH_TAG) else None
    return RawAlignmentRecord(
        query_name=segment.query_name,
        reference_name=reference_name,
        position=segment.reference_start + 1,
        reverse=segment.is_reverse,
        cigar=tuple((length, CigarOperation(operation)) for operation, length in (segment.cigartuples or [])),
        query_sequence=segment.query_sequence,
        score=int(segment.get_tag(SCORE_TAG)) if segment.has_tag(SCORE_TAG) else None,
        map_quality=segment.mapping_quality,
        original_query_length=int(original_query_length) if original_query_length else None
    )


class AlignmentSource(AbstractContextManager):
    """Reads the reference names and alignments of a SAM or BAM file, in file order."""

    def __init__(self, alignment_path: Union[str, PathLike]):
        self._alignment_path = alignment_path
        self._alignment_file: Union[pysam.AlignmentFile, None] = None

    def __enter__(self):
        try:
            self._alignment_file = pysam.AlignmentFile(str(self._alignment_path), "r", check_sq=False)
        except (OSError, ValueError) as e:
            raise InputUnavailableException(str(self._alignment_path), str(e)) from e
        return self

    @property
    def header_names(self) -> tuple[str, ...]:
        if self._alignment_file is None:
            raise ValueError("The alignment file has not been opened.")
        return tuple(self._alignment_file.references)

    def __iter__(self) -> Iterator[RawAlignmentRecord]:
        if self._alignment_file is None:
            raise ValueError("The alignment file has not been opened.")
        for segment in self._alignment_file.fetch(until_eof=True):
            yield to_raw_alignment_record(segment)

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        if self._alignment_file is not None:
            self._alignment_file.close()
            self._alignment_file = None
