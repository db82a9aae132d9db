from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence, Union

UNMAPPED_REFERENCE = "*"
GAP = "-"

class CigarOperation(IntEnum):
    # Same numeric codes as BAM and pysam's cigartuples
    MATCH = 0
    INSERTION = 1
    DELETION = 2
    SKIP = 3
    SOFT_CLIP = 4
    HARD_CLIP = 5
    PADDING = 6
    SEQUENCE_MATCH = 7
    SEQUENCE_MISMATCH = 8

    @property
    def symbol(self) -> str:
        return "MIDNSHP=X"[self.value]

class Strand(IntEnum):
    FORWARD = 0
    REVERSE = 1

@dataclass(frozen=True)
class RawAlignmentRecord:
    query_name: str
    reference_name: str
    position: int # 1-based leftmost reference position
    reverse: bool
    cigar: Sequence[tuple[int, CigarOperation]]
    query_sequence: Union[str, None]
    score: Union[int, None] = None
    map_quality: Union[int, None] = None
    original_query_length: Union[int, None] = None

@dataclass(frozen=True)
class ExpandedAlignment:
    query_gapped: str
    target_gapped: str
    query_consumed: int
    target_consumed: int
    query_clipped_start: int = 0
    query_clipped_end: int = 0

@dataclass(frozen=True)
class AlignmentStats:
    matches: int
    mismatches: int
    insertions: int
    deletions: int

    @property
    def aligned_length(self) -> int:
        return self.matches + self.mismatches + self.insertions + self.deletions

    @property
    def percent_identity(self) -> float:
        if self.aligned_length == 0:
            return 0.0
        return self.matches / self.aligned_length * 100

@dataclass(frozen=True)
class OutputRecord:
    query_name: str
    target_name: str
    score: int
    percent_identity: float
    query_strand: Strand
    query_start: int
    query_end: int
    query_length: int
    target_strand: Strand
    target_start: int
    target_end: int
    target_length: int
    map_quality: int
