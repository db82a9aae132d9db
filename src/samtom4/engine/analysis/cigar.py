import re
from typing import Sequence, Union

from samtom4.engine.exceptions.conversion import MalformedAlignmentException, UnsupportedCigarOperationException
from samtom4.engine.structures.alignment import GAP, CigarOperation, ExpandedAlignment

CIGAR_PATTERN = re.compile(r"(\d+)([MIDNSHP=X])")
ALIGNED_OPERATIONS = {CigarOperation.MATCH, CigarOperation.SEQUENCE_MATCH, CigarOperation.SEQUENCE_MISMATCH}
CLIP_OPERATIONS = {CigarOperation.SOFT_CLIP, CigarOperation.HARD_CLIP}
UNSUPPORTED_OPERATIONS = {CigarOperation.PADDING}

Cigar = Sequence[tuple[int, CigarOperation]]


def parse_cigar(cigar_string: str) -> list[tuple[int, CigarOperation]]:
    """For callers holding CIGAR text rather than pysam's cigartuples."""
    if cigar_string == "*":
        return []
    operations = [(int(length), CigarOperation("MIDNSHP=X".index(symbol))) for length, symbol in CIGAR_PATTERN.findall(cigar_string)]
    if "".join(f"{length}{operation.symbol}" for length, operation in operations) != cigar_string:
        raise ValueError(f"\"{cigar_string}\" is not a valid CIGAR string.")
    return operations

def format_cigar(cigar: Cigar) -> str:
    return "".join(f"{length}{CigarOperation(operation).symbol}" for length, operation in cigar) or "*"

def has_unsupported_operation(cigar: Cigar) -> bool:
    return any(operation in UNSUPPORTED_OPERATIONS for _, operation in cigar)

def split_segments(cigar: Cigar) -> list[list[tuple[int, CigarOperation]]]:
    """Splits a CIGAR into the runs of operations separated by skipped reference regions."""
    segments: list[list[tuple[int, CigarOperation]]] = [[]]
    for length, operation in cigar:
        if operation == CigarOperation.SKIP and length > 0:
            segments.append([])
            continue
        segments[-1].append((length, operation))
    return [segment for segment in segments if any(operation not in CLIP_OPERATIONS for _, operation in segment)] or [[]]


class CigarExpander:
    """
    Rebuilds the gapped query and target strings described by a CIGAR.

    Query symbols come from the stored query bases (which include soft clipped bases
    but not hard clipped ones). Target symbols come from the reference bases starting
    at `target_start` (0-based). Without reference bases the target copies the query
    for aligned columns and uses N for columns only the target has.
    """

    def __init__(self, gap: str = GAP, unknown_base: str = "N"):
        self._gap = gap
        self._unknown_base = unknown_base

    def expand(self, cigar: Cigar, query_bases: str, reference_bases: Union[str, None] = None, target_start: int = 0, query_name: Union[str, None] = None) -> ExpandedAlignment:
        query_gapped: list[str] = []
        target_gapped: list[str] = []
        query_cursor = 0
        target_cursor = target_start
        query_consumed = 0
        target_consumed = 0
        clipped_start = 0
        clipped_end = 0

        for length, operation in cigar:
            operation = CigarOperation(operation)
            if operation in UNSUPPORTED_OPERATIONS:
                raise UnsupportedCigarOperationException(operation.symbol, query_name)
            if operation in CLIP_OPERATIONS:
                if query_consumed == 0 and target_consumed == 0:
                    clipped_start += length
                else:
                    clipped_end += length
                if operation == CigarOperation.SOFT_CLIP:
                    query_cursor += length
                continue
            if clipped_end:
                raise MalformedAlignmentException(query_name, "clipping found inside the alignment")

            if operation in ALIGNED_OPERATIONS:
                query_span = self._take(query_bases, query_cursor, length, query_name)
                query_gapped.append(query_span)
                target_gapped.append(self._target_span(reference_bases, target_cursor, length, query_name, query_span))
                query_cursor += length
                target_cursor += length
                query_consumed += length
                target_consumed += length
            elif operation == CigarOperation.INSERTION:
                query_gapped.append(self._take(query_bases, query_cursor, length, query_name))
                target_gapped.append(self._gap * length)
                query_cursor += length
                query_consumed += length
            else:
                # Deletions and skips only consume the target
                query_gapped.append(self._gap * length)
                target_gapped.append(self._target_span(reference_bases, target_cursor, length, query_name))
                target_cursor += length
                target_consumed += length

        if query_cursor != len(query_bases):
            raise MalformedAlignmentException(query_name, f"CIGAR covers {query_cursor} query bases but {len(query_bases)} are stored")
        return ExpandedAlignment(
            query_gapped="".join(query_gapped),
            target_gapped="".join(target_gapped),
            query_consumed=query_consumed,
            target_consumed=target_consumed,
            query_clipped_start=clipped_start,
            query_clipped_end=clipped_end
        )

    def _take(self, bases: str, start: int, length: int, query_name: Union[str, None]) -> str:
        if start + length > len(bases):
            raise MalformedAlignmentException(query_name, f"CIGAR needs {start + length} query bases but only {len(bases)} are stored")
        return bases[start:start + length]

    def _target_span(self, reference_bases: Union[str, None], start: int, length: int, query_name: Union[str, None], query_span: Union[str, None] = None) -> str:
        if reference_bases is None:
            return query_span if query_span is not None else self._unknown_base * length
        if start + length > len(reference_bases):
            raise MalformedAlignmentException(query_name, f"alignment runs past the end of the reference ({len(reference_bases)} bases)")
        return reference_bases[start:start + length]
