from Bio.Align import Alignment

from samtom4.engine.structures.alignment import GAP, AlignmentStats


class StatsComputer:
    def __init__(self, gap: str = GAP):
        self._gap = gap

    def compute(self, query_gapped: str, target_gapped: str) -> AlignmentStats:
        # Both strings are built column for column by CigarExpander, so they are the same length
        if len(query_gapped) == 0:
            return AlignmentStats(matches=0, mismatches=0, insertions=0, deletions=0)
        # Target first: Biopython counts gaps in the first row as insertions
        printed_rows = [
            target_gapped.upper().replace(self._gap, "-").encode(),
            query_gapped.upper().replace(self._gap, "-").encode()
        ]
        alignment = Alignment(*Alignment.parse_printed_alignment(printed_rows))
        counts = alignment.counts()
        return AlignmentStats(
            matches=counts.identities,
            mismatches=counts.mismatches,
            insertions=counts.insertions,
            deletions=counts.deletions
        )
