from samtom4.engine.exceptions.conversion import MalformedAlignmentException
from samtom4.engine.structures.alignment import AlignmentStats, ExpandedAlignment, OutputRecord, RawAlignmentRecord, Strand


class RecordBuilder:
    """
    Assembles an M4 record from a SAM alignment.

    The target is always reported on the forward strand. A reverse complemented SAM
    record flags the query as reverse, and its query coordinates stay in the
    orientation SAM stores the query in (the reverse complement).
    """

    def build(self, raw_record: RawAlignmentRecord, expanded: ExpandedAlignment, stats: AlignmentStats, reference_length: int) -> OutputRecord:
        query_start = expanded.query_clipped_start
        query_end = query_start + expanded.query_consumed
        query_length = query_end + expanded.query_clipped_end
        if raw_record.original_query_length:
            if raw_record.original_query_length < query_end:
                raise MalformedAlignmentException(raw_record.query_name, f"original query length {raw_record.original_query_length} ends before the aligned query end {query_end}")
            # Lets the original query extent be rebuilt from the M4 record
            query_length = raw_record.original_query_length

        target_start = raw_record.position - 1
        target_end = target_start + expanded.target_consumed

        return OutputRecord(
            query_name=raw_record.query_name,
            target_name=raw_record.reference_name,
            score=raw_record.score if raw_record.score is not None else 0,
            percent_identity=stats.percent_identity,
            query_strand=Strand.REVERSE if raw_record.reverse else Strand.FORWARD,
            query_start=query_start,
            query_end=query_end,
            query_length=query_length,
            target_strand=Strand.FORWARD,
            target_start=target_start,
            target_end=target_end,
            target_length=reference_length,
            map_quality=raw_record.map_quality if raw_record.map_quality is not None else 255
        )
