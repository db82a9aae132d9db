from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum
import logging
from typing import Iterable, Protocol, Union

from samtom4.engine.analysis.catalog import ReferenceCatalog
from samtom4.engine.analysis.cigar import CigarExpander, format_cigar, has_unsupported_operation, split_segments
from samtom4.engine.analysis.records import RecordBuilder
from samtom4.engine.analysis.stats import StatsComputer
from samtom4.engine.exceptions.conversion import ConversionException, MalformedAlignmentException, SinkUnavailableException, UnknownReferenceException, UnsupportedCigarOperationException
from samtom4.engine.structures.alignment import UNMAPPED_REFERENCE, CigarOperation, OutputRecord, RawAlignmentRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionOptions:
    use_short_reference_names: bool = False
    print_header: bool = False

class SkipReason(Enum):
    UNMAPPED = "unmapped"
    UNSUPPORTED_OPERATION = "unsupported CIGAR operation"
    MULTIPLE_SEGMENTS = "multiple segments"
    MALFORMED = "malformed alignment"

@dataclass(frozen=True)
class Accepted:
    record: OutputRecord

@dataclass(frozen=True)
class Skipped:
    reason: SkipReason
    message: str

@dataclass(frozen=True)
class Fatal:
    error: ConversionException

ConversionResult = Union[Accepted, Skipped, Fatal]

class RecordSink(Protocol):
    def write_header(self) -> None: ...

    def write_record(self, record: OutputRecord) -> None: ...

@dataclass(frozen=True)
class ConversionSummary:
    accepted: int
    skipped: dict[SkipReason, int]

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())


class ConversionPipeline:
    def __init__(self, catalog: ReferenceCatalog, options: ConversionOptions = ConversionOptions()):
        self._catalog = catalog
        self._options = options
        self._expander = CigarExpander()
        self._stats_computer = StatsComputer()
        self._record_builder = RecordBuilder()

    @property
    def options(self) -> ConversionOptions:
        return self._options

    def convert(self, raw_record: RawAlignmentRecord) -> ConversionResult:
        if raw_record.reference_name == UNMAPPED_REFERENCE:
            return Skipped(SkipReason.UNMAPPED, f"Query \"{raw_record.query_name}\" is unmapped.")

        if has_unsupported_operation(raw_record.cigar):
            return Skipped(SkipReason.UNSUPPORTED_OPERATION, str(UnsupportedCigarOperationException(CigarOperation.PADDING.symbol, raw_record.query_name)))

        try:
            target_name = self._catalog.resolve(raw_record.reference_name)
        except UnknownReferenceException as e:
            return Fatal(e)
        raw_record = replace(raw_record, reference_name=target_name)
        reference = self._catalog.reference_for(target_name)

        if len(split_segments(raw_record.cigar)) > 1:
            return Skipped(SkipReason.MULTIPLE_SEGMENTS, f"Ignored alignment of \"{raw_record.query_name}\" ({format_cigar(raw_record.cigar)}) which has multiple segments.")

        if raw_record.query_sequence is None:
            return Skipped(SkipReason.MALFORMED, str(MalformedAlignmentException(raw_record.query_name, "no query bases are stored")))
        try:
            expanded = self._expander.expand(raw_record.cigar, raw_record.query_sequence, reference.sequence, raw_record.position - 1, raw_record.query_name)
            stats = self._stats_computer.compute(expanded.query_gapped, expanded.target_gapped)
            return Accepted(self._record_builder.build(raw_record, expanded, stats, reference.length))
        except MalformedAlignmentException as e:
            return Skipped(SkipReason.MALFORMED, str(e))

    def run(self, raw_records: Iterable[RawAlignmentRecord], sink: RecordSink) -> ConversionSummary:
        accepted = 0
        skipped: Counter = Counter()
        if self._options.print_header:
            self._emit(sink.write_header)
        for raw_record in raw_records:
            result = self.convert(raw_record)
            if isinstance(result, Accepted):
                self._emit(sink.write_record, result.record)
                accepted += 1
            elif isinstance(result, Skipped):
                skipped[result.reason] += 1
                if result.reason == SkipReason.UNMAPPED:
                    logger.debug(result.message)
                else:
                    logger.warning(result.message)
            else:
                raise result.error
        logger.info("Converted %d alignment(s), skipped %d.", accepted, sum(skipped.values()))
        return ConversionSummary(accepted, dict(skipped))

    def _emit(self, write, *args):
        try:
            write(*args)
        except OSError as e:
            raise SinkUnavailableException(str(e)) from e
