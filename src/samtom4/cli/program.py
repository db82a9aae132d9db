import argparse
import logging
import sys
from typing import Sequence, Union

from samtom4.engine.analysis.catalog import ReferenceCatalog
from samtom4.engine.analysis.pipeline import ConversionOptions, ConversionPipeline
from samtom4.engine.exceptions.conversion import ConversionException
from samtom4.engine.reading import AlignmentSource, read_fasta
from samtom4.engine.writing import M4Writer

logger = logging.getLogger("samtom4")

root_parser = argparse.ArgumentParser(
    prog="samtom4",
    description="Converts a SAM file generated by blasr to M4 format."
)
root_parser.add_argument(
    "sam",
    help="Input SAM (or BAM) file, which is produced by blasr."
)
root_parser.add_argument(
    "reference",
    help="Reference FASTA used to generate the SAM file."
)
root_parser.add_argument(
    "out",
    nargs="?",
    default=None,
    help="Output in blasr M4 format. Written to standard output if not provided."
)
root_parser.add_argument(
    "--header",
    action="store_true",
    dest="print_header",
    required=False,
    default=False,
    help="Print M4 header."
)
root_parser.add_argument(
    "--use-short-ref-name", "-useShortRefName",
    action="store_true",
    dest="use_short_reference_names",
    required=False,
    default=False,
    help="Use abbreviated reference names obtained from the SAM file instead of using full names from the reference FASTA."
)
root_parser.add_argument(
    "--verbose", "-v",
    action="store_true",
    dest="verbose",
    required=False,
    default=False,
    help="Report progress and every skipped alignment."
)
root_parser.add_argument(
    "--quiet", "-q",
    action="store_true",
    dest="quiet",
    required=False,
    default=False,
    help="Only report errors."
)

def configure_logging(args):
    log_level = logging.WARNING
    if args.verbose:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s", stream=sys.stderr)

def convert(args) -> int:
    options = ConversionOptions(
        use_short_reference_names=args.use_short_reference_names,
        print_header=args.print_header
    )
    try:
        references = list(read_fasta(args.reference))
        with AlignmentSource(args.sam) as alignment_source:
            catalog = ReferenceCatalog.build(references, alignment_source.header_names, options.use_short_reference_names)
            pipeline = ConversionPipeline(catalog, options)
            with M4Writer(args.out) as writer:
                pipeline.run(alignment_source, writer)
    except ConversionException as e:
        logger.error(str(e))
        return 1
    return 0

def run(argv: Union[Sequence[str], None] = None) -> int:
    args = root_parser.parse_args(argv)
    configure_logging(args)
    return convert(args)

def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
