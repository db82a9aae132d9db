from contextlib import AbstractContextManager
from os import PathLike
import sys
from typing import TextIO, Union

from samtom4.engine.exceptions.conversion import SinkUnavailableException
from samtom4.engine.structures.alignment import OutputRecord

M4_HEADER = ["qName", "tName", "score", "percentSimilarity", "qStrand", "qStart", "qEnd", "qLength", "tStrand", "tStart", "tEnd", "tLength", "mapQV"]

def m4_fields(record: OutputRecord) -> list[str]:
    return [
        record.query_name,
        record.target_name,
        str(record.score),
        f"{record.percent_identity:g}",
        str(int(record.query_strand)),
        str(record.query_start),
        str(record.query_end),
        str(record.query_length),
        str(int(record.target_strand)),
        str(record.target_start),
        str(record.target_end),
        str(record.target_length),
        str(record.map_quality)
    ]

def format_m4_record(record: OutputRecord) -> str:
    return " ".join(m4_fields(record))


class M4Writer(AbstractContextManager):
    """Writes M4 lines to a file, or to standard output when no path is given."""

    def __init__(self, handle: Union[str, PathLike, TextIO, None] = None):
        self._handle = handle
        self._stream: Union[TextIO, None] = None
        self._owns_stream = False

    def __enter__(self):
        if self._handle is None:
            self._stream = sys.stdout
        elif isinstance(self._handle, (str, PathLike)):
            try:
                self._stream = open(self._handle, "w")
            except OSError as e:
                raise SinkUnavailableException(str(e)) from e
            self._owns_stream = True
        else:
            self._stream = self._handle
        return self

    def write_header(self):
        self._write_line(" ".join(M4_HEADER))

    def write_record(self, record: OutputRecord):
        self._write_line(format_m4_record(record))

    def _write_line(self, line: str):
        if self._stream is None:
            raise ValueError("The M4 writer has not been opened.")
        self._stream.write(line + "\n")

    def __exit__(self, exc_type, exc_value, traceback):
        if self._stream is not None:
            if self._owns_stream:
                self._stream.close()
            else:
                self._stream.flush()
        self._stream = None
        self._owns_stream = False
