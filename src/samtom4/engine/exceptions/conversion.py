from typing import Union


class ConversionException(Exception):
    pass

class FatalConfigurationException(ConversionException):
    pass

class DuplicateReferenceNameException(FatalConfigurationException):
    def __init__(self, short_name: str):
        self.short_name = short_name
        super().__init__(f"Found more than one reference named \"{short_name}\".")

class ReferenceCardinalityMismatchException(FatalConfigurationException):
    def __init__(self, sequence_count: int, header_count: int):
        self.sequence_count = sequence_count
        self.header_count = header_count
        super().__init__(f"The reference FASTA holds {sequence_count} sequence(s) but the alignment header lists {header_count}.")

class UnknownReferenceException(ConversionException):
    def __init__(self, reference_name: str):
        self.reference_name = reference_name
        super().__init__(f"Could not find \"{reference_name}\" in the reference repository.")

class UnsupportedCigarOperationException(ConversionException):
    def __init__(self, operation_symbol: str, query_name: Union[str, None] = None):
        self.operation_symbol = operation_symbol
        self.query_name = query_name
        message = f"Could not process alignment with '{operation_symbol}' in its CIGAR string"
        if query_name is not None:
            message += f" (query \"{query_name}\")"
        super().__init__(message + ".")

class MalformedAlignmentException(ConversionException):
    def __init__(self, query_name: Union[str, None], reason: str):
        self.query_name = query_name
        super().__init__(f"Malformed alignment for query \"{query_name}\": {reason}")

class InputUnavailableException(ConversionException):
    def __init__(self, input_path: str, reason: str):
        self.input_path = input_path
        super().__init__(f"Could not open \"{input_path}\": {reason}")

class SinkUnavailableException(ConversionException):
    def __init__(self, reason: str):
        super().__init__(f"Could not write the output record: {reason}")
