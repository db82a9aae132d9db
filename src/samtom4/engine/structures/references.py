from dataclasses import dataclass, field

@dataclass(frozen=True)
class ReferenceSequence:
    short_name: str
    full_name: str
    length: int
    sequence: str = field(default="", repr=False)
