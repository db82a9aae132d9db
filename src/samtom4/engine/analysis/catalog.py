import logging
from types import MappingProxyType
from typing import Mapping, Sequence, Union

from samtom4.engine.exceptions.conversion import DuplicateReferenceNameException, ReferenceCardinalityMismatchException, UnknownReferenceException
from samtom4.engine.structures.genomics import NamedString
from samtom4.engine.structures.references import ReferenceSequence

logger = logging.getLogger(__name__)


def arrange_header_names(sequences: Sequence[NamedString], header_names: Sequence[str]) -> list[str]:
    """
    Orders the alignment header's reference names the same way as the sequence source.

    A header name is paired with the sequence whose title (or the first word of it)
    is the same. Sequences without such a name are paired, by position, with the
    header names left over once every named pairing is made.
    """
    remaining = list(header_names)
    arranged: list[Union[str, None]] = []
    for sequence in sequences:
        if sequence.short_name in remaining:
            arranged.append(sequence.short_name)
            remaining.remove(sequence.short_name)
        elif sequence.name in remaining:
            arranged.append(sequence.name)
            remaining.remove(sequence.name)
        else:
            arranged.append(None)
    leftovers = iter(remaining)
    return [name if name is not None else next(leftovers) for name in arranged]


class ReferenceCatalog:
    def __init__(self, references: Sequence[ReferenceSequence], short_to_full: Mapping[str, str], use_short_names: bool = False):
        self._references = tuple(references)
        self._short_to_full = MappingProxyType(dict(short_to_full))
        self._name_to_index = MappingProxyType({reference.full_name: index for index, reference in enumerate(self._references)})
        self._use_short_names = use_short_names

    @classmethod
    def build(cls, sequences: Sequence[NamedString], header_names: Sequence[str], use_short_names: bool = False) -> "ReferenceCatalog":
        if len(sequences) != len(header_names):
            raise ReferenceCardinalityMismatchException(len(sequences), len(header_names))
        references: list[ReferenceSequence] = []
        short_to_full: dict[str, str] = {}
        full_names: set[str] = set()
        for sequence, short_name in zip(sequences, arrange_header_names(sequences, header_names)):
            if short_name in short_to_full:
                raise DuplicateReferenceNameException(short_name)
            full_name = short_name if use_short_names else sequence.name
            if full_name in full_names:
                raise DuplicateReferenceNameException(full_name)
            full_names.add(full_name)
            short_to_full[short_name] = full_name
            references.append(ReferenceSequence(short_name, full_name, len(sequence), sequence.sequence))
        logger.debug("Built reference catalog with %d reference(s).", len(references))
        return cls(references, short_to_full if not use_short_names else {}, use_short_names)

    @property
    def references(self) -> tuple[ReferenceSequence, ...]:
        return self._references

    @property
    def use_short_names(self) -> bool:
        return self._use_short_names

    def resolve(self, short_name: str) -> str:
        if self._use_short_names:
            if short_name not in self._name_to_index:
                raise UnknownReferenceException(short_name)
            return short_name
        if short_name not in self._short_to_full:
            raise UnknownReferenceException(short_name)
        return self._short_to_full[short_name]

    def index_of(self, name: str) -> int:
        if name not in self._name_to_index:
            raise UnknownReferenceException(name)
        return self._name_to_index[name]

    def reference_for(self, name: str) -> ReferenceSequence:
        return self._references[self.index_of(name)]

    def __len__(self):
        return len(self._references)
