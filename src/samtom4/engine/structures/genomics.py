from dataclasses import dataclass

@dataclass(frozen=True)
class NamedString:
    name: str
    sequence: str

    @property
    def short_name(self) -> str:
        # FASTA titles are shortened to their first word by aligners writing SAM headers
        tokens = self.name.split()
        return tokens[0] if tokens else self.name

    def __len__(self):
        return len(self.sequence)
