from dataclasses import dataclass
import typing

from virmut.mutations.aa_mutation import normalize_aa_chars


@dataclass(frozen=True)
class MutationType:
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class MutationTypePair:
    """ Assigns a mutation type to some amino acids at a gene position. """
    abstract_gene: str
    drug_class: typing.Any
    mutation_type: MutationType
    position: int
    aas: str

    def is_mutation_matched(self, mutation) -> bool:
        return (mutation.abstract_gene == self.abstract_gene and
                mutation.position == self.position and
                mutation.contains_shared_aa(normalize_aa_chars(self.aas),
                                            ignore_ref_or_stops=True))
