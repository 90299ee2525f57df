from dataclasses import dataclass, field
import typing

if typing.TYPE_CHECKING:
    from virmut.viruses.virus import Virus


@dataclass(frozen=True, order=True)
class Gene:
    """ A viral gene in one strain, with its amino acid reference.

    Genes sort by strain, then by their order within the virus. The virus
    that built the gene travels with it, so mutations can reach the
    knowledge base without any global lookup.
    """
    strain: str
    ordinal: int
    abstract_gene: str
    reference: str = field(compare=False, repr=False)
    virus: 'Virus' = field(compare=False, repr=False)

    def __post_init__(self):
        if self.virus is None:
            raise ValueError(
                f'Gene {self.strain}{self.abstract_gene} needs a virus.')

    @property
    def name(self) -> str:
        return self.strain + self.abstract_gene

    @property
    def length(self) -> int:
        return len(self.reference)

    def get_ref_char(self, position: int) -> str:
        return self.reference[position - 1]

    def __str__(self):
        return self.name


@dataclass(frozen=True, order=True)
class GenePosition:
    gene: Gene
    position: int

    def is_drug_resistance_position(self) -> bool:
        return self in self.gene.virus.drug_resistance_positions()

    def __str__(self):
        return f'{self.gene.name}:{self.position}'
