from dataclasses import dataclass
import typing

from virmut import settings


@dataclass(frozen=True)
class AminoAcidPercent:
    abstract_gene: str
    position: int
    aa: str
    percent: float  # fraction of sequences, 0-1
    is_unusual: bool


class AminoAcidPercents:
    """ Prevalence of each amino acid at each position for one strain.

    At a position with a table, amino acids missing from it were never
    observed, so they count as unusual with a prevalence of zero. A position
    without a table has no data, so nothing there is unusual.
    """
    def __init__(self,
                 percents: typing.Mapping[typing.Tuple[str, int],
                                          typing.Mapping[str, float]],
                 unusual_threshold: float = settings.UNUSUAL_PERCENT_THRESHOLD):
        """ Initialize.

        :param percents: {(abstract_gene, position): {aa: fraction}}
        :param unusual_threshold: amino acids with a lower fraction than this
            are unusual
        """
        self.unusual_threshold = unusual_threshold
        self._percents = {
            key: {aa: AminoAcidPercent(key[0],
                                       key[1],
                                       aa,
                                       fraction,
                                       fraction < unusual_threshold)
                  for aa, fraction in position_percents.items()}
            for key, position_percents in percents.items()}

    def get(self, gene, position: int, aa: str) -> typing.Optional[AminoAcidPercent]:
        position_percents = self._percents.get((gene.abstract_gene, position),
                                               {})
        return position_percents.get(aa)

    def contains_unusual_aa(self, gene, position: int, aas: str) -> bool:
        position_percents = self._percents.get((gene.abstract_gene, position))
        if position_percents is None:
            return False
        for aa in aas:
            aa_percent = position_percents.get(aa)
            if aa_percent is None or aa_percent.is_unusual:
                return True
        return False

    def get_highest_aa_percent_value(self, gene, position: int, aas: str) -> float:
        highest = 0.0
        for aa in aas:
            aa_percent = self.get(gene, position, aa)
            if aa_percent is not None:
                highest = max(highest, aa_percent.percent)
        return highest
