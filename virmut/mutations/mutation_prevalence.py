from dataclasses import dataclass


@dataclass(frozen=True)
class MutationPrevalence:
    """ How often an amino acid was seen in naive and treated patients. """
    abstract_gene: str
    position: int
    aa: str
    subtype: str
    total_naive: int
    freq_naive: int
    total_treated: int
    freq_treated: int

    @property
    def percentage_naive(self) -> float:
        if not self.total_naive:
            return 0.0
        return 100 * self.freq_naive / self.total_naive

    @property
    def percentage_treated(self) -> float:
        if not self.total_treated:
            return 0.0
        return 100 * self.freq_treated / self.total_treated
