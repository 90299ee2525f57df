import re
import typing

from virmut.mutations.aa_mutation import AAMutation, DEFAULT_MAX_DISPLAY_AAS
from virmut.viruses.gene import Gene, GenePosition


class MutationSet:
    """ Sorted, immutable collection with one mutation per gene position.

    Mutations at the same gene position are merged together.
    """
    def __init__(self, mutations: typing.Iterable[AAMutation] = ()):
        by_position = {}
        for mutation in mutations:
            gene_position = mutation.gene_position
            existing = by_position.get(gene_position)
            if existing is not None:
                mutation = existing.merge(mutation)
            by_position[gene_position] = mutation
        self._mutations = dict(sorted(by_position.items()))

    @classmethod
    def parse_string(cls,
                     gene: Gene,
                     text: str,
                     max_display_aas: int = DEFAULT_MAX_DISPLAY_AAS):
        """ Parse a list like 'M41L, K65R, T215FY' for one gene. """
        words = re.split(r'[\s,+]+', text.strip())
        return cls(AAMutation.parse_string(gene, word, max_display_aas)
                   for word in words
                   if word)

    def get(self, gene_position: GenePosition) -> typing.Optional[AAMutation]:
        return self._mutations.get(gene_position)

    @property
    def gene_positions(self) -> typing.List[GenePosition]:
        return list(self._mutations)

    def has_shared_aa_mutation(self,
                               mutation: AAMutation,
                               ignore_ref_or_stops=True) -> bool:
        found = self._mutations.get(mutation.gene_position)
        if found is None:
            return False
        return found.contains_shared_aa(mutation.aa_chars,
                                        ignore_ref_or_stops)

    def merge(self, other: 'MutationSet') -> 'MutationSet':
        return MutationSet(list(self) + list(other))

    def filter_by_gene(self, gene: Gene) -> 'MutationSet':
        return MutationSet(mutation
                           for mutation in self
                           if mutation.gene == gene)

    def __iter__(self):
        return iter(self._mutations.values())

    def __len__(self):
        return len(self._mutations)

    def __contains__(self, mutation):
        if not isinstance(mutation, AAMutation):
            return False
        return self._mutations.get(mutation.gene_position) == mutation

    def __eq__(self, other):
        if not isinstance(other, MutationSet):
            return NotImplemented
        return list(self) == list(other)

    def __str__(self):
        return ', '.join(str(mutation) for mutation in self)

    def __repr__(self):
        return f'MutationSet({list(self)!r})'
