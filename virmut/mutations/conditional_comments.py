"""
Comments that a knowledge base attaches to mutations at a gene position.

Each comment has a condition: a gene position and the amino acids that
trigger it. A mutation with any of those amino acids gets the comment, bound
to the part of the mutation that matched.
"""
from dataclasses import dataclass
import typing

from virmut.mutations.aa_mutation import AAMutation


@dataclass(frozen=True)
class ConditionalComment:
    name: str
    drug_class: typing.Any
    abstract_gene: str
    position: int
    aas: str
    text: str

    def is_mutation_matched(self, mutation: AAMutation) -> bool:
        return (mutation.abstract_gene == self.abstract_gene and
                mutation.position == self.position and
                mutation.contains_shared_aa(self.aas,
                                            ignore_ref_or_stops=False))


@dataclass(frozen=True)
class BoundComment:
    """ A comment, with the amino acids of the mutation that triggered it. """
    comment: ConditionalComment
    mutation: AAMutation

    @property
    def name(self) -> str:
        return self.comment.name

    @property
    def drug_class(self):
        return self.comment.drug_class

    @property
    def text(self) -> str:
        return self.comment.text


class ConditionalComments:
    def __init__(self, comments: typing.Iterable[ConditionalComment] = ()):
        self._comments = list(comments)

    def __iter__(self):
        return iter(self._comments)

    def __len__(self):
        return len(self._comments)

    def get_comments(self, mutation: AAMutation) -> typing.List[BoundComment]:
        """ Find the comments that match a mutation, in declared order. """
        return [BoundComment(comment, mutation.intersect(comment.aas))
                for comment in self._comments
                if comment.is_mutation_matched(mutation)]
