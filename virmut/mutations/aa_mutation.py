"""
An amino acid mutation observed at one position of a viral gene.

#building mutations:
gene = virus.get_gene('HIV1RT')
mutation = AAMutation(gene, 41, 'L')
mixture = AAMutation.parse_string(gene, 'T215FY')

#classifying them against the virus's catalogs:
mutation.is_drm             # True
mutation.drm_drug_class.name  # 'NRTI'
mutation.types              # (MutationType('NRTI'),)

#formatting them:
mutation.human_format       # 'M41L'
mutation.asi_format         # 'M41L'
mutation.hivdb_format       # '41L'

Amino acids are single characters. Insertions are stored as '_', deletions as
'-' and stop codons as '*'. The aliases '#'/'i', '~'/'d' and 'Z'/'.' are
accepted on input and replaced. Every classification result is calculated the
first time it's asked for, and then kept for the life of the mutation.
"""
from functools import cached_property, total_ordering
import re
import typing

from virmut import settings
from virmut.viruses.gene import Gene, GenePosition

DEFAULT_MAX_DISPLAY_AAS = settings.DEFAULT_MAX_DISPLAY_AAS
AA_ALIASES = {'#': '_', 'i': '_',
              '~': '-', 'd': '-',
              'Z': '*', '.': '*'}
MUTATION_PATTERN = re.compile(
    r'^\s*(?P<ref>[A-Z]?)(?P<position>\d+)'
    r'(?P<aas>Insertion|Deletion|[A-Z_*#~.id-]+)\s*$')


class MutationError(ValueError):
    pass


class InvalidPositionError(MutationError):
    pass


class MismatchedPositionError(MutationError):
    pass


def normalize_aa_chars(aa_chars: typing.Iterable[str]) -> typing.FrozenSet[str]:
    """ Replace insertion, deletion, and stop codon aliases.

    >>> sorted(normalize_aa_chars('#Ad'))
    ['-', 'A', '_']
    """
    return frozenset(AA_ALIASES.get(aa, aa) for aa in aa_chars)


@total_ordering
class AAMutation:
    def __init__(self,
                 gene: Gene,
                 position: int,
                 aa_chars: typing.Iterable[str],
                 max_display_aas: int = DEFAULT_MAX_DISPLAY_AAS):
        if position > gene.length:
            raise InvalidPositionError(
                f'Position {position} is out of bounds for {gene.name}, '
                f'which has {gene.length} amino acids.')
        if position < 1:
            raise InvalidPositionError(
                f'Position {position} is out of bounds for {gene.name}, '
                f'positions start at 1.')
        normalized = normalize_aa_chars(aa_chars)
        if not normalized:
            raise MutationError(
                f'No amino acids given at {gene.name}:{position}.')
        self._gene = gene
        self._position = position
        self._aa_chars = normalized
        self._aas = ''.join(sorted(normalized))
        self._max_display_aas = max_display_aas

    @classmethod
    def parse_string(cls,
                     gene: Gene,
                     text: str,
                     max_display_aas: int = DEFAULT_MAX_DISPLAY_AAS):
        """ Parse text like M41L, 215FY, 69i, or N68Insertion.

        A leading reference amino acid is optional and ignored, because the
        gene already knows its reference.
        """
        match = MUTATION_PATTERN.match(text)
        if match is None:
            raise MutationError(f'Invalid mutation text: {text!r}.')
        aas = match.group('aas')
        if aas == 'Insertion':
            aas = '_'
        elif aas == 'Deletion':
            aas = '-'
        return cls(gene, int(match.group('position')), aas, max_display_aas)

    @property
    def gene(self) -> Gene:
        return self._gene

    @property
    def position(self) -> int:
        return self._position

    @property
    def aa_chars(self) -> typing.FrozenSet[str]:
        return self._aa_chars

    @property
    def aas(self) -> str:
        """ All the amino acids, sorted, without the display limit. """
        return self._aas

    @property
    def max_display_aas(self) -> int:
        return self._max_display_aas

    @property
    def strain(self) -> str:
        return self._gene.strain

    @property
    def abstract_gene(self) -> str:
        return self._gene.abstract_gene

    @property
    def gene_position(self) -> GenePosition:
        return GenePosition(self._gene, self._position)

    # Set algebra

    def _find_other_aa_chars(self, other):
        if other is None or isinstance(other, AAMutation):
            if (other is None or
                    other.gene != self._gene or
                    other.position != self._position):
                raise MismatchedPositionError(
                    f'The other mutation must be at this position: '
                    f'{self._position} ({self._gene.name})')
            return other.aa_chars
        return normalize_aa_chars(other)

    def _build(self, aa_chars):
        if not aa_chars:
            return None
        return AAMutation(self._gene,
                          self._position,
                          aa_chars,
                          self._max_display_aas)

    def merge(self, other) -> 'AAMutation':
        """ Combine amino acids from another mutation or a collection. """
        return self._build(self._aa_chars | self._find_other_aa_chars(other))

    def subtract(self, other) -> typing.Optional['AAMutation']:
        """ Remove amino acids, or return None if none are left. """
        return self._build(self._aa_chars - self._find_other_aa_chars(other))

    def intersect(self, other) -> typing.Optional['AAMutation']:
        """ Keep shared amino acids, or return None if none are shared. """
        return self._build(self._aa_chars & self._find_other_aa_chars(other))

    def split(self) -> typing.List['AAMutation']:
        """ One mutation for each amino acid that isn't the reference. """
        return [AAMutation(self._gene, self._position, aa)
                for aa in self._aas
                if aa != self.reference]

    # Simple facts about the amino acids

    @property
    def is_unsequenced(self) -> bool:
        return False

    @property
    def is_insertion(self) -> bool:
        return '_' in self._aa_chars

    @property
    def is_deletion(self) -> bool:
        return '-' in self._aa_chars

    @property
    def is_indel(self) -> bool:
        return self.is_insertion or self.is_deletion

    @property
    def is_mixture(self) -> bool:
        return len(self._aa_chars) > 1 or 'X' in self._aa_chars

    @property
    def has_reference(self) -> bool:
        return self.reference in self._aa_chars

    @property
    def has_stop(self) -> bool:
        return '*' in self._aa_chars

    @property
    def has_bdhvn(self) -> bool:
        # Nucleotide ambiguity codes are invisible at the amino acid level.
        return False

    @property
    def is_ambiguous(self) -> bool:
        return (self.has_bdhvn or
                len(self._aa_chars) > self._max_display_aas or
                'X' in self._aa_chars)

    def contains_shared_aa(self, query, ignore_ref_or_stops=True) -> bool:
        """ Check if any amino acids are shared with a query.

        :param query: another mutation, or a collection of amino acids. A
            mutation at a different gene position never shares anything.
        :param ignore_ref_or_stops: True if the reference and stop codons
            should not count as shared amino acids.
        """
        if isinstance(query, AAMutation):
            if (query.gene != self._gene or
                    query.position != self._position):
                return False
            query_chars = query.aa_chars
        else:
            query_chars = normalize_aa_chars(query)
        shared = self._aa_chars & query_chars
        if ignore_ref_or_stops:
            shared -= {self.reference, '*'}
        return bool(shared)

    # Classification against the virus knowledge base

    @cached_property
    def reference(self) -> str:
        return self._gene.get_ref_char(self._position)

    @cached_property
    def _main_aa_percents(self):
        return self._gene.virus.amino_acid_percents(self._gene.strain)

    @cached_property
    def is_at_drug_resistance_position(self) -> bool:
        return self.gene_position.is_drug_resistance_position()

    def _exists_in_mutation_sets(self, mutation_sets):
        return any(mutations.has_shared_aa_mutation(self,
                                                    ignore_ref_or_stops=False)
                   for mutations in mutation_sets)

    def _find_drug_class(self, mutation_sets):
        for drug_class, mutations in mutation_sets.items():
            if mutations.has_shared_aa_mutation(self,
                                                ignore_ref_or_stops=False):
                return drug_class
        return None

    @cached_property
    def is_drm(self) -> bool:
        virus = self._gene.virus
        return self._exists_in_mutation_sets(
            virus.drug_resistance_mutations().values())

    @cached_property
    def drm_drug_class(self):
        if not self.is_drm:
            return None
        return self._find_drug_class(
            self._gene.virus.drug_resistance_mutations())

    @cached_property
    def is_sdrm(self) -> bool:
        virus = self._gene.virus
        return self._exists_in_mutation_sets(
            virus.surveillance_mutations().values())

    @cached_property
    def sdrm_drug_class(self):
        if not self.is_sdrm:
            return None
        return self._find_drug_class(
            self._gene.virus.surveillance_mutations())

    @cached_property
    def is_tsm(self) -> bool:
        virus = self._gene.virus
        return self._exists_in_mutation_sets(
            virus.treatment_selected_mutations().values())

    @cached_property
    def tsm_drug_class(self):
        if not self.is_tsm:
            return None
        return self._find_drug_class(
            self._gene.virus.treatment_selected_mutations())

    @cached_property
    def is_apobec_mutation(self) -> bool:
        return self._gene.virus.apobec_mutations().has_shared_aa_mutation(
            self,
            ignore_ref_or_stops=False)

    @cached_property
    def is_apobec_drm(self) -> bool:
        return self._gene.virus.apobec_drms().has_shared_aa_mutation(
            self,
            ignore_ref_or_stops=False)

    @cached_property
    def is_unusual(self) -> bool:
        if 'X' in self._aa_chars:
            return True
        return self._main_aa_percents.contains_unusual_aa(self._gene,
                                                          self._position,
                                                          self._aas)

    @cached_property
    def highest_mut_prevalence(self) -> float:
        """ Highest percentage (0-100) of any non-reference amino acid. """
        aa_chars = self._aa_chars - {self.reference, 'X'}
        if not aa_chars:
            return 0.0
        fraction = self._main_aa_percents.get_highest_aa_percent_value(
            self._gene,
            self._position,
            ''.join(sorted(aa_chars)))
        return fraction * 100

    @property
    def prevalences(self):
        return self._gene.virus.mutation_prevalences(self.gene_position)

    @property
    def comments(self):
        """ Knowledge base comments whose conditions match this mutation. """
        return self._gene.virus.conditional_comments().get_comments(self)

    @cached_property
    def types(self) -> tuple:
        virus = self._gene.virus
        types = tuple(pair.mutation_type
                      for pair in virus.mutation_type_pairs()
                      if pair.is_mutation_matched(self))
        if not types:
            types = (virus.other_mutation_type(), )
        return types

    @property
    def primary_type(self):
        return self.types[0]

    # Display formats

    @property
    def display_aa_chars(self) -> typing.FrozenSet[str]:
        if len(self._aa_chars) > self._max_display_aas:
            return frozenset('X')
        return self._aa_chars

    @property
    def display_aas(self) -> str:
        return ''.join(sorted(self.display_aa_chars))

    @property
    def aas_with_ref_first(self) -> str:
        aa_chars = set(self.display_aa_chars)
        prefix = ''
        if self.reference in aa_chars:
            aa_chars.remove(self.reference)
            prefix = self.reference
        return prefix + ''.join(sorted(aa_chars))

    @property
    def aas_without_reference(self) -> str:
        aa_chars = self.display_aa_chars - {self.reference}
        return ''.join(sorted(aa_chars))

    @property
    def asi_format(self) -> str:
        """ Format for the ASI rule interpreter, like M41L or T69i. """
        aas = self._aas.replace('_', 'i').replace('-', 'd')
        aas = re.sub(r'[X*]', 'Z', aas)
        return f'{self.reference}{self._position}{aas}'

    @property
    def hivdb_format(self) -> str:
        """ Compact format without the reference, like 41L or 69#. """
        aas = self._aas.replace('_', '#').replace('-', '~')
        return f'{self._position}{aas}'

    @property
    def human_format(self) -> str:
        aas = self.aas_with_ref_first
        if aas == '_':
            aas = 'Insertion'
        elif aas == '-':
            aas = 'Deletion'
        return f'{self.reference}{self._position}{aas}'

    @property
    def short_human_format(self) -> str:
        aas = self.aas_with_ref_first
        if aas == '_':
            aas = 'i'
        elif aas == '-':
            aas = 'd'
        return f'{self.reference}{self._position}{aas}'

    @property
    def human_format_without_leading_ref(self) -> str:
        return self.human_format[1:]

    @property
    def human_format_with_gene(self) -> str:
        return f'{self._gene.name}_{self.human_format}'

    @property
    def short_text(self) -> str:
        return self.short_human_format

    # Identity

    def _sort_key(self):
        return self._gene, self._position, self._aas

    def __eq__(self, other):
        if not isinstance(other, AAMutation):
            return NotImplemented
        return (self._gene == other.gene and
                self._position == other.position and
                self._aa_chars == other.aa_chars)

    def __lt__(self, other):
        if not isinstance(other, AAMutation):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self):
        return hash((self._gene, self._position, self._aa_chars))

    def __str__(self):
        return self.human_format

    def __repr__(self):
        return f'AAMutation({self._gene.name!r}, {self._position}, {self._aas!r})'
