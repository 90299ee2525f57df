"""
Knowledge bases that classify mutations for one virus strain.

#loading the bundled HIV-1 knowledge base:
virus = YamlVirus.load_default()
gene = virus.get_gene('RT')

#or one from a YAML file:
with open('my_virus.yaml') as virus_file:
    virus = YamlVirus.load(virus_file)

The YAML document lists the strain's genes with their reference sequences,
the drug classes that target them, and the mutation catalogs. Catalog entries
are written as mutation lists, like "M41L, K65R, T215FY". Conditional
comments each name one mutation, like "M184VI", and the text to show when a
mutation shares any of its amino acids.
"""
from abc import ABC, abstractmethod
from collections import defaultdict
import logging
import typing

from yaml import safe_load

from virmut import settings
from virmut.mutations.aa_mutation import AAMutation
from virmut.mutations.amino_acid_percents import AminoAcidPercents
from virmut.mutations.conditional_comments import ConditionalComment, \
    ConditionalComments
from virmut.mutations.mutation_prevalence import MutationPrevalence
from virmut.mutations.mutation_set import MutationSet
from virmut.mutations.mutation_type import MutationType, MutationTypePair
from virmut.viruses.drug_class import DrugClass
from virmut.viruses.gene import Gene, GenePosition

logger = logging.getLogger(__name__)


class UnknownGeneError(KeyError):
    pass


def join_mutation_text(mutation_text):
    """ Catalog entries can be a comma-separated string or a list. """
    if isinstance(mutation_text, str):
        return mutation_text
    return ', '.join(mutation_text)


class Virus(ABC):
    """ Everything a mutation needs to know about its virus. """
    @abstractmethod
    def abstract_genes(self) -> typing.List[str]:
        """ Gene names without the strain, like 'RT'. """

    @abstractmethod
    def get_gene(self, name: str) -> Gene:
        pass

    @abstractmethod
    def drug_resistance_mutations(self) -> typing.Dict[DrugClass, MutationSet]:
        pass

    @abstractmethod
    def surveillance_mutations(self) -> typing.Dict[DrugClass, MutationSet]:
        pass

    @abstractmethod
    def treatment_selected_mutations(self) -> typing.Dict[DrugClass, MutationSet]:
        pass

    @abstractmethod
    def apobec_mutations(self) -> MutationSet:
        pass

    @abstractmethod
    def apobec_drms(self) -> MutationSet:
        pass

    @abstractmethod
    def mutation_type_pairs(self) -> typing.List[MutationTypePair]:
        pass

    @abstractmethod
    def other_mutation_type(self) -> MutationType:
        """ Type for mutations that no type pair matches. """

    @abstractmethod
    def amino_acid_percents(self, strain: str) -> AminoAcidPercents:
        pass

    @abstractmethod
    def mutation_prevalences(
            self,
            gene_position: GenePosition) -> typing.List[MutationPrevalence]:
        pass

    @abstractmethod
    def drug_resistance_positions(self) -> typing.Set[GenePosition]:
        pass

    @abstractmethod
    def conditional_comments(self) -> ConditionalComments:
        pass


class YamlVirus(Virus):
    def __init__(self, config: dict):
        self.strain = config['strain']
        self._genes = {}  # {abstract_gene: Gene}
        for ordinal, gene_config in enumerate(config['genes']):
            abstract_gene = gene_config['name']
            self._genes[abstract_gene] = Gene(self.strain,
                                              ordinal,
                                              abstract_gene,
                                              gene_config['reference'],
                                              virus=self)
        self.drug_classes = {}  # {name: DrugClass}
        for class_config in config.get('drug_classes', []):
            drug_class = DrugClass(class_config['name'],
                                   class_config['gene'],
                                   class_config.get('full_name', ''))
            self.drug_classes[drug_class.name] = drug_class

        self._drms = self._load_drug_class_catalog(
            config.get('drug_resistance_mutations'))
        self._sdrms = self._load_drug_class_catalog(
            config.get('surveillance_mutations'))
        self._tsms = self._load_drug_class_catalog(
            config.get('treatment_selected_mutations'))
        self._apobec_mutations = self._load_gene_catalog(
            config.get('apobec_mutations'))
        self._apobec_drms = self._load_gene_catalog(
            config.get('apobec_drms'))

        self._other_mutation_type = MutationType(
            config.get('other_mutation_type', 'Other'))
        self._mutation_type_pairs = []
        for pair_config in config.get('mutation_type_pairs', []):
            drug_class = self.drug_classes[pair_config['drug_class']]
            mutation_type = MutationType(pair_config['type'])
            gene = self.get_gene(drug_class.abstract_gene)
            mutations = MutationSet.parse_string(
                gene,
                join_mutation_text(pair_config['mutations']))
            self._mutation_type_pairs.extend(
                MutationTypePair(gene.abstract_gene,
                                 drug_class,
                                 mutation_type,
                                 mutation.position,
                                 mutation.aas)
                for mutation in mutations)

        percents = {}
        for abstract_gene, positions in config.get('amino_acid_percents',
                                                   {}).items():
            for position, position_percents in positions.items():
                percents[(abstract_gene, int(position))] = position_percents
        self._amino_acid_percents = AminoAcidPercents(percents)

        self._prevalences = defaultdict(list)  # {GenePosition: [prevalence]}
        for row in config.get('mutation_prevalences', []):
            gene = self.get_gene(row['gene'])
            prevalence = MutationPrevalence(gene.abstract_gene,
                                            row['position'],
                                            row['aa'],
                                            row.get('subtype', 'All'),
                                            row['total_naive'],
                                            row['freq_naive'],
                                            row['total_treated'],
                                            row['freq_treated'])
            self._prevalences[GenePosition(gene, row['position'])].append(
                prevalence)

        comments = []
        for comment_config in config.get('conditional_comments', []):
            drug_class = self.drug_classes[comment_config['drug_class']]
            gene = self.get_gene(drug_class.abstract_gene)
            mutation = AAMutation.parse_string(gene, comment_config['mutation'])
            comments.append(ConditionalComment(comment_config['name'],
                                               drug_class,
                                               gene.abstract_gene,
                                               mutation.position,
                                               mutation.aas,
                                               comment_config['text'].strip()))
        self._conditional_comments = ConditionalComments(comments)

        self._drug_resistance_positions = {
            gene_position
            for mutations in self._drms.values()
            for gene_position in mutations.gene_positions}
        logger.debug('Loaded %s with genes %s and %d drug classes.',
                     self.strain,
                     ', '.join(self._genes),
                     len(self.drug_classes))

    @classmethod
    def load(cls, yaml_file):
        return cls(safe_load(yaml_file))

    @classmethod
    def load_default(cls):
        with settings.DEFAULT_VIRUS_PATH.open() as yaml_file:
            return cls.load(yaml_file)

    def _load_drug_class_catalog(self, catalog_config):
        """ Parse {drug_class_name: mutation_text}, keeping the order. """
        catalog = {}
        for class_name, mutation_text in (catalog_config or {}).items():
            drug_class = self.drug_classes[class_name]
            gene = self.get_gene(drug_class.abstract_gene)
            catalog[drug_class] = MutationSet.parse_string(
                gene,
                join_mutation_text(mutation_text))
        return catalog

    def _load_gene_catalog(self, catalog_config):
        """ Parse {abstract_gene: mutation_text} into one set. """
        mutations = []
        for abstract_gene, mutation_text in (catalog_config or {}).items():
            gene = self.get_gene(abstract_gene)
            mutations.extend(MutationSet.parse_string(
                gene,
                join_mutation_text(mutation_text)))
        return MutationSet(mutations)

    def abstract_genes(self):
        return list(self._genes)

    def get_gene(self, name):
        gene = self._genes.get(name)
        if gene is None and name.startswith(self.strain):
            gene = self._genes.get(name[len(self.strain):])
        if gene is None:
            raise UnknownGeneError(f'Unknown gene {name!r} for {self.strain}.')
        return gene

    def drug_resistance_mutations(self):
        return self._drms

    def surveillance_mutations(self):
        return self._sdrms

    def treatment_selected_mutations(self):
        return self._tsms

    def apobec_mutations(self):
        return self._apobec_mutations

    def apobec_drms(self):
        return self._apobec_drms

    def mutation_type_pairs(self):
        return self._mutation_type_pairs

    def other_mutation_type(self):
        return self._other_mutation_type

    def amino_acid_percents(self, strain):
        if strain != self.strain:
            raise UnknownGeneError(f'Unknown strain {strain!r}.')
        return self._amino_acid_percents

    def mutation_prevalences(self, gene_position):
        return list(self._prevalences.get(gene_position, []))

    def drug_resistance_positions(self):
        return self._drug_resistance_positions

    def conditional_comments(self):
        return self._conditional_comments
