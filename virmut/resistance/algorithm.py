"""
Metadata for one version of a drug resistance algorithm.

#loading an algorithm:
algorithm = DrugResistanceAlgorithm(virus, xml_text)
algorithm.name          # 'HIVDB_9.4'
algorithm.display       # 'HIVDB 9.4'
algorithm.get_asi_gene(virus.get_gene('RT'))  # rules for the scoring engine

The XML is read once, when the algorithm is created, so create algorithms
while the application starts up. A document that can't be read raises
AsiParsingError, and there is no partially loaded algorithm to fall back on.
"""
from enum import Enum
import logging
import re
from types import MappingProxyType
import typing

from virmut.resistance.asi_transformer import AsiParsingError, XmlAsiTransformer

logger = logging.getLogger(__name__)


class SIREnum(Enum):
    S = 'Susceptible'
    I = 'Intermediate'  # noqa: E741
    R = 'Resistant'


class DrugResistanceAlgorithm:
    """ Header details and per-gene rules from an ASI document.

    Only genes that the virus knows about are kept; rules for any other
    genes are dropped. Two algorithms are never equal unless they are the
    same object, even when they were loaded from the same XML.
    """
    def __init__(self,
                 virus,
                 xml_text: str,
                 name: str = None,
                 family: str = None,
                 version: str = None,
                 publish_date: str = None,
                 transformer=None):
        if transformer is None:
            transformer = XmlAsiTransformer()
        try:
            algorithm_info = transformer.get_algorithm_info(xml_text)
            gene_map = transformer.transform(xml_text)
        except AsiParsingError:
            logger.error('Failed to load drug resistance algorithm %s.',
                         name or '')
            raise
        name_version_date = algorithm_info['ALGNAME_ALGVERSION_ALGDATE']
        original_level = algorithm_info['ORDER1_ORIGINAL_SIR']
        if name is None:
            name = '{}_{}'.format(name_version_date['ALGNAME'],
                                  name_version_date['ALGVERSION'])
        self._name = name
        self._family = (name_version_date['ALGNAME']
                        if family is None
                        else family)
        self._version = (name_version_date['ALGVERSION']
                         if version is None
                         else version)
        self._publish_date = (name_version_date['ALGDATE']
                              if publish_date is None
                              else publish_date)
        self._original_level_text = original_level['ORIGINAL']
        self._original_level_sir = original_level['SIR']
        self._xml_text = xml_text

        abstract_genes = set(virus.abstract_genes())
        dropped_genes = sorted(set(gene_map) - abstract_genes)
        self._gene_map = MappingProxyType({
            gene_name: asi_gene
            for gene_name, asi_gene in gene_map.items()
            if gene_name in abstract_genes})
        logger.debug('Loaded %s with genes %s, dropped %s.',
                     self._name,
                     ', '.join(self._gene_map),
                     ', '.join(dropped_genes) or 'none')

    @property
    def name(self) -> str:
        return self._name

    @property
    def display(self) -> str:
        return f'{self._family} {self._version}'

    @property
    def family(self) -> str:
        return self._family

    @property
    def version(self) -> str:
        return self._version

    @property
    def publish_date(self) -> typing.Optional[str]:
        return self._publish_date

    @property
    def original_level_text(self) -> str:
        return self._original_level_text

    @property
    def original_level_sir(self) -> SIREnum:
        return SIREnum[self._original_level_sir]

    @property
    def xml_text(self) -> str:
        return self._xml_text

    @property
    def gene_map(self) -> typing.Mapping[str, typing.Any]:
        return self._gene_map

    def get_asi_gene(self, gene):
        """ Find the rules for a gene, or None if the algorithm has none. """
        return self._gene_map.get(gene.abstract_gene)

    @property
    def enum_compat_name(self) -> str:
        """ Name that only has letters, digits, and underscores. """
        name = re.sub(r'[^_0-9A-Za-z-]', '_', self._name)
        name = name.replace('-stanford', 'stanford').replace('-', 'p')
        if re.match(r'\d', name):
            name = '_' + name
        return name

    @property
    def sort_key(self) -> tuple:
        # None sorts before any text.
        return tuple((value is not None, value or '')
                     for value in (self._family,
                                   self._version,
                                   self._publish_date))

    def __lt__(self, other):
        if not isinstance(other, DrugResistanceAlgorithm):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __le__(self, other):
        if not isinstance(other, DrugResistanceAlgorithm):
            return NotImplemented
        return self.sort_key <= other.sort_key

    def __gt__(self, other):
        if not isinstance(other, DrugResistanceAlgorithm):
            return NotImplemented
        return self.sort_key > other.sort_key

    def __ge__(self, other):
        if not isinstance(other, DrugResistanceAlgorithm):
            return NotImplemented
        return self.sort_key >= other.sort_key

    def __eq__(self, other):
        # Each loaded algorithm is its own value, even with the same XML.
        return self is other

    __hash__ = object.__hash__

    def __str__(self):
        return self._name

    def __repr__(self):
        return f'DrugResistanceAlgorithm({self._name!r})'
