"""
Reads ASI2 algorithm XML documents into per-gene rule definitions.

#reading an algorithm:
transformer = XmlAsiTransformer()
info = transformer.get_algorithm_info(xml_text)
genes = transformer.transform(xml_text)

info['ALGNAME_ALGVERSION_ALGDATE']  # {'ALGNAME': 'HIVDB', 'ALGVERSION': '9.4', ...}
info['ORDER1_ORIGINAL_SIR']         # {'ORDER': '1', 'ORIGINAL': 'Susceptible', 'SIR': 'S'}
genes['RT'].drug_classes            # [AsiDrugClass('NRTI', ...), ...]

Each drug rule's condition is compiled by pyvdrm, so a document with a broken
condition fails when it is loaded, not when it is first used. Scoring with the
compiled rules is left to the caller.
"""
from dataclasses import dataclass, field
import logging
import re
import typing
import xml.dom.minidom as minidom
from xml.parsers.expat import ExpatError

from pyparsing import ParseBaseException
from pyvdrm.hcvr import HCVR

logger = logging.getLogger(__name__)

SCORE_RANGE_PATTERN = re.compile(r'\s*(\S+)\s*TO\s*(\S+)\s*=>\s*(\S+)\s*')


class AsiParsingError(Exception):
    pass


@dataclass
class AsiRule:
    condition: str
    actions: typing.List[tuple]  # [(action_type, action_value)]
    dtree: typing.Any = field(repr=False, default=None)


@dataclass
class AsiDrug:
    code: str
    full_name: str
    rules: typing.List[AsiRule]


@dataclass
class AsiDrugClass:
    name: str
    drugs: typing.List[AsiDrug]


@dataclass
class AsiLevel:
    order: str
    original: str
    sir: str


@dataclass
class AsiGene:
    """ Everything an ASI document says about one gene. """
    name: str
    drug_classes: typing.List[AsiDrugClass]
    levels: typing.Dict[str, AsiLevel]
    global_range: typing.List[tuple]
    comment_definitions: typing.Dict[str, tuple]  # {id: (text, sort_tag)}
    mutation_comment_rules: typing.List[AsiRule]


def get_child_text(node, tag_name, is_required=True):
    children = node.getElementsByTagName(tag_name)
    text = ''
    if children:
        text = ''.join(child.nodeValue
                       for child in children[0].childNodes
                       if child.nodeValue is not None).strip()
    if not text:
        if is_required:
            raise AsiParsingError(
                f'Missing {tag_name} in {node.nodeName}.')
        return None
    return text


def parse_score_range(text):
    items = text.strip(")( \n").split(',')
    score_range = []
    for item in items:
        match = SCORE_RANGE_PATTERN.match(item.strip("\n \t"))
        if match is None:
            raise AsiParsingError(f'Invalid score range: {item!r}.')
        score_range.append(match.groups())
    return score_range


def compile_rule(condition, actions):
    condition = re.sub(r'\s+', ' ', condition)
    try:
        dtree = HCVR(condition)
    except ParseBaseException as ex:
        raise AsiParsingError(f'Invalid condition: {condition!r}.') from ex
    return AsiRule(condition, actions, dtree)


class XmlAsiTransformer:
    def _parse(self, xml_text):
        try:
            return minidom.parseString(xml_text)
        except ExpatError as ex:
            raise AsiParsingError(f'Invalid ASI XML: {ex}.') from ex

    def get_algorithm_info(self, xml_text: str) -> dict:
        """ Read the algorithm's header records.

        :return: {'ALGNAME_ALGVERSION_ALGDATE': {...},
            'ORDER1_ORIGINAL_SIR': {...}}
        """
        dom = self._parse(xml_text)
        root = dom.documentElement
        name_version_date = dict(
            ALGNAME=get_child_text(root, 'ALGNAME'),
            ALGVERSION=get_child_text(root, 'ALGVERSION'),
            ALGDATE=get_child_text(root, 'ALGDATE', is_required=False))
        for level in self._parse_levels(root).values():
            if level.order == '1':
                original_level = dict(ORDER=level.order,
                                      ORIGINAL=level.original,
                                      SIR=level.sir)
                break
        else:
            raise AsiParsingError('No LEVEL_DEFINITION with ORDER 1.')
        return {'ALGNAME_ALGVERSION_ALGDATE': name_version_date,
                'ORDER1_ORIGINAL_SIR': original_level}

    def _parse_levels(self, root):
        levels = {}
        for node in root.getElementsByTagName('LEVEL_DEFINITION'):
            level = AsiLevel(get_child_text(node, 'ORDER'),
                             get_child_text(node, 'ORIGINAL'),
                             get_child_text(node, 'SIR'))
            levels[level.order] = level
        return levels

    def transform(self, xml_text: str) -> typing.Dict[str, AsiGene]:
        """ Read the rules for every gene in the document.

        :return: {gene_name: AsiGene}
        """
        dom = self._parse(xml_text)
        root = dom.documentElement
        definitions = root.getElementsByTagName('DEFINITIONS')
        if not definitions:
            raise AsiParsingError('Missing DEFINITIONS.')
        definitions = definitions[0]

        levels = self._parse_levels(definitions)
        global_range = []
        global_range_text = get_child_text(definitions,
                                           'GLOBALRANGE',
                                           is_required=False)
        if global_range_text is not None:
            global_range = parse_score_range(global_range_text)
        comment_definitions = {}
        for node in definitions.getElementsByTagName('COMMENT_STRING'):
            comment_id = node.getAttribute('id')
            comment_definitions[comment_id] = (
                get_child_text(node, 'TEXT'),
                get_child_text(node, 'SORT_TAG', is_required=False))

        drugs = {}  # {code: AsiDrug}
        for drug_node in root.getElementsByTagName('DRUG'):
            code = get_child_text(drug_node, 'NAME')
            full_name = get_child_text(drug_node,
                                       'FULLNAME',
                                       is_required=False) or ''
            rules = [self._parse_rule(rule_node)
                     for rule_node in drug_node.getElementsByTagName('RULE')]
            drugs[code] = AsiDrug(code, full_name, rules)

        drug_classes = {}  # {name: AsiDrugClass}
        for node in definitions.getElementsByTagName('DRUGCLASS'):
            class_name = get_child_text(node, 'NAME')
            drug_codes = get_child_text(node, 'DRUGLIST').split(',')
            try:
                class_drugs = [drugs[code.strip()] for code in drug_codes]
            except KeyError as ex:
                raise AsiParsingError(
                    f'Drug class {class_name} lists unknown drug {ex}.') from ex
            drug_classes[class_name] = AsiDrugClass(class_name, class_drugs)

        comment_rules = {}  # {gene_name: [AsiRule]}
        for comments_node in root.getElementsByTagName('MUTATION_COMMENTS'):
            for gene_node in comments_node.getElementsByTagName('GENE'):
                gene_name = get_child_text(gene_node, 'NAME')
                comment_rules[gene_name] = [
                    self._parse_rule(rule_node)
                    for rule_node in gene_node.getElementsByTagName('RULE')]

        genes = {}
        for node in definitions.getElementsByTagName('GENE_DEFINITION'):
            gene_name = get_child_text(node, 'NAME')
            class_names = get_child_text(node, 'DRUGCLASSLIST').split(',')
            try:
                gene_classes = [drug_classes[class_name.strip()]
                                for class_name in class_names]
            except KeyError as ex:
                raise AsiParsingError(
                    f'Gene {gene_name} lists unknown drug class {ex}.') from ex
            genes[gene_name] = AsiGene(gene_name,
                                       gene_classes,
                                       levels,
                                       global_range,
                                       comment_definitions,
                                       comment_rules.get(gene_name, []))
        logger.debug('Read rules for %d drugs in genes %s.',
                     len(drugs),
                     ', '.join(genes))
        return genes

    def _parse_rule(self, rule_node):
        condition = get_child_text(rule_node, 'CONDITION')
        actions = []
        for action_node in rule_node.getElementsByTagName('ACTIONS'):
            level = get_child_text(action_node, 'LEVEL', is_required=False)
            if level is not None:
                actions.append(('level', level))
            for comment in action_node.getElementsByTagName('COMMENT'):
                actions.append(('comment', comment.getAttribute('ref')))
            if action_node.getElementsByTagName('SCORERANGE'):
                if action_node.getElementsByTagName('USE_GLOBALRANGE'):
                    actions.append(('scorerange', 'useglobalrange'))
                else:
                    score_range_text = get_child_text(action_node,
                                                      'SCORERANGE')
                    actions.append(('scorerange',
                                    parse_score_range(score_range_text)))
        return compile_rule(condition, actions)
