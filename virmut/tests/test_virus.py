from io import StringIO
from unittest import TestCase

import pytest

from virmut.mutations.aa_mutation import AAMutation
from virmut.mutations.mutation_type import MutationType
from virmut.viruses.gene import GenePosition
from virmut.viruses.virus import YamlVirus, UnknownGeneError
from virmut.tests.utils import create_virus, create_virus_config, VIRUS_YAML


class YamlVirusTest(TestCase):
    def test_load(self):
        virus = YamlVirus.load(StringIO(VIRUS_YAML))

        self.assertEqual('HIV1', virus.strain)
        self.assertEqual(['PR', 'RT'], virus.abstract_genes())

    def test_get_gene(self):
        virus = create_virus()

        gene = virus.get_gene('RT')

        self.assertEqual('HIV1RT', gene.name)
        self.assertEqual(400, gene.length)
        self.assertIs(virus, gene.virus)
        self.assertEqual(gene, virus.get_gene('HIV1RT'))

    def test_unknown_gene(self):
        virus = create_virus()

        with self.assertRaisesRegex(UnknownGeneError, r"Unknown gene 'IN'"):
            virus.get_gene('IN')

    def test_unknown_gene_is_key_error(self):
        virus = create_virus()

        with self.assertRaises(KeyError):
            virus.get_gene('HIV2RT')

    def test_drug_class_order(self):
        virus = create_virus()

        drug_classes = virus.drug_resistance_mutations()

        self.assertEqual(['PI', 'NRTI', 'NNRTI'],
                         [drug_class.name for drug_class in drug_classes])

    def test_catalog(self):
        virus = create_virus()
        nrti = virus.drug_classes['NRTI']

        mutations = virus.drug_resistance_mutations()[nrti]

        self.assertEqual('M41L, K65R, T69Insertion, M184IV, T215FY', str(mutations))

    def test_catalog_as_list(self):
        config = create_virus_config()
        config['surveillance_mutations']['PI'] = ['D30N', 'L90M']
        virus = create_virus(config)
        pi = virus.drug_classes['PI']

        mutations = virus.surveillance_mutations()[pi]

        self.assertEqual('D30N, L90M', str(mutations))

    def test_missing_catalogs(self):
        config = create_virus_config()
        del config['treatment_selected_mutations']
        del config['apobec_drms']
        virus = create_virus(config)
        mutation = AAMutation(virus.get_gene('RT'), 41, 'L')

        self.assertEqual({}, virus.treatment_selected_mutations())
        self.assertEqual(0, len(virus.apobec_drms()))
        self.assertFalse(mutation.is_tsm)
        self.assertFalse(mutation.is_apobec_drm)

    def test_drug_resistance_positions(self):
        virus = create_virus()
        rt = virus.get_gene('RT')

        positions = virus.drug_resistance_positions()

        self.assertIn(GenePosition(rt, 41), positions)
        self.assertNotIn(GenePosition(rt, 44), positions)
        self.assertEqual(11, len(positions))

    def test_mutation_type_pairs(self):
        virus = create_virus()

        pairs = virus.mutation_type_pairs()

        self.assertEqual(8, len(pairs))
        self.assertEqual(MutationType('Major'), pairs[0].mutation_type)
        self.assertEqual(('PR', 30, 'N'),
                         (pairs[0].abstract_gene,
                          pairs[0].position,
                          pairs[0].aas))

    def test_default_other_type(self):
        config = create_virus_config()
        del config['other_mutation_type']

        virus = create_virus(config)

        self.assertEqual(MutationType('Other'), virus.other_mutation_type())

    def test_amino_acid_percents_wrong_strain(self):
        virus = create_virus()

        with self.assertRaises(UnknownGeneError):
            virus.amino_acid_percents('HIV2')

    def test_prevalences_are_copied(self):
        virus = create_virus()
        gene_position = GenePosition(virus.get_gene('RT'), 41)

        virus.mutation_prevalences(gene_position).clear()

        self.assertEqual(1, len(virus.mutation_prevalences(gene_position)))


@pytest.fixture(scope='module')
def default_virus():
    return YamlVirus.load_default()


def test_default_genes(default_virus):
    assert default_virus.abstract_genes() == ['PR', 'RT', 'IN']
    assert default_virus.get_gene('PR').length == 99
    assert default_virus.get_gene('RT').length == 400
    assert default_virus.get_gene('IN').length == 288


def test_default_drug_classes(default_virus):
    drug_classes = default_virus.drug_classes

    assert list(drug_classes) == ['PI', 'NRTI', 'NNRTI', 'INSTI']
    assert drug_classes['INSTI'].abstract_gene == 'IN'


@pytest.mark.parametrize('gene_name,text,drug_class_name', [
    ('PR', 'D30N', 'PI'),
    ('RT', 'M41L', 'NRTI'),
    ('RT', 'K103N', 'NNRTI'),
    ('IN', 'Q148H', 'INSTI')])
def test_default_drms(default_virus, gene_name, text, drug_class_name):
    gene = default_virus.get_gene(gene_name)

    mutation = AAMutation.parse_string(gene, text)

    assert mutation.is_drm
    assert mutation.drm_drug_class.name == drug_class_name
    assert not mutation.is_unusual


@pytest.mark.parametrize('text', ['D67D', 'D67N', 'K70R'])
def test_default_untabulated_not_unusual(default_virus, text):
    rt = default_virus.get_gene('RT')

    mutation = AAMutation.parse_string(rt, text)

    assert not mutation.is_unusual


def test_default_mutation_details(default_virus):
    rt = default_virus.get_gene('RT')

    mutation = AAMutation(rt, 184, 'V')

    assert mutation.human_format == 'M184V'
    assert mutation.is_sdrm
    assert mutation.primary_type == MutationType('NRTI')
    assert mutation.highest_mut_prevalence == pytest.approx(11.24)
    assert [prevalence.aa for prevalence in mutation.prevalences] == ['V', 'I']
