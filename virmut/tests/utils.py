from yaml import safe_load

from virmut.viruses.virus import YamlVirus

PR_REFERENCE = 'PQVTLWQRPLVTIKIGGQLKEALLDTGADDTVLEEMSLPGRWKPKMIGGIGGFIKVRQYDQILIEICGHKAIGTVLVGPTPVNIIGRNLLTQIGCTLNF'
RT_REFERENCE = ('PISPIETVPVKLKPGMDGPKVKQWPLTEEKIKALVEICTEMEKEGKISKIGPENPYNTPVFAIKKKDSTKWRKLVDFRELNKRTQDFWEVQLGIPHPAGL'
                'KKKKSVTVLDVGDAYFSVPLDEDFRKYTAFTIPSINNETPGIRYQYNVLPQGWKGSPAIFQSSMTKILEPFRKQNPDIVIYQYMDDLYVGSDLEIGQHRT'
                'KIEELRQHLLRWGLTTPDKKHQKEPPFLWMGYELHPDKWTVQPIVLPEKDSWTVNDIQKLVGKLNWASQIYPGIKVRQLCKLLRGTKALTEVIPLTEEAE'
                'LELAENREILKEPVHGVYYDPSKDLIAEIQKQGQGQWTYQIYQEPFKNLKTGKYARMRGAHTNDVKQLTEAVQKITTESIVIWGKTPKFKLPIQKETWET')

VIRUS_YAML = f"""\
strain: HIV1
genes:
  - name: PR
    reference: {PR_REFERENCE}
  - name: RT
    reference: {RT_REFERENCE}
drug_classes:
  - {{name: PI, gene: PR}}
  - {{name: NRTI, gene: RT}}
  - {{name: NNRTI, gene: RT}}
drug_resistance_mutations:
  PI: D30N, M46IL, L90M
  NRTI: M41L, K65R, T69_, M184VI, T215FY
  NNRTI: K103N, E138AK, Y181C
surveillance_mutations:
  PI: D30N, L90M
  NRTI: M41L, E44D, M184V
treatment_selected_mutations:
  NRTI: M41L, E44D, V118I, E138A
  NNRTI: K103N, E138AK
apobec_mutations:
  PR: D30N, G48S
  RT: M184I, G190E
apobec_drms:
  PR: D30N
  RT: M184I
other_mutation_type: Other
mutation_type_pairs:
  - {{drug_class: PI, type: Major, mutations: 'D30N, L90M'}}
  - {{drug_class: PI, type: Accessory, mutations: L10F}}
  - {{drug_class: NRTI, type: NRTI, mutations: 'M41L, M184VI, E138A'}}
  - {{drug_class: NNRTI, type: NNRTI, mutations: 'K103N, E138AK'}}
amino_acid_percents:
  RT:
    41: {{M: 0.9702, L: 0.0295, I: 0.00005}}
    184: {{M: 0.8823, V: 0.1124, I: 0.0049}}
mutation_prevalences:
  - {{gene: RT, position: 41, aa: L, total_naive: 1000, freq_naive: 12,
     total_treated: 200, freq_treated: 70}}
conditional_comments:
  - name: RT184VI
    drug_class: NRTI
    mutation: M184VI
    text: M184V/I cause high-level resistance to lamivudine.
  - name: RT184I
    drug_class: NRTI
    mutation: M184I
    text: M184I is usually an APOBEC mutation.
  - name: RT138K
    drug_class: NNRTI
    mutation: E138K
    text: E138K reduces rilpivirine susceptibility.
"""


def create_virus_config():
    return safe_load(VIRUS_YAML)


def create_virus(config=None):
    if config is None:
        config = create_virus_config()
    return YamlVirus(config)


def create_gene(reference, name='RT', virus=None):
    """ Build a one-gene virus with a custom reference. """
    config = dict(strain='HIV1', genes=[dict(name=name, reference=reference)])
    if virus is None:
        virus = YamlVirus(config)
    return virus.get_gene(name)


ASI_XML = """\
<ALGORITHM>
  <ALGNAME>HIVDB</ALGNAME>
  <ALGVERSION>9.4</ALGVERSION>
  <ALGDATE>2022-01-01</ALGDATE>
  <DEFINITIONS>
    <GENE_DEFINITION>
      <NAME>RT</NAME>
      <DRUGCLASSLIST>NRTI</DRUGCLASSLIST>
    </GENE_DEFINITION>
    <GENE_DEFINITION>
      <NAME>CA</NAME>
      <DRUGCLASSLIST>CAI</DRUGCLASSLIST>
    </GENE_DEFINITION>
    <LEVEL_DEFINITION>
      <ORDER>1</ORDER>
      <ORIGINAL>Susceptible</ORIGINAL>
      <SIR>S</SIR>
    </LEVEL_DEFINITION>
    <LEVEL_DEFINITION>
      <ORDER>5</ORDER>
      <ORIGINAL>High-Level Resistance</ORIGINAL>
      <SIR>R</SIR>
    </LEVEL_DEFINITION>
    <DRUGCLASS>
      <NAME>NRTI</NAME>
      <DRUGLIST>ABC</DRUGLIST>
    </DRUGCLASS>
    <DRUGCLASS>
      <NAME>CAI</NAME>
      <DRUGLIST>LEN</DRUGLIST>
    </DRUGCLASS>
    <GLOBALRANGE><![CDATA[(-INF TO 9 => 1,  10 TO INF => 5)]]></GLOBALRANGE>
    <COMMENT_DEFINITIONS>
      <COMMENT_STRING id="RT41L">
        <TEXT><![CDATA[M41L is a thymidine analogue mutation.]]></TEXT>
        <SORT_TAG>1</SORT_TAG>
      </COMMENT_STRING>
    </COMMENT_DEFINITIONS>
  </DEFINITIONS>
  <DRUG>
    <NAME>ABC</NAME>
    <FULLNAME>abacavir</FULLNAME>
    <RULE>
      <CONDITION><![CDATA[SCORE FROM(41L => 15)]]></CONDITION>
      <ACTIONS>
        <SCORERANGE>
          <USE_GLOBALRANGE/>
        </SCORERANGE>
      </ACTIONS>
    </RULE>
  </DRUG>
  <DRUG>
    <NAME>LEN</NAME>
    <RULE>
      <CONDITION><![CDATA[66L]]></CONDITION>
      <ACTIONS>
        <LEVEL>5</LEVEL>
      </ACTIONS>
    </RULE>
  </DRUG>
  <MUTATION_COMMENTS>
    <GENE>
      <NAME>RT</NAME>
      <RULE>
        <CONDITION><![CDATA[41L]]></CONDITION>
        <ACTIONS>
          <COMMENT ref="RT41L"/>
        </ACTIONS>
      </RULE>
    </GENE>
  </MUTATION_COMMENTS>
</ALGORITHM>
"""
