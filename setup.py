from setuptools import setup
import sys

if sys.version_info < (3, 8):
    print('Sorry, virmut requires Python version 3.8+.')
    sys.exit()

with open('README.md') as fh:
    long_description = fh.read()

setup(
    name='virmut',
    version='0.1',
    author=['Art Poon', 'Don Kirkby', 'Eric Martin', 'Richard H. Liang'],
    author_email='apoon42@uwo.ca',

    description='Amino acid mutations and drug resistance algorithms for '
                'viral genotyping',
    long_description=long_description,
    long_description_content_type="text/markdown",

    packages=['virmut',
              'virmut.mutations',
              'virmut.resistance',
              'virmut.utils',
              'virmut.viruses'],
    package_data={'virmut': ['viruses/*.yaml']},
    python_requires='>=3.8',
    install_requires=['pyvdrm @ git+https://github.com/cfe-lab/pyvdrm.git',
                      'pyparsing',
                      'PyYAML'],
    extras_require={'test': ['pytest']}
)
