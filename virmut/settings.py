"""
Defaults for mutation display and classification. Each value can be
overridden with an environment variable, so a deployment can point at its own
knowledge base without editing code.
"""
import os
from pathlib import Path

# Mixtures with more amino acids than this are displayed as X.
DEFAULT_MAX_DISPLAY_AAS = int(os.environ.get('VIRMUT_MAX_DISPLAY_AAS', '6'))

# Amino acids below this prevalence (0-1 scale) at a position are unusual.
UNUSUAL_PERCENT_THRESHOLD = float(
    os.environ.get('VIRMUT_UNUSUAL_THRESHOLD', '0.0001'))

DEFAULT_VIRUS_PATH = Path(os.environ.get(
    'VIRMUT_VIRUS_PATH',
    Path(__file__).parent / 'viruses' / 'hiv1.yaml'))
