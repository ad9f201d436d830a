"""
Core algorithms package for vibration test equivalency.

This package provides:
- PSD resolution, parsing and octave-band integration
- Damage-band scoring
- Mission-representative thermal cycle synthesis
- Reliability-demonstration sample sizing
- Field-to-test vibration equivalency
- Fixture feasibility checks
- Test-plan orchestration and export
"""

from . import types
from . import psd
from . import octave
from . import banding
from . import thermal
from . import reliability_demo
from . import equivalency
from . import fixture
from . import templates
from . import planner

__all__ = [
    'types',
    'psd',
    'octave',
    'banding',
    'thermal',
    'reliability_demo',
    'equivalency',
    'fixture',
    'templates',
    'planner',
]
