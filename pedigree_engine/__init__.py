"""
Pedigree and Breeding-Genetics Engine

Main API:
    PedigreeEngine - Stateless facade over all components
    AnimalSnapshot - Immutable herd view passed to every query
    Animal, Sex - Animal records
    load_config - Configuration loading helper
"""

import logging

from .engine import PedigreeEngine
from .config import load_config, default_config, EngineConfig
from .models import Animal, AnimalSnapshot, Sex, AnimalStatus, Genetics, RiskTier

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'PedigreeEngine', 'AnimalSnapshot', 'Animal', 'Sex', 'AnimalStatus', 'Genetics', 'RiskTier',
    'load_config', 'default_config', 'EngineConfig',
]
__version__ = '0.1.0'
