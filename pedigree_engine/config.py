"""Configuration loading and validation for pedigree_engine."""

import copy
import json
import logging
import yaml
from pathlib import Path
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    'ancestry': {
        'max_generations': 5,
    },
    'validation': {
        'min_parent_age_months': 5.0,
        'days_per_month': 30.44,
    },
    'risk_thresholds': {
        'extreme': 0.25,
        'high': 0.125,
        'moderate': 0.0625,
    },
    'advisor': {
        'min_confidence': 0.7,
        'max_recommendations': 5,
        'inactive_penalty': 0.5,
        'default_fertility_score': 5.0,
        'max_fertility_score': 10.0,
        'default_goal_trait': 'milk_yield',
    },
    'traits': [
        {
            'name': 'horn_status',
            'display_name': 'Horn Status',
            'genotype_field': 'horn_genotype',
            'status_field': 'horn_status',
            'genotypes': [
                {'genotype': 'PP', 'phenotype': 'Polled'},
                {'genotype': 'Ph', 'phenotype': 'Polled'},
                {'genotype': 'hh', 'phenotype': 'Horned'},
            ],
            # Disbudded animals are genetically horned; polled animals are
            # assumed to be carriers unless a genotype is recorded.
            'status_genotypes': {
                'polled': 'Ph',
                'horned': 'hh',
                'disbudded': 'hh',
            },
        },
        {
            'name': 'coat_color',
            'display_name': 'Coat Color',
            'genotype_field': 'coat_genotype',
            'status_field': 'coat_color',
            'genotypes': [
                {'genotype': 'BB', 'phenotype': 'Black'},
                {'genotype': 'BR', 'phenotype': 'Brown'},
                {'genotype': 'BW', 'phenotype': 'Black/White'},
                {'genotype': 'RR', 'phenotype': 'Red/Brown'},
                {'genotype': 'RW', 'phenotype': 'Red/White'},
                {'genotype': 'WW', 'phenotype': 'White'},
            ],
            'status_genotypes': {
                'black': 'BB',
                'brown': 'BR',
                'white': 'WW',
                'mixed': 'BW',
            },
        },
    ],
}


@dataclass(frozen=True)
class AncestryConfig:
    """Depth limits for pedigree traversal."""
    max_generations: int = 5


@dataclass(frozen=True)
class ValidationConfig:
    """Chronology rules for parentage validation."""
    min_parent_age_months: float = 5.0
    days_per_month: float = 30.44


@dataclass(frozen=True)
class RiskThresholds:
    """Lower bounds (inclusive) of each inbreeding risk tier."""
    extreme: float = 0.25
    high: float = 0.125
    moderate: float = 0.0625


@dataclass(frozen=True)
class AdvisorConfig:
    """Scoring parameters for mate recommendations."""
    min_confidence: float = 0.7
    max_recommendations: int = 5
    inactive_penalty: float = 0.5
    default_fertility_score: float = 5.0
    max_fertility_score: float = 10.0
    default_goal_trait: str = 'milk_yield'


@dataclass(frozen=True)
class TraitConfig:
    """Configuration for a single biallelic trait."""
    name: str
    display_name: str
    genotypes: List[Dict[str, str]]
    status_genotypes: Dict[str, str] = field(default_factory=dict)
    genotype_field: Optional[str] = None
    status_field: Optional[str] = None


@dataclass(frozen=True)
class EngineConfig:
    """Complete engine configuration."""
    ancestry: AncestryConfig
    validation: ValidationConfig
    risk_thresholds: RiskThresholds
    advisor: AdvisorConfig
    traits: List[TraitConfig]
    raw_config: Dict[str, Any]


def load_config(config_path: str) -> EngineConfig:
    """
    Load and validate configuration from YAML or JSON file.

    Values in the file override DEFAULT_CONFIG section by section; a
    ``traits`` list in the file replaces the default trait tables.

    Args:
        config_path: Path to configuration file

    Returns:
        Validated EngineConfig object

    Raises:
        ConfigurationError: If file doesn't exist or configuration is invalid
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(path, 'r') as f:
            if path.suffix.lower() == '.json':
                file_config = json.load(f)
            else:
                file_config = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to parse configuration file: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read configuration file: {e}") from e

    if file_config is None:
        file_config = {}
    if not isinstance(file_config, dict):
        raise ConfigurationError("Configuration file must contain a mapping at the top level")

    logger.info("Loaded engine configuration from %s", path)
    return config_from_dict(file_config)


def default_config() -> EngineConfig:
    """Build the default configuration without reading any file."""
    return config_from_dict({})


def config_from_dict(overrides: Dict[str, Any]) -> EngineConfig:
    """
    Merge overrides over DEFAULT_CONFIG, then validate, normalize and build.

    Raises:
        ConfigurationError: If the merged configuration is invalid
    """
    raw_config = merge_config(DEFAULT_CONFIG, overrides)
    validate_config(raw_config)
    normalize_config(raw_config)
    return build_config(raw_config)


def merge_config(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge two config dicts; lists and scalars in overrides win."""
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _require_number(value: Any, name: str, minimum: float = 0.0, maximum: Optional[float] = None) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number")
    if value < minimum or (maximum is not None and value > maximum):
        upper = f" and {maximum}" if maximum is not None else ""
        raise ConfigurationError(f"{name} must be between {minimum}{upper}, got {value}")


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Args:
        config: Raw configuration dictionary

    Raises:
        ConfigurationError: If validation fails
    """
    required_fields = ['ancestry', 'validation', 'risk_thresholds', 'advisor', 'traits']
    for section in required_fields:
        if section not in config:
            raise ConfigurationError(f"Missing required field: {section}")
        if section != 'traits' and not isinstance(config[section], dict):
            raise ConfigurationError(f"{section} must be a dictionary")

    # Ancestry
    max_generations = config['ancestry'].get('max_generations')
    if isinstance(max_generations, bool) or not isinstance(max_generations, int) or max_generations < 1:
        raise ConfigurationError("ancestry.max_generations must be a positive integer")

    # Validation
    validation = config['validation']
    _require_number(validation.get('min_parent_age_months'), 'validation.min_parent_age_months')
    _require_number(validation.get('days_per_month'), 'validation.days_per_month', minimum=1.0)

    # Risk thresholds
    thresholds = config['risk_thresholds']
    for tier in ['extreme', 'high', 'moderate']:
        if tier not in thresholds:
            raise ConfigurationError(f"risk_thresholds missing required field: {tier}")
        _require_number(thresholds[tier], f"risk_thresholds.{tier}", maximum=1.0)
    if not (thresholds['extreme'] > thresholds['high'] > thresholds['moderate'] > 0):
        raise ConfigurationError("risk_thresholds must satisfy extreme > high > moderate > 0")

    # Advisor
    advisor = config['advisor']
    _require_number(advisor.get('min_confidence'), 'advisor.min_confidence', maximum=1.0)
    _require_number(advisor.get('inactive_penalty'), 'advisor.inactive_penalty', maximum=1.0)
    _require_number(advisor.get('max_fertility_score'), 'advisor.max_fertility_score', minimum=1.0)
    _require_number(
        advisor.get('default_fertility_score'), 'advisor.default_fertility_score',
        maximum=advisor['max_fertility_score']
    )
    max_recommendations = advisor.get('max_recommendations')
    if isinstance(max_recommendations, bool) or not isinstance(max_recommendations, int) or max_recommendations < 1:
        raise ConfigurationError("advisor.max_recommendations must be a positive integer")
    if not isinstance(advisor.get('default_goal_trait'), str) or not advisor['default_goal_trait']:
        raise ConfigurationError("advisor.default_goal_trait must be a non-empty string")

    # Traits
    if not isinstance(config['traits'], list):
        raise ConfigurationError("traits must be a list")

    trait_names = set()
    for trait in config['traits']:
        if not isinstance(trait, dict):
            raise ConfigurationError("Each trait must be a dictionary")

        name = trait.get('name')
        if not isinstance(name, str) or not name:
            raise ConfigurationError("Trait missing or invalid 'name' field")
        if name in trait_names:
            raise ConfigurationError(f"Duplicate trait name: {name}")
        trait_names.add(name)

        genotypes = trait.get('genotypes')
        if not isinstance(genotypes, list) or len(genotypes) == 0:
            raise ConfigurationError(f"Trait {name} must have a non-empty genotypes list")

        genotype_strings = set()
        for genotype in genotypes:
            if not isinstance(genotype, dict) or 'genotype' not in genotype or 'phenotype' not in genotype:
                raise ConfigurationError(f"Trait {name} genotype entries need 'genotype' and 'phenotype'")
            genotype_str = genotype['genotype']
            if not isinstance(genotype_str, str) or len(genotype_str) != 2:
                raise ConfigurationError(
                    f"Trait {name} genotype must be a 2-character string, got {genotype_str!r}"
                )
            normalized = ''.join(sorted(genotype_str))
            if normalized in genotype_strings:
                raise ConfigurationError(f"Trait {name} has duplicate genotype: {genotype_str}")
            genotype_strings.add(normalized)

        status_genotypes = trait.get('status_genotypes', {})
        if not isinstance(status_genotypes, dict):
            raise ConfigurationError(f"Trait {name} status_genotypes must be a dictionary")
        for status, genotype_str in status_genotypes.items():
            if not isinstance(genotype_str, str) or len(genotype_str) != 2:
                raise ConfigurationError(
                    f"Trait {name} status {status!r} must map to a 2-character genotype"
                )


def normalize_config(config: Dict[str, Any]) -> None:
    """
    Normalize configuration values (e.g., sort genotype alleles).

    Args:
        config: Configuration dictionary (modified in place)
    """
    config['validation']['min_parent_age_months'] = float(config['validation']['min_parent_age_months'])
    config['validation']['days_per_month'] = float(config['validation']['days_per_month'])

    for trait in config['traits']:
        trait.setdefault('display_name', trait['name'].replace('_', ' ').title())
        trait.setdefault('status_genotypes', {})
        for genotype in trait['genotypes']:
            genotype['genotype'] = ''.join(sorted(genotype['genotype']))
        trait['status_genotypes'] = {
            str(status).strip().lower(): ''.join(sorted(genotype_str))
            for status, genotype_str in trait['status_genotypes'].items()
        }


def build_config(raw_config: Dict[str, Any]) -> EngineConfig:
    """
    Build EngineConfig object from validated raw config.

    Args:
        raw_config: Validated and normalized configuration dictionary

    Returns:
        EngineConfig object
    """
    advisor = raw_config['advisor']
    advisor_config = AdvisorConfig(
        min_confidence=float(advisor['min_confidence']),
        max_recommendations=advisor['max_recommendations'],
        inactive_penalty=float(advisor['inactive_penalty']),
        default_fertility_score=float(advisor['default_fertility_score']),
        max_fertility_score=float(advisor['max_fertility_score']),
        default_goal_trait=advisor['default_goal_trait']
    )

    thresholds = raw_config['risk_thresholds']
    risk_thresholds = RiskThresholds(
        extreme=float(thresholds['extreme']),
        high=float(thresholds['high']),
        moderate=float(thresholds['moderate'])
    )

    traits = [
        TraitConfig(
            name=t['name'],
            display_name=t['display_name'],
            genotypes=t['genotypes'],
            status_genotypes=t['status_genotypes'],
            genotype_field=t.get('genotype_field'),
            status_field=t.get('status_field')
        )
        for t in raw_config['traits']
    ]

    return EngineConfig(
        ancestry=AncestryConfig(max_generations=raw_config['ancestry']['max_generations']),
        validation=ValidationConfig(
            min_parent_age_months=raw_config['validation']['min_parent_age_months'],
            days_per_month=raw_config['validation']['days_per_month']
        ),
        risk_thresholds=risk_thresholds,
        advisor=advisor_config,
        traits=traits,
        raw_config=raw_config
    )
