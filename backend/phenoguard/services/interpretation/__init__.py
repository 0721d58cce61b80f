"""
Interpretation Service

Deterministic, rule-based pharmacogenomic interpretation: diplotype to activity
score to phenotype, inhibitor-driven phenoconversion, and guideline lookup for a
planned drug.
"""

from .models import (
    Gene,
    Allele,
    PhenotypeRule,
    DrugGeneEffect,
    EffectKind,
    GuidelineEntry,
    GenotypeInterpretation,
    PhenoconversionResult,
    GuidanceFound,
    GuidanceAbsent,
    FullInterpretation,
)
from .errors import (
    InterpretationError,
    ValidationError,
    NotFoundError,
    NoMatchError,
    AmbiguousRuleError,
    StoreError,
)
from .store import (
    ReferenceDataStore,
    ReferenceData,
    InMemoryReferenceStore,
    load_reference_data,
)
from .gene_registry import GeneRegistry
from .activity_score import ActivityScoreCalculator
from .phenotype_classifier import PhenotypeClassifier
from .phenoconversion import PhenoconversionEngine
from .recommendation import RecommendationResolver
from .interpreter import Interpreter

__all__ = [
    # Models
    'Gene',
    'Allele',
    'PhenotypeRule',
    'DrugGeneEffect',
    'EffectKind',
    'GuidelineEntry',
    'GenotypeInterpretation',
    'PhenoconversionResult',
    'GuidanceFound',
    'GuidanceAbsent',
    'FullInterpretation',

    # Errors
    'InterpretationError',
    'ValidationError',
    'NotFoundError',
    'NoMatchError',
    'AmbiguousRuleError',
    'StoreError',

    # Reference data
    'ReferenceDataStore',
    'ReferenceData',
    'InMemoryReferenceStore',
    'load_reference_data',

    # Pipeline
    'GeneRegistry',
    'ActivityScoreCalculator',
    'PhenotypeClassifier',
    'PhenoconversionEngine',
    'RecommendationResolver',
    'Interpreter',
]
