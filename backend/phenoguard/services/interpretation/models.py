"""
Data models for the interpretation service.

Reference entities mirror the rows of the reference data store and are
read-only once loaded. Result models are created per request and serialized
with camelCase aliases, which are the field names clients depend on.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union
from enum import Enum


class EffectKind(str, Enum):
    """Kind of effect a drug has on a gene product."""
    INHIBITOR = "inhibitor"
    INDUCER = "inducer"
    NONE = "none"


# ============================================================================
# Reference entities
# ============================================================================

class Gene(BaseModel):
    """A gene known to the reference data store."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Internal gene identity")
    symbol: str = Field(..., description="Gene symbol (e.g., CYP2C19)")


class Allele(BaseModel):
    """A star allele and its activity value."""
    model_config = ConfigDict(frozen=True)

    gene_id: int = Field(..., description="Owning gene identity")
    name: str = Field(..., description="Allele name, unique within the gene (e.g., *2)")
    activity_score: float = Field(..., description="Activity value contributed by one copy")


class PhenotypeRule(BaseModel):
    """Inclusive activity score range mapped to a phenotype."""
    model_config = ConfigDict(frozen=True)

    gene_id: int = Field(..., description="Owning gene identity")
    phenotype: str = Field(..., description="Phenotype code (e.g., IM)")
    min_score: float = Field(..., description="Lower bound, inclusive")
    max_score: float = Field(..., description="Upper bound, inclusive")

    def contains(self, score: float) -> bool:
        return self.min_score <= score <= self.max_score


class DrugGeneEffect(BaseModel):
    """Recorded effect of a drug on a gene product."""
    model_config = ConfigDict(frozen=True)

    drug: str = Field(..., description="Drug name")
    gene_id: int = Field(..., description="Affected gene identity")
    effect: EffectKind = Field(..., description="inhibitor, inducer or none")
    strength: Optional[str] = Field(None, description="Effect strength (strong/moderate/weak)")


class GuidelineEntry(BaseModel):
    """Clinical guidance for a (gene, phenotype, drug) combination."""
    model_config = ConfigDict(frozen=True)

    gene_id: int = Field(..., description="Gene identity")
    phenotype: str = Field(..., description="Phenotype code the guidance applies to")
    drug: str = Field(..., description="Planned drug name")
    recommendation_summary: str = Field(..., description="Recommendation text")
    alternatives: Optional[str] = Field(None, description="Alternative therapies")
    evidence_level: Optional[str] = Field(None, description="Evidence grading (e.g., CPIC A)")
    source: Optional[str] = Field(None, description="Guideline source")


# ============================================================================
# Results
# ============================================================================

class _ResultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenotypeInterpretation(_ResultModel):
    """Genotype stage output: activity score and baseline phenotype."""
    gene: str = Field(..., description="Gene symbol as requested")
    diplotype: List[str] = Field(..., description="The two allele names")
    activity_score: float = Field(..., alias="activityScore", description="Sum of both allele scores")
    phenotype: str = Field(..., description="Baseline phenotype code")


class PhenoconversionResult(_ResultModel):
    """Baseline phenotype and its inhibition-adjusted counterpart."""
    baseline_phenotype: str = Field(..., alias="baselinePhenotype")
    adjusted_phenotype: str = Field(..., alias="adjustedPhenotype")
    reason: Optional[str] = Field(None, description="Set only when the phenotype was adjusted")

    @property
    def converted(self) -> bool:
        return self.adjusted_phenotype != self.baseline_phenotype


class GuidanceFound(_ResultModel):
    """A guideline entry matched the (gene, phenotype, drug) key."""
    recommendation: str
    alternatives: Optional[str] = None
    evidence_level: Optional[str] = Field(None, alias="evidenceLevel")
    source: Optional[str] = None


class GuidanceAbsent(_ResultModel):
    """No guideline covers the (gene, phenotype, drug) key."""
    message: str


Guidance = Union[GuidanceFound, GuidanceAbsent]


class FullInterpretation(_ResultModel):
    """Aggregate of every stage for one request."""
    genetics: GenotypeInterpretation
    phenoconversion: PhenoconversionResult
    recommendation: Guidance
