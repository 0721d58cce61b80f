from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from phenoguard.services.interpretation.models import (
    FullInterpretation,
    GenotypeInterpretation,
    Guidance,
    PhenoconversionResult,
)


# ============================================================================
# Requests
# ============================================================================
# Values are optional here; the pipeline validates them and raises ValidationError.

class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenotypeRequest(_Request):
    gene: Optional[str] = Field(None, description="Gene symbol (e.g., CYP2C19)")
    diplotype: Optional[List[str]] = Field(None, description="Exactly two allele names (e.g., ['*1', '*2'])")


class PhenoconversionRequest(_Request):
    gene: Optional[str] = Field(None, description="Gene symbol")
    phenotype: Optional[str] = Field(None, description="Baseline phenotype code (e.g., NM)")
    current_drugs: List[str] = Field(default_factory=list, alias="currentDrugs",
                                     description="Concurrent drugs, in the order given by the prescriber")


class RecommendationRequest(_Request):
    gene: Optional[str] = Field(None, description="Gene symbol")
    phenotype: Optional[str] = Field(None, description="Phenotype code")
    drug: Optional[str] = Field(None, description="Planned drug")


class FullInterpretationRequest(_Request):
    gene: Optional[str] = Field(None, description="Gene symbol")
    diplotype: Optional[List[str]] = Field(None, description="Exactly two allele names")
    current_drugs: List[str] = Field(default_factory=list, alias="currentDrugs")
    planned_drug: Optional[str] = Field(None, alias="plannedDrug")


# ============================================================================
# Responses
# ============================================================================

class GenotypeResponse(BaseModel):
    ok: bool = True
    result: GenotypeInterpretation


class PhenoconversionResponse(BaseModel):
    ok: bool = True
    result: PhenoconversionResult


class RecommendationResponse(BaseModel):
    ok: bool = True
    result: Guidance


class FullInterpretationResponse(FullInterpretation):
    ok: bool = True


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str = Field(..., description="Human-readable failure message")
