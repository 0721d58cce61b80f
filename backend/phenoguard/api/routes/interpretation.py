"""
Interpretation API - genotype, phenoconversion, recommendation and full pipeline.

Endpoints:
- POST /api/interpret/genotype         - Diplotype -> activity score -> phenotype
- POST /api/interpret/phenoconversion  - Baseline phenotype + concurrent drugs -> adjusted phenotype
- POST /api/interpret/recommendation   - Guidance for (gene, phenotype, drug)
- POST /api/interpret/full             - All of the above for a planned drug

Handlers are plain functions so blocking store lookups run in the threadpool.
Pipeline failures are turned into {"ok": false, "error": ...} by the
InterpretationError handler registered in phenoguard.main.
"""

import logging

from fastapi import APIRouter, Depends

from phenoguard.api.deps import get_interpreter
from phenoguard.schemas.interpretation_schema import (
    ErrorResponse,
    FullInterpretationRequest,
    FullInterpretationResponse,
    GenotypeRequest,
    GenotypeResponse,
    PhenoconversionRequest,
    PhenoconversionResponse,
    RecommendationRequest,
    RecommendationResponse,
)
from phenoguard.services.interpretation.interpreter import Interpreter

router = APIRouter()
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    404: {"model": ErrorResponse, "description": "Unknown gene or allele"},
    409: {"model": ErrorResponse, "description": "Ambiguous reference data (strict mode)"},
    422: {"model": ErrorResponse, "description": "No phenotype rule matched"},
    503: {"model": ErrorResponse, "description": "Reference data store unavailable"},
}


@router.post(
    "/genotype",
    response_model=GenotypeResponse,
    responses=ERROR_RESPONSES,
    summary="Interpret Genotype",
)
def interpret_genotype(
    body: GenotypeRequest,
    interpreter: Interpreter = Depends(get_interpreter),
) -> GenotypeResponse:
    result = interpreter.interpret_genotype(body.gene, body.diplotype)
    return GenotypeResponse(result=result)


@router.post(
    "/phenoconversion",
    response_model=PhenoconversionResponse,
    responses=ERROR_RESPONSES,
    summary="Apply Phenoconversion",
)
def apply_phenoconversion(
    body: PhenoconversionRequest,
    interpreter: Interpreter = Depends(get_interpreter),
) -> PhenoconversionResponse:
    result = interpreter.apply_phenoconversion(body.gene, body.phenotype, body.current_drugs)
    return PhenoconversionResponse(result=result)


@router.post(
    "/recommendation",
    response_model=RecommendationResponse,
    responses=ERROR_RESPONSES,
    summary="Get Drug Recommendation",
)
def get_recommendation(
    body: RecommendationRequest,
    interpreter: Interpreter = Depends(get_interpreter),
) -> RecommendationResponse:
    result = interpreter.get_recommendation(body.gene, body.phenotype, body.drug)
    return RecommendationResponse(result=result)


@router.post(
    "/full",
    response_model=FullInterpretationResponse,
    responses=ERROR_RESPONSES,
    summary="Full Interpretation",
    description="Genotype interpretation, phenoconversion by concurrent drugs, and guidance for the planned drug.",
)
def interpret_full(
    body: FullInterpretationRequest,
    interpreter: Interpreter = Depends(get_interpreter),
) -> FullInterpretationResponse:
    """
    - **gene**: Gene symbol (e.g., CYP2C19)
    - **diplotype**: Two allele names (e.g., ["*1", "*2"])
    - **currentDrugs**: Concurrent medications, in order
    - **plannedDrug**: Drug to be prescribed
    """
    full = interpreter.interpret_full(
        body.gene, body.diplotype, body.current_drugs, body.planned_drug
    )
    return FullInterpretationResponse(
        genetics=full.genetics,
        phenoconversion=full.phenoconversion,
        recommendation=full.recommendation,
    )
