from fastapi import APIRouter
from phenoguard.api.routes import interpretation

api_router = APIRouter()

api_router.include_router(interpretation.router, prefix="/interpret", tags=["Interpretation"])


@api_router.get("/health", tags=["Health"])
def health_check():
    return {"ok": True}
