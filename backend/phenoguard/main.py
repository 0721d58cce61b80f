import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from phenoguard.api.router import api_router
from phenoguard.core import logging as _logging  # Initialize logging
from phenoguard.core.config import get_config
from phenoguard.services.interpretation.errors import (
    AmbiguousRuleError,
    InterpretationError,
    NoMatchError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from phenoguard.services.interpretation.factory import create_interpreter
from phenoguard.services.interpretation.interpreter import Interpreter

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    AmbiguousRuleError: 409,
    NoMatchError: 422,
    StoreError: 503,
}


def status_for(exc: InterpretationError) -> int:
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 400


async def interpretation_error_handler(request: Request, exc: InterpretationError) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"ok": False, "error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies get the same envelope as pipeline validation failures."""
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "body"
    message = f"{field}: {first.get('msg', 'invalid request')}"
    return JSONResponse(status_code=400, content={"ok": False, "error": message})


def create_app(interpreter: Optional[Interpreter] = None) -> FastAPI:
    """
    Build the API. When no interpreter is given one is created from the
    configuration at startup.
    """
    config = get_config()

    app = FastAPI(
        title="PhenoGuard API",
        description="Pharmacogenomic interpretation with drug-induced phenoconversion",
        version="1.0.0"
    )

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InterpretationError, interpretation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(api_router, prefix="/api")
    app.state.interpreter = interpreter

    @app.on_event("startup")
    def startup_event():
        if app.state.interpreter is None:
            logger.info(f"Building interpreter (store={config.store}, strict={config.strict})")
            app.state.interpreter = create_interpreter(config)

    @app.on_event("shutdown")
    def shutdown_event():
        store = getattr(app.state.interpreter, "store", None)
        if hasattr(store, "close"):
            store.close()

    return app


app = create_app()
