"""
Growth Analysis API Server
==========================

Thin HTTP surface over the analysis orchestrator.

Endpoints:
- POST /api/analyze  -> analyze one behavior observation
- GET  /api/analyze  -> analyzer availability
- GET  /health       -> liveness

Every well-formed analyze request gets a complete result; an analyzer
failure never turns into an HTTP error.

Usage:
    uvicorn backend.api.server:app --reload
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from analysis import AnalysisOrchestrator, AnalysisRequest, AnalysisSettings, build_default_orchestrator
from .mapper import map_result_to_dto, map_status_to_dto


logger = logging.getLogger(__name__)


# =============================================================================
# REQUEST SCHEMA
# =============================================================================

class AnalyzeBody(BaseModel):
    """Shape validation happens here, before the orchestrator."""
    childAge: int = Field(..., ge=0, description="Child age in months")
    behavior: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    context: Optional[str] = None
    childName: Optional[str] = None

    def to_request(self) -> AnalysisRequest:
        return AnalysisRequest.create(
            child_age_months=self.childAge,
            behavior_text=self.behavior,
            category=self.category,
            context=self.context,
            child_name=self.childName,
        )


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(
    orchestrator: Optional[AnalysisOrchestrator] = None,
    settings: Optional[AnalysisSettings] = None
) -> FastAPI:
    """
    Build the API. The orchestrator is created once in the lifespan
    (or injected, for tests) and lives on app.state.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if orchestrator is not None:
            app.state.orchestrator = orchestrator
        else:
            app.state.orchestrator = build_default_orchestrator(
                settings or AnalysisSettings.from_env()
            )
        logger.info("Analysis orchestrator ready")

        yield

        logger.info("Shutting down analysis API")
        app.state.orchestrator = None

    app = FastAPI(
        title="Growth Analysis API",
        version="0.1.0",
        description="Behavior interpretation with analyzer fallback",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": "Invalid request format",
                "details": jsonable_errors(exc),
            },
        )

    @app.get("/health")
    async def health_check():
        return {"status": "online"}

    @app.post("/api/analyze")
    async def analyze(body: AnalyzeBody, orch: AnalysisOrchestrator = Depends(get_orchestrator)):
        """Analyze one observation. Always success for a valid body."""
        try:
            request = body.to_request()
        except ValueError as e:
            # e.g. whitespace-only behavior passes min_length but not create()
            return JSONResponse(
                status_code=422,
                content={"success": False, "error": "Invalid request format", "details": [str(e)]},
            )

        result = await orch.analyze(request)
        return {"success": True, "data": map_result_to_dto(result)}

    @app.get("/api/analyze")
    async def analyzer_status(orch: AnalysisOrchestrator = Depends(get_orchestrator)):
        statuses = await orch.list_backend_status()
        current = await orch.current_backend(statuses)
        return {"success": True, "data": map_status_to_dto(statuses, current)}

    return app


def get_orchestrator(request: Request) -> AnalysisOrchestrator:
    """FastAPI dependency: the orchestrator built at startup."""
    return request.app.state.orchestrator


def jsonable_errors(exc: RequestValidationError):
    """Validation errors reduced to location + message."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


app = create_app()
