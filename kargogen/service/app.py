"""FastAPI application entrypoint for kargogen service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..cluster import ConnectivityError
from ..config import ConfigError
from ..models import DeploymentReport, GenerationReport
from ..orchestrator import Orchestrator
from ..scanner import DiscoveryError


class GenerateRequest(BaseModel):
    config_path: Optional[str] = None
    service_name: Optional[str] = None
    image_repository: Optional[str] = None
    git_repo_url: Optional[str] = None
    region: Optional[str] = None
    environment: Optional[str] = None
    flavor: Optional[str] = None
    force: bool = False


class ServiceGenerationResult(BaseModel):
    service: str
    status: str
    files: List[str] = []
    error: Optional[str] = None
    unresolved_tokens: List[str] = []


class GenerateResponse(BaseModel):
    success_count: int
    skipped_count: int
    fail_count: int
    services: List[ServiceGenerationResult]


class DeployRequest(BaseModel):
    config_path: Optional[str] = None
    service_name: Optional[str] = None
    skip_namespace: bool = False
    dry_run: bool = False


class ServiceDeploymentResult(BaseModel):
    service: str
    success: bool
    applied: List[str] = []
    error: Optional[str] = None


class DeployResponse(BaseModel):
    success_count: int
    fail_count: int
    services: List[ServiceDeploymentResult]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
    *,
    config_path: str = ".",
) -> FastAPI:
    """Create the FastAPI application exposing kargogen operations."""
    app = FastAPI(title="kargogen", version=__version__)

    async def get_orchestrator() -> Orchestrator:
        # One orchestrator per request keeps runs independent.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        def _run_generate() -> GenerationReport:
            return orchestrator.run_generate(
                payload.config_path or config_path,
                service_filter=payload.service_name,
                image_repository=payload.image_repository,
                git_repo_url=payload.git_repo_url,
                region=payload.region,
                environment=payload.environment,
                flavor=payload.flavor,
                force=payload.force,
            )

        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(None, _run_generate)
        return GenerateResponse(
            success_count=report.success_count,
            skipped_count=report.skipped_count,
            fail_count=report.fail_count,
            services=[
                ServiceGenerationResult(
                    service=outcome.service,
                    status=outcome.status.value,
                    files=list(outcome.files),
                    error=outcome.error,
                    unresolved_tokens=list(outcome.unresolved_tokens),
                )
                for outcome in report.outcomes
            ],
        )

    @app.post("/deploy", response_model=DeployResponse)
    async def deploy(
        payload: DeployRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> DeployResponse:
        def _run_deploy() -> DeploymentReport:
            return orchestrator.run_deploy(
                payload.config_path or config_path,
                service_filter=payload.service_name,
                skip_namespace=payload.skip_namespace,
                dry_run=payload.dry_run,
            )

        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(None, _run_deploy)
        return DeployResponse(
            success_count=report.success_count,
            fail_count=report.fail_count,
            services=[
                ServiceDeploymentResult(
                    service=outcome.service,
                    success=outcome.success,
                    applied=list(outcome.applied),
                    error=outcome.error,
                )
                for outcome in report.outcomes
            ],
        )

    @app.exception_handler(DiscoveryError)
    async def discovery_error_handler(_: Any, exc: DiscoveryError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConnectivityError)
    async def connectivity_error_handler(_: Any, exc: ConnectivityError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000, config_path: str = "."
) -> None:  # pragma: no cover - integration path
    app = create_app(config_path=config_path)
    uvicorn.run(app, host=host, port=port)
