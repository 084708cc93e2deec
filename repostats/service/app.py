"""FastAPI application entrypoint for repostats service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..errors import MiningError, RepoStatsError
from ..features import EmbeddingStore, FeaturePipeline
from ..logging import get_logger, log_failure
from ..miner import RepositoryMiner
from ..models import RepositoryInfo


class MineRequest(BaseModel):
    path: str
    name: Optional[str] = None
    exclude: List[str] = Field(default_factory=list)


class EmbedRequest(MineRequest):
    store_path: Optional[str] = None


class EmbedResponse(BaseModel):
    repository: str
    tokens: int
    store_path: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_miner() -> RepositoryMiner:
    return RepositoryMiner()


def create_app(
    miner_factory: Callable[[], RepositoryMiner] = _default_miner,
) -> FastAPI:
    """Create the FastAPI application exposing mining operations."""

    app = FastAPI(title="repostats", version="0.1.0")
    logger = get_logger("service")

    async def get_miner() -> RepositoryMiner:
        return miner_factory()

    async def _mine(miner: RepositoryMiner, payload: MineRequest) -> RepositoryInfo:
        def _run() -> RepositoryInfo:
            return miner.mine(payload.path, name=payload.name, exclude=payload.exclude)

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, _run)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/mine")
    async def mine(
        payload: MineRequest,
        miner: RepositoryMiner = Depends(get_miner),
    ) -> Dict[str, Any]:
        repository = await _mine(miner, payload)
        return repository.to_dict()

    @app.post("/embed", response_model=EmbedResponse)
    async def embed(
        payload: EmbedRequest,
        miner: RepositoryMiner = Depends(get_miner),
    ) -> EmbedResponse:
        repository = await _mine(miner, payload)
        store = EmbeddingStore(Path(payload.store_path)) if payload.store_path else None
        pipeline = FeaturePipeline(store=store)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, pipeline.run, repository)
        return EmbedResponse(
            repository=repository.name,
            tokens=len(result.tokens),
            store_path=payload.store_path,
        )

    @app.exception_handler(MiningError)
    async def mining_error_handler(_: Any, exc: MiningError) -> JSONResponse:
        log_failure(logger, exc)
        status_code = 404 if exc.stage == "open" else 422
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "stage": exc.stage},
        )

    @app.exception_handler(RepoStatsError)
    async def repostats_error_handler(_: Any, exc: RepoStatsError) -> JSONResponse:
        log_failure(logger, exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
