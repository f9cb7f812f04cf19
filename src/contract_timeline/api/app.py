"""FastAPI application for the Contract Timeline Analyzer.

This module exposes the analysis endpoint and the contract store over HTTP.

Usage (from project root, after installing the package):

    uvicorn contract_timeline.api.app:create_app --factory --reload

Then POST a PDF as multipart/form-data (field ``file``) to /api/contracts,
or POST ``{"fileContent": ..., "fileName": ...}`` to /api/analyze.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, File, HTTPException, Response, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..analysis.analyzer import ContractAnalyzer
from ..analysis.completion_client import GeminiCompletionClient
from ..analysis.exceptions import (
    CompletionTimeoutError,
    ContractAnalysisError,
    UploadFailedError,
    UploadInProgressError,
)
from ..config.config_manager import configure_logging, load_config
from ..config.models import AppConfig
from ..interfaces.completion import ICompletionClient
from ..interfaces.extractor import ITextExtractor
from ..models.contract import UploadedFile
from ..orchestrator import UploadOrchestrator
from ..parsers.exceptions import FileTooLargeError, UnsupportedFormatError
from ..parsers.serialization import ContractSerializer
from ..parsers.text_extractor import DocumentTextExtractor
from ..storage.contract_store import ContractStore
from ..storage.kv_storage import SqlKeyValueStorage
from ..timeline.views import build_timeline


logger = logging.getLogger(__name__)

TIMEOUT_STATUS_CODE = 408


class AnalyzeRequest(BaseModel):
    """Body of the analysis endpoint."""
    fileContent: str
    fileName: str


class ActiveContractRequest(BaseModel):
    """Body for selecting the active contract; null clears it."""
    contractId: Optional[str] = None


def create_app(
    config: Optional[AppConfig] = None,
    store: Optional[ContractStore] = None,
    completion_client: Optional[ICompletionClient] = None,
    extractor: Optional[ITextExtractor] = None,
) -> FastAPI:
    """
    Build the application and its collaborators.

    Args:
        config: Application configuration (loaded from the environment if
            not provided).
        store: Contract store (a SQL-backed store is created and loaded if
            not provided).
        completion_client: Model client (a Gemini client is created when an
            API key is configured).
        extractor: Text extractor (created from config if not provided).
    """
    config = config or load_config()
    configure_logging(config.log_level)

    db_manager = None
    if store is None:
        kv_storage = SqlKeyValueStorage(database_url=config.database_url)
        db_manager = kv_storage.db_manager
        store = ContractStore(
            kv_storage,
            contracts_key=config.contracts_key,
            active_contract_key=config.active_contract_key,
        )
        store.load()

    if completion_client is None and config.has_api_key:
        completion_client = GeminiCompletionClient(
            api_key=config.gemini_api_key,
            model_name=config.model_name,
            timeout=config.request_timeout,
        )

    analyzer = ContractAnalyzer(
        completion_client,
        fixture_filename=config.fixture_filename,
        fixture_marker=config.fixture_marker,
    )
    extractor = extractor or DocumentTextExtractor(
        max_upload_bytes=config.max_upload_bytes,
        allowed_extensions=config.allowed_extensions,
    )
    orchestrator = UploadOrchestrator(
        store,
        extractor=extractor,
        analyzer=analyzer,
        stage_delay=config.stage_delay,
    )

    app = FastAPI(title="Contract Timeline API", version="0.1.0")
    app.state.config = config
    app.state.store = store
    app.state.analyzer = analyzer
    app.state.orchestrator = orchestrator

    @app.get("/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "contracts": len(store),
            "modelConfigured": analyzer.has_completion_client,
            "database": db_manager.health_check() if db_manager is not None else None,
        }

    @app.post("/api/analyze")
    async def analyze(request: AnalyzeRequest) -> JSONResponse:
        """Analyze extracted contract text and return the raw analysis.

        Timeouts are reported with status 408 so callers can classify them
        without inspecting the body.
        """
        try:
            analysis = await analyzer.analyze(request.fileContent, request.fileName)
        except CompletionTimeoutError as exc:
            logger.warning(f"Analysis of {request.fileName} timed out: {exc}")
            return JSONResponse(
                status_code=TIMEOUT_STATUS_CODE,
                content={
                    "success": False,
                    "error": "TIMEOUT",
                    "message": f"Request timed out after {exc.timeout:g} seconds",
                },
            )
        except ContractAnalysisError as exc:
            logger.error(f"Analysis of {request.fileName} failed: {exc.to_dict()}")
            return JSONResponse(
                status_code=500,
                content={"success": False, "error": exc.message or "Unknown error"},
            )

        return JSONResponse(
            status_code=200,
            content={"success": True, "data": ContractSerializer.analysis_to_dict(analysis)},
        )

    @app.post("/api/contracts", status_code=201)
    async def upload_contract(
        file: UploadFile = File(..., description="Contract document (.pdf)"),
    ) -> JSONResponse:
        """Run the upload pipeline and commit the contract as active."""
        uploaded = UploadedFile(
            filename=file.filename or "upload.pdf",
            content=await file.read(),
            content_type=file.content_type,
        )
        try:
            contract = await orchestrator.upload(uploaded)
        except UploadFailedError as exc:
            return JSONResponse(
                status_code=_status_for_failure(exc),
                content={
                    "success": False,
                    "error": "TIMEOUT" if exc.is_timeout else "ANALYSIS_FAILED",
                    "message": exc.user_message,
                },
            )

        return JSONResponse(
            status_code=201,
            content={"success": True, "data": ContractSerializer.contract_to_dict(contract)},
        )

    @app.get("/api/contracts")
    async def list_contracts() -> dict:
        active = store.active_contract
        return {
            "contracts": [ContractSerializer.contract_to_dict(c) for c in store.contracts],
            "activeContractId": active.contract_id if active else None,
        }

    @app.get("/api/contracts/active")
    async def get_active_contract() -> dict:
        active = store.active_contract
        return {"contract": ContractSerializer.contract_to_dict(active) if active else None}

    @app.put("/api/contracts/active")
    async def set_active_contract(request: ActiveContractRequest) -> dict:
        if request.contractId is None:
            store.set_active(None)
            return {"contract": None}
        contract = store.get(request.contractId)
        if contract is None:
            raise HTTPException(status_code=404, detail="Contract not found")
        store.set_active(contract)
        return {"contract": ContractSerializer.contract_to_dict(contract)}

    @app.get("/api/contracts/{contract_id}")
    async def get_contract(contract_id: str) -> dict:
        contract = store.get(contract_id)
        if contract is None:
            raise HTTPException(status_code=404, detail="Contract not found")
        return ContractSerializer.contract_to_dict(contract)

    @app.delete("/api/contracts/{contract_id}", status_code=204)
    async def delete_contract(contract_id: str) -> Response:
        store.remove(contract_id)
        return Response(status_code=204)

    @app.get("/api/contracts/{contract_id}/timeline")
    async def get_timeline(contract_id: str) -> dict:
        contract = store.get(contract_id)
        if contract is None:
            raise HTTPException(status_code=404, detail="Contract not found")
        return build_timeline(contract, datetime.now())

    return app


def _status_for_failure(failure: UploadFailedError) -> int:
    """HTTP status for a classified upload failure."""
    if failure.is_timeout:
        return TIMEOUT_STATUS_CODE
    if isinstance(failure.cause, UploadInProgressError):
        return 409
    if isinstance(failure.cause, UnsupportedFormatError):
        return 415
    if isinstance(failure.cause, FileTooLargeError):
        return 413
    return 500
