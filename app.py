# app.py
# DEPENDENCIES
import sys
import time
import signal
import uvicorn
from typing import Any
from typing import Dict
from fastapi import File
from fastapi import Form
from fastapi import FastAPI
from fastapi import Depends
from fastapi import Request
from typing import Optional
from datetime import datetime
from pydantic import BaseModel
from fastapi import APIRouter
from fastapi import UploadFile
from fastapi import HTTPException
from fastapi import BackgroundTasks
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from utils.logger import log_info
from utils.logger import log_error
from config.settings import settings
from utils.logger import ContractAnalyzerLogger
from services.exceptions import ContractAnalysisError
from services.contract_analyzer import ContractAnalysisService


# PYDANTIC SCHEMAS
class HealthResponse(BaseModel):
    status              : str
    version             : str
    timestamp           : str
    analysis_configured : bool


class AnalysisStartedResponse(BaseModel):
    status      : str
    message     : str
    contract_id : str


class ErrorResponse(BaseModel):
    error     : str
    code      : Optional[str] = None
    detail    : str
    timestamp : str


def error_response(status_code: int, error: str, code: Optional[str] = None, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(status_code = status_code,
                        content     = ErrorResponse(error     = error,
                                                    code      = code,
                                                    detail    = detail or error,
                                                    timestamp = datetime.now().isoformat(),
                                                   ).model_dump(),
                       )


def get_analysis_service(request: Request) -> ContractAnalysisService:
    service = getattr(request.app.state, "analysis_service", None)

    if service is None:
        raise HTTPException(status_code = 503,
                            detail      = "Service not initialized",
                           )

    return service


def run_analysis_in_background(service: ContractAnalysisService, contract_id: str, reuse_extracted_text: bool = False):
    """
    Background task body: the contract is already claimed, failures are recorded on the contract itself
    """
    try:
        service.run_analysis(contract_id, reuse_extracted_text = reuse_extracted_text)

    except Exception as e:
        log_error(e, context = {"component" : "api", "operation" : "background_analysis", "contract_id" : contract_id})


# ROUTES
router = APIRouter(prefix = settings.API_PREFIX)


@router.get("/health", response_model = HealthResponse)
async def health_check(service: ContractAnalysisService = Depends(get_analysis_service)):
    return HealthResponse(status              = "healthy",
                          version             = settings.APP_VERSION,
                          timestamp           = datetime.now().isoformat(),
                          analysis_configured = service.is_configured,
                         )


@router.post("/contracts", status_code = 201)
async def upload_contract(file: UploadFile = File(...), service: ContractAnalysisService = Depends(get_analysis_service)) -> Dict[str, Any]:
    content = await file.read()
    record  = service.register_contract(file_name    = file.filename,
                                        content      = content,
                                        content_type = file.content_type,
                                       )

    return record.to_dict()


@router.get("/contracts")
def list_contracts(service: ContractAnalysisService = Depends(get_analysis_service)) -> Dict[str, Any]:
    return {"contracts" : [record.to_dict() for record in service.list_contracts()]}


@router.get("/contracts/{contract_id}")
def get_contract(contract_id: str, service: ContractAnalysisService = Depends(get_analysis_service)) -> Dict[str, Any]:
    return service.get_contract(contract_id).to_dict()


@router.post("/contracts/{contract_id}/analyze", response_model = AnalysisStartedResponse)
def start_contract_analysis(contract_id: str, background_tasks: BackgroundTasks, service: ContractAnalysisService = Depends(get_analysis_service)):
    service.start_analysis(contract_id)
    background_tasks.add_task(run_analysis_in_background, service, contract_id)

    log_info("Analysis started", contract_id = contract_id)

    return AnalysisStartedResponse(status      = "processing",
                                   message     = "Analysis started. Poll the contract endpoint for status.",
                                   contract_id = contract_id,
                                  )


@router.post("/contracts/{contract_id}/reanalyze", response_model = AnalysisStartedResponse)
def start_contract_reanalysis(contract_id: str, background_tasks: BackgroundTasks, service: ContractAnalysisService = Depends(get_analysis_service)):
    service.start_analysis(contract_id)
    background_tasks.add_task(run_analysis_in_background, service, contract_id, True)

    log_info("Re-analysis started", contract_id = contract_id)

    return AnalysisStartedResponse(status      = "processing",
                                   message     = "Re-analysis started. Poll the contract endpoint for status.",
                                   contract_id = contract_id,
                                  )


@router.get("/analysis/{contract_id}")
def get_contract_analysis(contract_id: str, service: ContractAnalysisService = Depends(get_analysis_service)) -> Dict[str, Any]:
    record   = service.get_contract(contract_id)
    analysis = service.get_analysis(contract_id)

    return {"contract_id"   : record.contract_id,
            "status"        : record.status.value,
            "risk_score"    : record.risk_score,
            "error_code"    : record.error_code,
            "error_message" : record.error_message,
            "analysis"      : analysis.to_dict() if analysis else None,
           }


@router.post("/analyze/text")
def analyze_contract_text(contract_text: str = Form(..., description = "Contract text to analyze"), service: ContractAnalysisService = Depends(get_analysis_service)) -> Dict[str, Any]:
    result = service.analyze_text(contract_text)

    log_info("Text analysis completed",
             text_length = len(contract_text),
             risk_score  = result.overall_risk_score,
            )

    return result.to_dict()


# APPLICATION
def create_app(analysis_service: Optional[ContractAnalysisService] = None) -> FastAPI:
    """
    Build the FastAPI application

    Arguments:
    ----------
        analysis_service { ContractAnalysisService } : Service to serve (default: built from settings at startup)
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log_info(f"{settings.APP_NAME} v{settings.APP_VERSION} starting up")

        if getattr(app.state, "analysis_service", None) is None:
            app.state.analysis_service = ContractAnalysisService.from_settings()

        log_info("Service ready",
                 host                = settings.HOST,
                 port                = settings.PORT,
                 analysis_configured = app.state.analysis_service.is_configured,
                )

        try:
            yield

        finally:
            log_info("Server shutdown complete")

    application = FastAPI(title       = settings.APP_NAME,
                          version     = settings.APP_VERSION,
                          description = "Clause-level risk analysis of long legal contracts",
                          docs_url    = "/api/docs",
                          redoc_url   = "/api/redoc",
                          lifespan    = lifespan,
                         )

    application.state.analysis_service = analysis_service

    application.add_middleware(CORSMiddleware,
                               allow_origins     = settings.CORS_ORIGINS,
                               allow_credentials = settings.CORS_ALLOW_CREDENTIALS,
                               allow_methods     = settings.CORS_ALLOW_METHODS,
                               allow_headers     = settings.CORS_ALLOW_HEADERS,
                              )

    application.include_router(router)


    # ERROR HANDLERS AND MIDDLEWARE
    @application.exception_handler(ContractAnalysisError)
    async def contract_analysis_exception_handler(request: Request, exc: ContractAnalysisError):
        return error_response(status_code = exc.status_code,
                              error       = exc.message,
                              code        = exc.code,
                             )


    @application.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return error_response(status_code = exc.status_code,
                              error       = str(exc.detail),
                             )


    @application.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        log_error(exc, context = {"component" : "api", "path" : request.url.path})

        return error_response(status_code = 500,
                              error       = "Internal server error",
                              code        = "INTERNAL_ERROR",
                              detail      = str(exc),
                             )


    @application.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time   = time.time()
        response     = await call_next(request)
        process_time = time.time() - start_time

        log_info(f"API Request: {request.method} {request.url.path}",
                 status_code = response.status_code,
                 duration    = round(process_time, 3),
                )

        return response

    return application


ContractAnalyzerLogger.setup()

app = create_app()


# MAIN
def main():
    def signal_handler(sig, frame):
        print("\nReceived Ctrl+C, shutting down gracefully...")
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)

    try:
        uvicorn.run("app:app",
                    host      = settings.HOST,
                    port      = settings.PORT,
                    reload    = settings.RELOAD,
                    workers   = settings.WORKERS,
                    log_level = settings.LOG_LEVEL.lower(),
                   )

    except KeyboardInterrupt:
        print("\nServer stopped by user")

    except Exception as e:
        log_error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
