import logging.config
import traceback
import yaml
import os
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import routers
from aiassistant.rest.routers import chat
from aiassistant.rest.models.errors import ErrorResponse
from aiassistant.rest.models.health import HealthResponse
from aiassistant.rest.dependencies.providers import get_assistant_service
from aiassistant.service.assistant import AIAssistantService
from aiassistant.service.config import Config

# Configure logging from YAML file
def setup_logging():
    """Load logging configuration from YAML file"""

    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    logs_dir = os.path.join(project_root, "logs")

    if not os.path.exists(logs_dir):
        os.makedirs(logs_dir)

    config_path = os.path.join(os.path.dirname(__file__), "logging_config.yaml")
    if os.path.exists(config_path):
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
            log_file = config.get("handlers", {}).get("file")
            if log_file and not os.path.isabs(log_file["filename"]):
                log_file["filename"] = os.path.join(project_root, log_file["filename"])
            logging.config.dictConfig(config)
    else:
        # Fallback to basic configuration if file not found
        logging.basicConfig(
            level=logging.INFO,
            format="[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
        )
        logging.warning(f"Logging configuration file not found at {config_path}, using default configuration")

setup_logging()
LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # let background thread deletions finish before the loop goes away
    override = app.dependency_overrides.get(get_assistant_service)
    service = override() if override else get_assistant_service.cached()
    if service is not None:
        await service.drain_cleanup()


# Create FastAPI app
app = FastAPI(
    title="AI Assistant REST API",
    description="REST API proxying chat messages to a hosted assistant",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
origins = Config.config().get_cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

LOGGER.info(f"CORSMiddleware added with origins: {origins}")


def _expose_trace() -> bool:
    return os.getenv("ERROR_TRACE_ENABLED", "false").lower() in ["true", "1", "yes", "on"]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    error = ErrorResponse(
        title="Invalid request",
        message="; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()),
        trace="",
    )
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=error.model_dump())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    LOGGER.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    error = ErrorResponse(
        title=type(exc).__name__,
        message=str(exc),
        trace="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)) if _expose_trace() else "",
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error.model_dump())


# Include routers
app.include_router(chat.router)

# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check(service: AIAssistantService = Depends(get_assistant_service)):
    """Health check endpoint."""
    return HealthResponse(status="healthy", mode="live" if service.is_live else "degraded")


__all__ = ["app", "get_assistant_service"]
