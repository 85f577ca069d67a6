from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from dayplanr.api.messages import message
from dayplanr.api.routes import router as api_router
from dayplanr.config.settings import get_settings
from dayplanr.models.errors import PlannerError
from dayplanr.storage.database import init_db
from dayplanr.utils.logging_config import setup_logging


# Setup logging
setup_logging()
logger = logging.getLogger(__name__)
settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    description="Day planning engine: fits tasks between fixed events and exports the plan as iCalendar",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError):
    logger.warning(f"Rejected {request.url.path}: {exc.code} ({exc.detail})")
    return JSONResponse(status_code=400, content={"error": message(exc.code)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    kinds = sorted({err.get("type", "") for err in exc.errors()})
    logger.warning(f"Malformed body on {request.url.path}: {', '.join(kinds)}")
    return JSONResponse(status_code=400, content={"error": message("invalid_payload")})


# Initialize database on startup
@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.app_name}...")
    init_db()
    logger.info("Database initialized")
    logger.info(
        f"Default rhythm: focus={settings.default_focus_block_minutes}m, "
        f"break={settings.default_short_break_minutes}m, buffer={settings.default_buffer_minutes}m"
    )

@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.app_name}...")

app.include_router(api_router, prefix="/api", tags=["planning"])


@app.get("/health", tags=["health"])
def health_check():
    """Health check endpoint for monitoring and load balancers."""
    return {"status": "ok", "app": settings.app_name, "version": "1.0.0"}
