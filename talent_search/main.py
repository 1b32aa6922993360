# Standard library imports
import logging
from datetime import datetime, timezone
from dotenv import load_dotenv

# Third-party imports
from fastapi import FastAPI, Request, Response

# Config
from talent_search import __version__
from talent_search.config import get_settings, setup_logging
from talent_search.config.constants import CORS_HEADERS

# Routers
from talent_search.routes.search import router as search_router
from talent_search.routes.profiles import router as profiles_router

# Load environment variables first
load_dotenv()

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Talent Search API",
    description="Talent profiles with natural-language search",
    version=__version__
)

@app.middleware("http")
async def cors_headers(request: Request, call_next):
    """Answer pre-flight requests and attach permissive CORS headers to every response."""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response

# Include routers
app.include_router(search_router, tags=["Search"])
app.include_router(profiles_router, tags=["Profiles"])

# Root endpoint
@app.get("/")
async def read_root():
    return {"message": f"Welcome to Talent Search API v{__version__}"}

# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment
    }

logger.info("Talent Search API initialized")
