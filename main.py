"""
Crease - Live Cricket Scoring API
"""
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.database import init_db
from app.engine.errors import ScoringError, MissingPlayersError
from app.api.match import router as match_router
from app.api.streams import router as stream_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Crease",
    description="Live ball-by-ball cricket scoring API",
    version="0.1.0",
)

default_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
default_origins.extend(settings.CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=default_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(match_router, prefix="/api")
app.include_router(stream_router, prefix="/api")


@app.exception_handler(ScoringError)
async def scoring_error_handler(request: Request, exc: ScoringError) -> JSONResponse:
    problem = {
        "title": exc.title,
        "detail": exc.detail,
        "status": exc.status_code,
        "code": exc.code,
    }
    if isinstance(exc, MissingPlayersError):
        problem["slots"] = exc.slots
    return JSONResponse(
        status_code=exc.status_code,
        content=problem,
        media_type="application/problem+json",
    )


@app.on_event("startup")
def startup_event():
    """Initialize database on startup"""
    init_db()
    logger.info("Database ready at %s", settings.DATABASE_PATH)


@app.get("/")
def root():
    """Health check endpoint"""
    return {
        "name": "Crease API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/api/health")
def health_check():
    """API health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
