"""Main FastAPI application for Kanvas Editor Service"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .exceptions import ElementCollectionError, ValidationError
from .models import HealthCheckResponse
from .routes import dashboards, editor, onboarding

# Set up logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from .db.session import init_db
    from .services.editor_service import refresh_tables
    init_db()

    # table list for new table/chart widgets; a failure only leaves a status message
    store = editor.get_editor_store()
    await refresh_tables(store, store.client)

    logger.info(f"{settings.SERVICE_NAME} started")
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.SERVICE_NAME,
    description="Dashboard editor: widget tree, layout and query-bound data",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(editor.router)
app.include_router(dashboards.router)
app.include_router(onboarding.router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Input problems are reported next to the offending field"""
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": exc.to_dict()})


@app.exception_handler(ElementCollectionError)
async def collection_error_handler(request: Request, exc: ElementCollectionError):
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": exc.problems})


@app.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """Health check endpoint"""
    dependencies = {}

    # Check database
    try:
        from .db.session import engine
        from sqlalchemy import text
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        dependencies["database"] = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        dependencies["database"] = "unhealthy"

    # Check database collaborator scripts
    try:
        from .services.kanvas_client import get_kanvas_client
        await get_kanvas_client().connection_info()
        dependencies["kanvas_api"] = "healthy"
    except Exception as e:
        logger.error(f"Kanvas API health check failed: {e}")
        dependencies["kanvas_api"] = "unhealthy"

    status_value = "healthy" if all(v == "healthy" for v in dependencies.values()) else "degraded"

    return HealthCheckResponse(
        status=status_value,
        service=settings.SERVICE_NAME,
        version="1.0.0",
        timestamp=datetime.utcnow().isoformat() + "Z",
        dependencies=dependencies
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.SERVICE_NAME,
        "version": "1.0.0",
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "kanvas.main:app",
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        reload=True
    )
