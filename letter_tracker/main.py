# letter_tracker/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from letter_tracker.api import account_letters, letters
from letter_tracker.services.database_service import database_service
from letter_tracker.schemas.commons_schemas import HealthResponse
from letter_tracker.utils.logger import setup_logger
from letter_tracker.config import settings
import uvicorn

logger = setup_logger()

app = FastAPI(
    title=settings.app_name,
    description="Letters catalog, account-letter shipments and tracking timelines",
    version=settings.app_version,
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup_event():
    """Initialize on startup"""
    logger.info(f" {settings.app_name} starting")
    logger.info(f" Debug mode: {settings.debug}")

    try:
        await database_service.create_tables()
        logger.info("🗄️ Database ready")
    except Exception as e:
        logger.warning(f" Database initialization failed: {e}")

@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info(f" {settings.app_name} stopping")
    await database_service.close()

app.include_router(account_letters.router, prefix="/api")
app.include_router(letters.router, prefix="/api")

@app.get("/")
async def root():
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "features": [
            "Letters catalog",
            "Shipment filtering and sorting",
            "Regulatory deadline tracking",
            "Tracking timelines"
        ]
    }

@app.get("/health", response_model=HealthResponse)
async def health_check():
    database_ok = await database_service.ping()
    return HealthResponse(
        status="healthy" if database_ok else "degraded",
        database="connected" if database_ok else "unreachable",
        version=settings.app_version
    )

if __name__ == "__main__":
    uvicorn.run(
        "letter_tracker.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
