# main.py - FastAPI application entry point
import logging
from contextlib import asynccontextmanager
from adapters.api import app
from adapters.data_loader import CsvItemRepository, TextUserRepository
from usecases.recommendation_service import init_recommendation_service
from config import settings

logging.getLogger().setLevel(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app):
    """Application startup and shutdown"""
    # Startup
    logger.info("🚀 Starting Item Recommendation API...")

    try:
        logger.info("📊 Loading items and users...")
        service = init_recommendation_service(
            CsvItemRepository(settings.ITEMS_PATH),
            TextUserRepository(settings.USERS_PATH)
        )

        logger.info(f"✅ Trained {len(service.users)} decision trees over {len(service.items):,} items")
        logger.info(f"🌐 API ready at http://{settings.API_HOST}:{settings.API_PORT}")
        logger.info(f"📚 Documentation at http://{settings.API_HOST}:{settings.API_PORT}/docs")

    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        raise

    yield

    # Shutdown
    logger.info("🔄 Shutting down services...")

# Set lifespan for the app
app.router.lifespan_context = lifespan

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=False,
        workers=1,
        log_level=settings.LOG_LEVEL.lower()
    )
