# Standard library imports
import logging

# Third-party imports
from fastapi import FastAPI

# Local imports
from config import get_settings
from database import engine, Base
import models  # noqa: F401  (registers tables on Base)

# Plugin system
from plugin_manager import plugin_manager

# Get settings
settings = get_settings()

# Set up logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Social Fields")

# Initialize database
Base.metadata.create_all(bind=engine)

# Initialize plugins
if settings.PLUGINS_AUTO_DISCOVER:
    plugin_manager.discover_plugins()
logger.info(f"Validation kinds: {', '.join(plugin_manager.get_accounts())}")

# Import and include routers
from routes.forms import router as forms_router
from routes.tweets import router as tweets_router

app.include_router(forms_router)
app.include_router(tweets_router)

@app.get("/health")
async def health():
    """Report liveness and the registered validation kinds."""
    return {"status": "ok", "kinds": plugin_manager.get_accounts()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower()
    )
