# Standard library imports
import logging

# Third-party imports
from fastapi import FastAPI

# Local imports
from config import get_settings
from database import engine, Base
import models  # noqa: F401  registers the kv_items table

# Plugin system
from plugin_manager import plugin_manager

# Get settings
settings = get_settings()

# Set up logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Twitter App Broker")

# Initialize database
Base.metadata.create_all(bind=engine)

# Initialize plugins
if settings.PLUGINS_AUTO_DISCOVER:
    plugin_manager.discover_plugins()
else:
    import plugins.twitter  # noqa: F401

# Root route
@app.get("/")
async def root():
    """Report the service status and the mounted services."""
    return {
        "service": "twitter-app-broker",
        "services": sorted(plugin_manager.get_all_route_plugins().keys())
    }

# Include service-specific routers from plugins
service_routers = plugin_manager.get_service_routers()
for service_name, router in service_routers.items():
    app.include_router(router, prefix=f"/{service_name}")
    logger.info(f"Mounted routes for service: {service_name}")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
        use_colors=True
    )
