import logging

from fastapi import FastAPI

from grocery.api.routes import grocery, stores
from grocery.events.web_observers import start as start_event_observers
from grocery.utilities.config import DEBUG

# Logging
logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("grocery_app")

# Initialize FastAPI app
app = FastAPI(title="Household Grocery List API")

# Include routers
app.include_router(grocery.router)
app.include_router(stores.router)


@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for change polling when the app starts."""
    start_event_observers()
    logger.info("Web observers for grocery events started")


@app.get("/health")
def health():
    return {"status": "ok"}
