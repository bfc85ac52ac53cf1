from fastapi import FastAPI, Query
from typing import Optional
import logging

from diet.api.routes import plans, safety, nutrition, members
from diet.events.web_observers import start as start_event_observers, get_events as get_web_events
from dotenv import load_dotenv
load_dotenv()

# Logging
logger = logging.getLogger("diet_app")

# Initialize FastAPI app
app = FastAPI(title="Family Diet Composition API")

# Include routers
app.include_router(plans.router)
app.include_router(safety.router)
app.include_router(nutrition.router)
app.include_router(members.router)


@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for the /api/events buffer when the app starts."""
    start_event_observers()
    logger.info("Web observers for engine events started")


@app.get("/api/events")
def api_events(
    since: Optional[int] = Query(default=None, description="Return events with id greater than this value")
):
    """
    Return recent engine events (unassignable slots, unknown codes, invalid nutrients, ...).

    Client polling strategy:
        1. First call without 'since' to load the current backlog.
        2. Store 'next_cursor' from response.
        3. Subsequent polls: /api/events?since=<next_cursor>
    """
    return get_web_events(since)


@app.get("/health")
def health():
    return {"status": "ok"}
