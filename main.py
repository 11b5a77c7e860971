"""
Globe Map FastAPI Application

Main entry point for the Globe Map application, serving the REST API and
real-time render state notifications.

Date: 2026-10-18
"""

import asyncio
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import StreamingResponse

from server.admin import router as admin_router
from server.broadcast import event_generator, subscribers
from server.feed import router as feed_router
from server.routes import router as routes_router

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Globe Map")

# Include all routers
app.include_router(routes_router)
app.include_router(feed_router)
app.include_router(admin_router)

# ============================================================
# SSE Endpoint
# ============================================================


@app.get("/api/stream")
async def stream(request: Request):
    """Server-Sent Events (SSE) endpoint for real-time updates.

    Clients connect to this endpoint to be told when the render state has
    been recomputed after a snapshot, viewport or config change.

    Args:
        request: FastAPI request object.

    Returns:
        StreamingResponse with text/event-stream content type.
    """
    queue = asyncio.Queue()
    subscribers.add(queue)

    return StreamingResponse(event_generator(queue), media_type="text/event-stream")
