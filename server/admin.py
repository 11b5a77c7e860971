"""
Admin routes for configuration management.

This module provides administrative endpoints for reading and replacing the
engine tunables stored in config.json.

Date: 2026-10-18
"""

import json
import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from logic.config import ConfigError, EngineConfig, ensure_config_fields, load_config, save_config

logger = logging.getLogger(__name__)

router = APIRouter()


class ConfigUpdate(BaseModel):
    """Request model for updating configuration."""

    content: str


@router.get("/api/admin/config")
def get_config():
    """Get the current engine configuration.

    Returns:
        Dictionary containing the config as a JSON string and the parsed values.
    """
    config = load_config()
    return {"content": json.dumps(config, indent=2), "config": config}


@router.post("/api/admin/config")
async def update_config(data: ConfigUpdate):
    """Replace the engine configuration.

    Validates that the content is valid JSON and that the tunables are
    consistent before saving, then recomputes the live feed.

    Args:
        data: ConfigUpdate object containing the new JSON content.

    Returns:
        Success message.

    Raises:
        HTTPException: If JSON or tunables are invalid, or the file cannot be saved.
    """
    try:
        parsed_config = json.loads(data.content)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Invalid JSON: {str(e)}")

    if not isinstance(parsed_config, dict):
        raise HTTPException(status_code=400, detail="Config must be a JSON object")

    parsed_config = ensure_config_fields(parsed_config)
    try:
        engine_config = EngineConfig.from_dict(parsed_config).validate()
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=f"Invalid config: {str(e)}")

    try:
        save_config(parsed_config)
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Error saving config file: {str(e)}")

    logger.info("Engine configuration updated")

    # Recompute the live feed with the new tunables
    from server.broadcast import notify_render_state_updated
    from server.feed import get_feed, state_summary

    feed = get_feed()
    feed.reconfigure(engine_config)
    await notify_render_state_updated(state_summary(feed))

    return {"success": True, "message": "Configuration updated successfully"}
