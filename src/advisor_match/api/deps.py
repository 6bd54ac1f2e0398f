"""Shared FastAPI dependencies for dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from advisor_match.config.settings import Settings


def get_settings(request: Request) -> Settings:
    """Get Settings instance from app state."""
    return request.app.state.settings


async def verify_api_key(request: Request) -> str | None:
    """
    Verify the X-API-Key header when an API key is configured.
    Returns the key if valid, or None if no key is required.
    """
    settings: Settings = request.app.state.settings
    expected = settings.api_key_str

    if not expected:
        return None

    x_api_key = request.headers.get("X-API-Key")

    if not x_api_key:
        raise HTTPException(status_code=401, detail="Missing API key")

    if x_api_key != expected:
        raise HTTPException(status_code=401, detail="Invalid API key")

    return x_api_key


SettingsDep = Annotated[Settings, Depends(get_settings)]
