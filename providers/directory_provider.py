"""Mock participant directory for local development.

Stands in for the platform's profile service: it serves the display name,
role and avatar that the messaging service shows next to a conversation.
"""

import os
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Header, HTTPException
from pydantic import BaseModel

from providers.cache import LRUCache

app = FastAPI(
    title="Mock Participant Directory",
    description="Profile lookups for the direct messaging service",
)

# Configuration
DIRECTORY_PROVIDER_API_KEY = os.getenv("DIRECTORY_PROVIDER_API_KEY")
if not DIRECTORY_PROVIDER_API_KEY:
    raise ValueError("DIRECTORY_PROVIDER_API_KEY is not set")
CACHE_SIZE = int(os.getenv("CACHE_SIZE", "1000"))

# In-memory storage for profiles (LRU cache)
profiles = LRUCache(max_size=CACHE_SIZE)


class ProfileRequest(BaseModel):
    display_name: str
    role: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileResponse(BaseModel):
    id: int
    display_name: str
    role: Optional[str] = None
    avatar_url: Optional[str] = None


def require_api_key(authorization: Optional[str] = Header(None)) -> None:
    if authorization != f"Bearer {DIRECTORY_PROVIDER_API_KEY}":
        raise HTTPException(status_code=401, detail="Invalid API key")


@app.put("/participants/{participant_id}", dependencies=[Depends(require_api_key)])
async def upsert_profile(
    participant_id: int, profile: ProfileRequest
) -> ProfileResponse:
    """Register or replace a participant profile"""
    response = ProfileResponse(id=participant_id, **profile.model_dump())
    profiles.put(str(participant_id), response.model_dump())
    return response


@app.get("/participants/{participant_id}", dependencies=[Depends(require_api_key)])
async def get_profile(participant_id: int) -> Dict[str, Any]:
    """Get a participant profile"""
    profile = profiles.get(str(participant_id))
    if profile is None:
        raise HTTPException(status_code=404, detail="Participant not found")
    return profile


@app.get("/participants", dependencies=[Depends(require_api_key)])
async def list_profiles() -> Dict[str, List[Dict[str, Any]]]:
    """List all profiles (for debugging)"""
    return {"participants": list(profiles.values())}


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint"""
    return {"status": "healthy", "service": "directory_provider"}


if __name__ == "__main__":
    port = int(os.getenv("PORT", 8001))
    host = os.getenv("HOST", "0.0.0.0")  # nosec B104
    uvicorn.run(app, host=host, port=port)
