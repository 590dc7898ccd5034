from typing import Any, Dict, Optional

from pydantic import BaseModel


class UserOverviewResponse(BaseModel):
    userInfo: Dict[str, Any]
    userPlaylists: Dict[str, Any]


class FeaturesResponse(BaseModel):
    trackFeatures: Dict[str, Any]
    truncated: bool = False


class CreatePlaylistResponse(BaseModel):
    retrievedPlaylist: Dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
    message: str
    upstream_status: Optional[int] = None
    retry_after: Optional[int] = None
