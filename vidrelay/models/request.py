from pydantic import BaseModel, Field, field_validator
from typing import Optional
from urllib.parse import urlparse
from vidrelay.models.internal import DownloadIntent

AUDIO_HINT = "audio"
VIDEO_HINT = "video"

class VideoQuery(BaseModel):
    """Query parameters of one metadata or download request"""
    url: str = Field(..., description="Video URL")
    format: str = Field(VIDEO_HINT, description="'audio' for audio-only, anything else means video")
    itag: Optional[str] = Field(None, description="Specific format identifier to download")

    @field_validator('url')
    @classmethod
    def validate_url_syntax(cls, v):
        """Validate URL syntax only (SSRF check done at endpoint)"""
        v = v.strip()
        try:
            parsed = urlparse(v)
        except ValueError:
            raise ValueError("Invalid URL format")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Invalid URL format")
        return v

    @property
    def is_audio(self) -> bool:
        return self.format == AUDIO_HINT

    def to_intent(self) -> DownloadIntent:
        """Convert to download intent"""
        return DownloadIntent(
            url=self.url,
            audio_only=self.is_audio,
            itag=self.itag or None,
        )
