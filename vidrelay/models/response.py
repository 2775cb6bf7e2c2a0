from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    """Serialized with camelCase keys, populated with snake_case names"""
    model_config = ConfigDict(populate_by_name=True)


class Author(ApiModel):
    name: Optional[str] = None
    channel_url: Optional[str] = Field(None, alias="channelUrl")
    avatar: Optional[str] = None


class VideoFormat(ApiModel):
    quality: Optional[str] = None
    format: Optional[str] = None
    itag: str


class AudioFormat(ApiModel):
    bitrate: Optional[int] = None
    format: Optional[str] = None
    itag: str


class RawFormat(ApiModel):
    """Typed record of one yt-dlp format entry"""
    itag: str
    url: Optional[str] = None
    mime_type: str = Field(..., alias="mimeType")
    container: Optional[str] = None
    has_video: bool = Field(..., alias="hasVideo")
    has_audio: bool = Field(..., alias="hasAudio")
    quality_label: Optional[str] = Field(None, alias="qualityLabel")
    height: Optional[int] = None
    width: Optional[int] = None
    fps: Optional[float] = None
    bitrate: Optional[float] = None
    audio_bitrate: Optional[float] = Field(None, alias="audioBitrate")
    content_length: Optional[int] = Field(None, alias="contentLength")
    vcodec: Optional[str] = None
    acodec: Optional[str] = None


class VideoInfo(ApiModel):
    """Video information response"""
    title: str
    description: Optional[str] = None
    thumbnail: str = ""
    duration: Optional[str] = None
    views: Optional[str] = None
    upload_date: Optional[str] = Field(None, alias="uploadDate")
    author: Author = Field(default_factory=Author)
    video: List[VideoFormat] = []
    audio: List[AudioFormat] = []
    info: List[RawFormat] = []


class ErrorResponse(BaseModel):
    error: str
