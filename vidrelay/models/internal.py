from pydantic import BaseModel
from typing import Any, Dict, Optional

class DownloadIntent(BaseModel):
    """Internal download intent (separated from HTTP concerns)"""
    url: str
    audio_only: bool
    itag: Optional[str] = None

class StreamSelection(BaseModel):
    """Format chosen for a download"""
    format: Dict[str, Any]
    ext: str
    filename: str

    @property
    def format_id(self) -> str:
        return str(self.format.get("format_id"))
