import json
from typing import List
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from vidrelay.config.settings import config
from vidrelay.main import app
from vidrelay.services.ytdlp import ExtractionError, SubprocessExecutor

FORMATS = [
    {"format_id": "sb0", "ext": "mhtml", "vcodec": "none", "acodec": "none", "format_note": "storyboard"},
    {"format_id": "140", "ext": "m4a", "vcodec": "none", "acodec": "mp4a.40.2", "abr": 129.5, "tbr": 129.5,
     "url": "https://cdn.example.com/140"},
    {"format_id": "18", "ext": "mp4", "vcodec": "avc1.42001E", "acodec": "mp4a.40.2", "height": 360, "width": 640,
     "fps": 30, "tbr": 500.0, "url": "https://cdn.example.com/18"},
    {"format_id": "137", "ext": "mp4", "vcodec": "avc1.640028", "acodec": "none", "height": 1080, "width": 1920,
     "fps": 30, "tbr": 4000.0, "url": "https://cdn.example.com/137"},
    {"format_id": "251", "ext": "webm", "vcodec": "none", "acodec": "opus", "abr": 160.0, "tbr": 160.0,
     "url": "https://cdn.example.com/251"},
    {"format_id": "22", "ext": "mp4", "vcodec": "avc1.64001F", "acodec": "mp4a.40.2", "height": 720, "width": 1280,
     "fps": 30, "tbr": 1200.0, "filesize": 1048576, "url": "https://cdn.example.com/22"},
]

INFO = {
    "id": "VALID",
    "title": "Test Video",
    "description": "A video used in tests",
    "thumbnail": "https://i.example.com/VALID/maxres.jpg",
    "duration": 212.0,
    "view_count": 1234,
    "upload_date": "20240131",
    "uploader": "Test Channel",
    "channel_url": "https://www.youtube.com/channel/UC123",
    "is_live": False,
    "formats": FORMATS,
}


def dumped(info=None) -> bytes:
    """What `yt-dlp --dump-json` writes to stdout"""
    return json.dumps(info).encode() if info is not None else b""


def failed(stderr: str, returncode: int = 1) -> ExtractionError:
    return ExtractionError(returncode, stderr)


class FakeStream:
    """Stands in for SubprocessExecutor.stream and records the commands it was given"""

    def __init__(self, chunks: List[bytes], error: Exception = None):
        self.chunks = chunks
        self.error = error
        self.commands = []

    def __call__(self, cmd, chunk_size):
        self.commands.append(cmd)
        return self._generate()

    async def _generate(self):
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error


@pytest.fixture(autouse=True)
def no_ssrf_lookup(monkeypatch):
    monkeypatch.setattr(config.security, "enable_ssrf_protection", False)


@pytest.fixture
def info():
    return json.loads(json.dumps(INFO))


@pytest.fixture
def fake_run(monkeypatch, info):
    mock = AsyncMock(return_value=dumped(info))
    monkeypatch.setattr(SubprocessExecutor, "run", mock)
    return mock


@pytest.fixture
def fake_stream(monkeypatch):
    stream = FakeStream([b"chunk-1", b"chunk-2"])
    monkeypatch.setattr(SubprocessExecutor, "stream", stream)
    return stream


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
