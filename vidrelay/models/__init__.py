from .internal import DownloadIntent, StreamSelection
from .request import VideoQuery
from .response import AudioFormat, Author, ErrorResponse, RawFormat, VideoFormat, VideoInfo

__all__ = [
    "AudioFormat", "Author", "DownloadIntent", "ErrorResponse", "RawFormat",
    "StreamSelection", "VideoFormat", "VideoInfo", "VideoQuery",
]
