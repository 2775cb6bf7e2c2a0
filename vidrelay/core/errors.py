from typing import Optional
from fastapi import HTTPException


class ApiError(HTTPException):
    """Base for errors surfaced to the caller as {"error": message}"""
    status_code = 500

    def __init__(self, detail: str, headers: Optional[dict] = None):
        super().__init__(status_code=type(self).status_code, detail=detail, headers=headers)


class InvalidInput(ApiError):
    """Missing or malformed query parameter"""
    status_code = 400


class Forbidden(ApiError):
    """URL points at a blocked address"""
    status_code = 403


class NoFormatFound(ApiError):
    """No candidate format matched the request"""
    status_code = 404


class RetrievalFailure(ApiError):
    """yt-dlp failed to resolve or deliver the video"""
    status_code = 500


class StreamInterrupted(Exception):
    """
    Raised inside a response body after bytes were committed.
    Must not be an HTTPException: no handler may try to write a second
    response, the server aborts the connection instead.
    """
