import functools
from typing import Optional
from fastapi import Query, Request
from pydantic import ValidationError
from vidrelay.core.errors import Forbidden, InvalidInput
from vidrelay.core.logging import log_warning
from vidrelay.core.security import SecurityValidator, UrlValidationResult
from vidrelay.models.request import VIDEO_HINT, VideoQuery
from vidrelay.utils.locale import get_locale
from vidrelay.i18n import i18n


def request_locale(request: Request) -> str:
    return get_locale(request.headers.get("accept-language"))


async def get_video_query(
    request: Request,
    video_url: Optional[str] = Query(None, alias="videoUrl", description="Video URL"),
    format: Optional[str] = Query(None, description="'audio' for audio only, anything else means video"),
    itag: Optional[str] = Query(None, description="Specific format identifier"),
) -> VideoQuery:
    """Validate query parameters before anything reaches yt-dlp"""
    _ = functools.partial(i18n.get, locale=request_locale(request))

    # A repeated parameter is not a single string
    if not video_url or len(request.query_params.getlist("videoUrl")) > 1:
        log_warning(request, "Rejected request without a single videoUrl")
        raise InvalidInput(_("error.invalid_url"))

    try:
        query = VideoQuery(url=video_url, format=format or VIDEO_HINT, itag=itag)
    except ValidationError:
        log_warning(request, "Rejected malformed videoUrl")
        raise InvalidInput(_("error.invalid_url"))

    # SSRF check (separated from validation layer)
    validation_result = await SecurityValidator.validate_url(query.url)
    if validation_result == UrlValidationResult.BLOCKED:
        raise Forbidden(_("error.private_ip"))
    if validation_result == UrlValidationResult.INVALID:
        raise InvalidInput(_("error.invalid_url"))

    return query
