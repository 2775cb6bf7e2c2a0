import functools
from fastapi import APIRouter, Depends, Request
from vidrelay.api.deps import get_video_query, request_locale
from vidrelay.core.logging import log_info
from vidrelay.models.request import VideoQuery
from vidrelay.models.response import ErrorResponse, VideoInfo
from vidrelay.services.info import VideoInfoService
from vidrelay.utils.locale import safe_url_for_log
from vidrelay.i18n import i18n

router = APIRouter()

@router.get(
    "/format",
    response_model=VideoInfo,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_video_format(request: Request, query: VideoQuery = Depends(get_video_query)):
    """Get video metadata with video and audio format lists"""

    locale = request_locale(request)
    _ = functools.partial(i18n.get, locale=locale)

    log_info(request, _("log.fetching_info", url=safe_url_for_log(query.url)))

    video_info = await VideoInfoService.fetch(query, locale)
    log_info(request, _("log.info_retrieved", title=video_info.title))
    return video_info
