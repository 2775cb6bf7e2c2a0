import functools
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from vidrelay.api.deps import get_video_query, request_locale
from vidrelay.core.logging import log_info
from vidrelay.models.request import VideoQuery
from vidrelay.models.response import ErrorResponse
from vidrelay.services.stream import StreamService
from vidrelay.utils.locale import safe_url_for_log
from vidrelay.i18n import i18n

router = APIRouter()

@router.get(
    "/download",
    response_class=StreamingResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def download_video(request: Request, query: VideoQuery = Depends(get_video_query)):
    """Relay the chosen format as an attachment"""

    locale = request_locale(request)
    _ = functools.partial(i18n.get, locale=locale)

    intent = query.to_intent()
    generator, headers, selection = await StreamService.stream(intent, locale)
    log_info(request, _("log.starting_stream", url=safe_url_for_log(intent.url), format=selection.format_id))

    return StreamingResponse(
        generator,
        media_type="application/octet-stream",
        headers=headers
    )
