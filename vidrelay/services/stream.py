import logging
import functools
from typing import AsyncIterator, Dict, Tuple
from vidrelay.config.settings import config
from vidrelay.core.errors import NoFormatFound, RetrievalFailure, StreamInterrupted
from vidrelay.models.internal import DownloadIntent, StreamSelection
from vidrelay.services.format import FormatDecision
from vidrelay.services.info import VideoInfoService
from vidrelay.services.ytdlp import ExtractionError, YTDLPCommandBuilder, SubprocessExecutor
from vidrelay.utils.filename import content_disposition, sanitize_filename
from vidrelay.utils.locale import safe_url_for_log
from vidrelay.i18n import i18n

logger = logging.getLogger(__name__)

class StreamService:
    """Relay the bytes of one chosen format"""

    @staticmethod
    async def select(intent: DownloadIntent, locale: str) -> StreamSelection:
        _ = functools.partial(i18n.get, locale=locale)

        info = await VideoInfoService.extract(intent.url, locale)
        try:
            chosen = FormatDecision.choose(info.get("formats") or [], intent)
        except TypeError as e:
            logger.error(f"Unexpected yt-dlp format shape for {safe_url_for_log(intent.url)}: {e}")
            raise RetrievalFailure(_("error.fetch_info_failed"))
        if chosen is None:
            raise NoFormatFound(_("error.no_format"))

        ext = chosen.get("ext") or ("m4a" if intent.audio_only else "mp4")
        title = sanitize_filename(info.get("title") or "") or "video"
        return StreamSelection(format=chosen, ext=ext, filename=f"{title}.{ext}")

    @staticmethod
    async def stream(intent: DownloadIntent, locale: str) -> Tuple[AsyncIterator[bytes], Dict[str, str], StreamSelection]:
        """
        Returns (generator, headers, selection).
        The first chunk is read before returning, so a stream that fails
        to start is still reported as a regular error response.
        """
        _ = functools.partial(i18n.get, locale=locale)
        safe_url = safe_url_for_log(intent.url)

        selection = await StreamService.select(intent, locale)
        cmd = YTDLPCommandBuilder.build_stream_command(intent.url, selection.format_id)
        source = SubprocessExecutor.stream(cmd, config.download.chunk_size)

        try:
            first_chunk = await source.__anext__()
        except StopAsyncIteration:
            first_chunk = b""
        except (ExtractionError, OSError) as e:
            logger.error(f"Stream failed to start for {safe_url}: {e}")
            raise RetrievalFailure(_("error.download_failed"))

        async def generate():
            sent = len(first_chunk)
            try:
                if first_chunk:
                    yield first_chunk
                async for chunk in source:
                    sent += len(chunk)
                    yield chunk
            except ExtractionError as e:
                logger.error(f"Stream interrupted after {sent} bytes for {safe_url}: {e}")
                raise StreamInterrupted(_("error.download_failed")) from e
            finally:
                await source.aclose()
            logger.info(_("log.stream_finished", bytes=sent))

        headers = {
            'Content-Disposition': content_disposition(selection.filename),
            'X-Content-Type-Options': 'nosniff',
            'Cache-Control': 'no-cache',
        }

        return generate(), headers, selection
