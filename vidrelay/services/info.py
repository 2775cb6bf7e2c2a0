import asyncio
import json
import logging
import functools
from typing import Any, Dict, Optional
from vidrelay.config.settings import config
from vidrelay.core.errors import RetrievalFailure
from vidrelay.models.request import VideoQuery
from vidrelay.models.response import AudioFormat, Author, RawFormat, VideoFormat, VideoInfo
from vidrelay.services.format import (
    AUDIO_ONLY,
    VIDEO_AND_AUDIO,
    filter_formats,
    has_audio,
    has_video,
    rank_formats,
)
from vidrelay.services.ytdlp import ExtractionError, YTDLPCommandBuilder, SubprocessExecutor
from vidrelay.utils.locale import safe_url_for_log
from vidrelay.i18n import i18n

logger = logging.getLogger(__name__)


def _text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _int(value: Any) -> Optional[int]:
    return None if value is None else int(round(value))


def format_upload_date(value: Optional[str]) -> Optional[str]:
    """yt-dlp gives YYYYMMDD; expose YYYY-MM-DD"""
    if value and len(value) == 8 and value.isdigit():
        return f"{value[:4]}-{value[4:6]}-{value[6:]}"
    return value


def quality_label(fmt: Dict[str, Any]) -> Optional[str]:
    if fmt.get("height"):
        label = f"{fmt['height']}p"
        fps = fmt.get("fps")
        if fps and fps > 30:
            label += str(int(round(fps)))
        return label
    return fmt.get("format_note")


def mime_type(fmt: Dict[str, Any]) -> str:
    kind = "video" if has_video(fmt) else "audio"
    mime = f"{kind}/{fmt.get('ext') or 'unknown'}"
    codecs = [c for c in (fmt.get("vcodec"), fmt.get("acodec")) if c and c != "none"]
    if codecs:
        mime += f'; codecs="{", ".join(codecs)}"'
    return mime


def to_raw_format(fmt: Dict[str, Any]) -> RawFormat:
    return RawFormat(
        itag=str(fmt.get("format_id")),
        url=fmt.get("url"),
        mime_type=mime_type(fmt),
        container=fmt.get("ext"),
        has_video=has_video(fmt),
        has_audio=has_audio(fmt),
        quality_label=quality_label(fmt) if has_video(fmt) else None,
        height=fmt.get("height"),
        width=fmt.get("width"),
        fps=fmt.get("fps"),
        bitrate=fmt.get("tbr"),
        audio_bitrate=fmt.get("abr"),
        content_length=_int(fmt.get("filesize") or fmt.get("filesize_approx")),
        vcodec=fmt.get("vcodec"),
        acodec=fmt.get("acodec"),
    )


def thumbnail_url(info: Dict[str, Any]) -> str:
    if info.get("thumbnail"):
        return info["thumbnail"]
    thumbnails = info.get("thumbnails") or []
    return thumbnails[0].get("url", "") if thumbnails else ""


class VideoInfoService:
    """Video info fetching service"""

    @staticmethod
    async def extract(url: str, locale: str) -> Dict[str, Any]:
        """Run yt-dlp and return its raw info dict"""
        _ = functools.partial(i18n.get, locale=locale)
        safe_url = safe_url_for_log(url)
        cmd = YTDLPCommandBuilder.build_info_command(url)

        try:
            stdout = await SubprocessExecutor.run(cmd, timeout=config.download.info_timeout)
        except asyncio.TimeoutError:
            logger.error(f"Info extraction timed out for {safe_url}")
            raise RetrievalFailure(_("error.fetch_info_failed"))
        except ExtractionError as e:
            logger.error(f"yt-dlp failed for {safe_url}: {e.stderr[:200]}")
            raise RetrievalFailure(_("error.fetch_info_failed"))
        except OSError as e:
            logger.error(f"Could not start yt-dlp: {e}")
            raise RetrievalFailure(_("error.fetch_info_failed"))

        try:
            info = json.loads(stdout.decode())
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.error(f"Unparsable yt-dlp output for {safe_url}")
            raise RetrievalFailure(_("error.fetch_info_failed"))

        if not isinstance(info, dict):
            raise RetrievalFailure(_("error.fetch_info_failed"))

        if info.get("is_live") and not config.ytdlp.enable_live_streams:
            raise RetrievalFailure(_("error.live_not_supported"))

        return info

    @staticmethod
    def build(info: Dict[str, Any]) -> VideoInfo:
        """Flatten a yt-dlp info dict into the response shape"""
        all_formats = info.get("formats") or []
        video_formats = rank_formats(filter_formats(all_formats, VIDEO_AND_AUDIO))
        audio_formats = rank_formats(filter_formats(all_formats, AUDIO_ONLY))

        return VideoInfo(
            title=info.get("title") or "Unknown",
            description=info.get("description"),
            thumbnail=thumbnail_url(info),
            duration=_text(_int(info.get("duration"))),
            views=_text(info.get("view_count")),
            upload_date=format_upload_date(info.get("upload_date")),
            author=Author(
                name=info.get("uploader") or info.get("channel"),
                channel_url=info.get("channel_url") or info.get("uploader_url"),
                avatar=None,
            ),
            video=[
                VideoFormat(quality=quality_label(f), format=f.get("ext"), itag=str(f.get("format_id")))
                for f in video_formats
            ],
            audio=[
                AudioFormat(bitrate=_int(f.get("abr")), format=f.get("ext"), itag=str(f.get("format_id")))
                for f in audio_formats
            ],
            info=[to_raw_format(f) for f in all_formats],
        )

    @staticmethod
    async def fetch(query: VideoQuery, locale: str) -> VideoInfo:
        info = await VideoInfoService.extract(query.url, locale)
        try:
            return VideoInfoService.build(info)
        except (TypeError, ValueError) as e:
            # pydantic ValidationError is a ValueError
            logger.error(f"Unexpected yt-dlp info shape for {safe_url_for_log(query.url)}: {e}")
            raise RetrievalFailure(i18n.get("error.fetch_info_failed", locale=locale))
