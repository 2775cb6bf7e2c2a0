from typing import Any, Dict, Iterable, List, Optional, Tuple
from vidrelay.models.internal import DownloadIntent

Format = Dict[str, Any]

AUDIO_ONLY = "audioonly"
VIDEO_AND_AUDIO = "videoandaudio"


# A missing codec is unknown, not absent; only "none" marks a missing track
def has_video(fmt: Format) -> bool:
    return fmt.get("vcodec") != "none"


def has_audio(fmt: Format) -> bool:
    return fmt.get("acodec") != "none"


FILTERS = {
    VIDEO_AND_AUDIO: lambda f: has_video(f) and has_audio(f),
    AUDIO_ONLY: lambda f: has_audio(f) and not has_video(f),
    "videoonly": lambda f: has_video(f) and not has_audio(f),
    "video": has_video,
    "audio": has_audio,
}


def filter_formats(formats: Iterable[Format], name: str) -> List[Format]:
    """Filter yt-dlp format dicts by a named filter, keeping library order"""
    try:
        predicate = FILTERS[name]
    except KeyError:
        raise ValueError(f"Unknown format filter: {name}")
    return [f for f in formats if predicate(f)]


def quality_key(fmt: Format) -> Tuple[float, ...]:
    """Ranking key: resolution first for video, bitrate for audio"""
    if has_video(fmt):
        return (
            fmt.get("height") or 0,
            fmt.get("fps") or 0,
            fmt.get("tbr") or 0,
        )
    return (fmt.get("abr") or 0, fmt.get("tbr") or 0)


def rank_formats(formats: Iterable[Format]) -> List[Format]:
    """Best first; ties keep library order"""
    return sorted(formats, key=quality_key, reverse=True)


class FormatDecision:
    """Make format decisions"""

    @staticmethod
    def candidates(formats: List[Format], intent: DownloadIntent) -> List[Format]:
        return filter_formats(formats, AUDIO_ONLY if intent.audio_only else VIDEO_AND_AUDIO)

    @staticmethod
    def choose(formats: List[Format], intent: DownloadIntent) -> Optional[Format]:
        """
        Pick the format to download.
        A requested itag is honored only among candidates of the requested kind.
        Without one, the highest ranked candidate wins.
        """
        candidates = FormatDecision.candidates(formats, intent)

        if intent.itag:
            for fmt in candidates:
                if str(fmt.get("format_id")) == intent.itag:
                    return fmt
            return None

        ranked = rank_formats(candidates)
        return ranked[0] if ranked else None
