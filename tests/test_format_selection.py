import pytest

from tests.conftest import FORMATS
from vidrelay.models.internal import DownloadIntent
from vidrelay.services.format import FormatDecision, filter_formats, has_audio, has_video, rank_formats


def ids(formats):
    return [f["format_id"] for f in formats]


def intent(audio_only=False, itag=None):
    return DownloadIntent(url="https://youtu.be/VALID", audio_only=audio_only, itag=itag)


def test_filters_keep_library_order():
    assert ids(filter_formats(FORMATS, "videoandaudio")) == ["18", "22"]
    assert ids(filter_formats(FORMATS, "audioonly")) == ["140", "251"]
    assert ids(filter_formats(FORMATS, "videoonly")) == ["137"]
    assert ids(filter_formats(FORMATS, "video")) == ["18", "137", "22"]
    assert ids(filter_formats(FORMATS, "audio")) == ["140", "18", "251", "22"]


def test_unknown_filter_rejected():
    with pytest.raises(ValueError):
        filter_formats(FORMATS, "bestest")


def test_only_none_codec_counts_as_absent():
    assert has_video({}) and has_audio({})
    assert has_video({"vcodec": None})
    assert has_video({"vcodec": "vp9"})
    assert not has_video({"vcodec": "none"})
    assert not has_audio({"acodec": "none"})


def test_format_without_codec_info_is_a_muxed_candidate():
    direct = {"format_id": "mp4", "ext": "mp4", "height": 720}
    storyboard = {"format_id": "sb0", "ext": "mhtml", "vcodec": "none", "acodec": "none"}
    assert ids(filter_formats([direct, storyboard], "videoandaudio")) == ["mp4"]
    assert FormatDecision.choose([direct, storyboard], intent())["format_id"] == "mp4"
    assert FormatDecision.choose([direct, storyboard], intent(audio_only=True)) is None


def test_rank_is_stable_on_ties():
    a = {"format_id": "a", "vcodec": "vp9", "acodec": "opus", "height": 720}
    b = {"format_id": "b", "vcodec": "avc1", "acodec": "mp4a", "height": 720}
    c = {"format_id": "c", "vcodec": "avc1", "acodec": "mp4a", "height": 1080}
    assert ids(rank_formats([a, b, c])) == ["c", "a", "b"]


def test_choose_best_video():
    assert FormatDecision.choose(FORMATS, intent())["format_id"] == "22"


def test_choose_best_audio():
    assert FormatDecision.choose(FORMATS, intent(audio_only=True))["format_id"] == "251"


def test_choose_specific_itag():
    assert FormatDecision.choose(FORMATS, intent(itag="18"))["format_id"] == "18"
    assert FormatDecision.choose(FORMATS, intent(audio_only=True, itag="140"))["format_id"] == "140"


def test_itag_outside_candidates_is_none():
    assert FormatDecision.choose(FORMATS, intent(itag="137")) is None
    assert FormatDecision.choose(FORMATS, intent(audio_only=True, itag="22")) is None
    assert FormatDecision.choose(FORMATS, intent(itag="999")) is None


def test_no_candidates_is_none():
    assert FormatDecision.choose([], intent()) is None
    assert FormatDecision.choose([], intent(audio_only=True)) is None
