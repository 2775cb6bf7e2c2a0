import pytest

from tests.conftest import dumped, failed


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["", "?videoUrl=", "?videoUrl=not-a-url", "?videoUrl=ftp://example.com/v",
                                   "?videoUrl=https://youtu.be/a&videoUrl=https://youtu.be/b"])
async def test_invalid_input_never_calls_ytdlp(client, fake_run, query):
    response = await client.get(f"/api/format{query}")
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid video URL"}
    fake_run.assert_not_called()


@pytest.mark.asyncio
async def test_valid_url_returns_video_info(client, fake_run):
    response = await client.get("/api/format", params={"videoUrl": "https://youtu.be/VALID"})
    assert response.status_code == 200
    body = response.json()

    assert body["title"] == "Test Video"
    assert body["description"] == "A video used in tests"
    assert body["thumbnail"] == "https://i.example.com/VALID/maxres.jpg"
    assert body["duration"] == "212"
    assert body["views"] == "1234"
    assert body["uploadDate"] == "2024-01-31"
    assert body["author"] == {
        "name": "Test Channel",
        "channelUrl": "https://www.youtube.com/channel/UC123",
        "avatar": None,
    }
    assert body["video"] == [
        {"quality": "720p", "format": "mp4", "itag": "22"},
        {"quality": "360p", "format": "mp4", "itag": "18"},
    ]
    assert body["audio"] == [
        {"bitrate": 160, "format": "webm", "itag": "251"},
        {"bitrate": 130, "format": "m4a", "itag": "140"},
    ]

    cmd = fake_run.call_args.args[0]
    assert "--dump-json" in cmd
    assert cmd[-1] == "https://youtu.be/VALID"


@pytest.mark.asyncio
async def test_raw_formats_pass_through_as_typed_records(client, fake_run):
    response = await client.get("/api/format", params={"videoUrl": "https://youtu.be/VALID"})
    raw = response.json()["info"]

    assert [f["itag"] for f in raw] == ["sb0", "140", "18", "137", "251", "22"]
    by_itag = {f["itag"]: f for f in raw}
    assert by_itag["22"]["mimeType"] == 'video/mp4; codecs="avc1.64001F, mp4a.40.2"'
    assert by_itag["22"]["hasVideo"] is True
    assert by_itag["22"]["height"] == 720
    assert by_itag["22"]["contentLength"] == 1048576
    assert by_itag["22"]["url"] == "https://cdn.example.com/22"
    assert by_itag["140"]["mimeType"].startswith("audio/m4a")
    assert by_itag["140"]["hasVideo"] is False
    assert by_itag["140"]["hasAudio"] is True


@pytest.mark.asyncio
async def test_video_and_audio_lists_partition_raw_formats(client, fake_run):
    body = (await client.get("/api/format", params={"videoUrl": "https://youtu.be/VALID"})).json()
    by_itag = {f["itag"]: f for f in body["info"]}
    video_ids = {f["itag"] for f in body["video"]}
    audio_ids = {f["itag"] for f in body["audio"]}

    assert not video_ids & audio_ids
    assert video_ids == {i for i, f in by_itag.items() if f["hasVideo"] and f["hasAudio"]}
    assert audio_ids == {i for i, f in by_itag.items() if f["hasAudio"] and not f["hasVideo"]}


@pytest.mark.asyncio
async def test_repeated_calls_are_identical(client, fake_run):
    params = {"videoUrl": "https://youtu.be/VALID"}
    first = (await client.get("/api/format", params=params)).json()
    second = (await client.get("/api/format", params=params)).json()
    assert first == second
    assert fake_run.await_count == 2


@pytest.mark.asyncio
async def test_extraction_failure_returns_500(client, fake_run):
    fake_run.side_effect = failed("ERROR: [youtube] NO_SUCH_VIDEO: Video unavailable")
    response = await client.get("/api/format", params={"videoUrl": "https://youtu.be/NO_SUCH_VIDEO"})
    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to retrieve video information. Please check the URL and try again."
    }


@pytest.mark.asyncio
async def test_unparsable_output_returns_500(client, fake_run):
    fake_run.return_value = dumped()
    response = await client.get("/api/format", params={"videoUrl": "https://youtu.be/VALID"})
    assert response.status_code == 500
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_timeout_returns_500(client, fake_run):
    import asyncio

    fake_run.side_effect = asyncio.TimeoutError()
    response = await client.get("/api/format", params={"videoUrl": "https://youtu.be/VALID"})
    assert response.status_code == 500


@pytest.mark.asyncio
async def test_live_stream_refused(client, fake_run, info):
    info["is_live"] = True
    fake_run.return_value = dumped(info)
    response = await client.get("/api/format", params={"videoUrl": "https://youtu.be/VALID"})
    assert response.status_code == 500
    assert response.json() == {"error": "Live streams are not supported"}


@pytest.mark.asyncio
async def test_error_messages_are_localized(client, fake_run):
    response = await client.get("/api/format", headers={"Accept-Language": "ja,en;q=0.5"})
    assert response.status_code == 400
    assert response.json() == {"error": "無効な動画URLです"}


@pytest.mark.asyncio
async def test_format_without_codec_info_is_listed(client, fake_run, info):
    info["formats"] = [{"format_id": "mp4", "ext": "mp4", "height": 720, "url": "https://cdn.example.com/clip.mp4"}]
    fake_run.return_value = dumped(info)

    body = (await client.get("/api/format", params={"videoUrl": "https://example.com/clip.mp4"})).json()
    assert body["video"] == [{"quality": "720p", "format": "mp4", "itag": "mp4"}]
    assert body["audio"] == []
    assert body["info"][0]["mimeType"] == "video/mp4"
    assert body["info"][0]["hasVideo"] is True


@pytest.mark.asyncio
async def test_fractional_approximate_filesize_is_rounded(client, fake_run, info):
    info["formats"][2]["filesize_approx"] = 1234.5
    fake_run.return_value = dumped(info)

    response = await client.get("/api/format", params={"videoUrl": "https://youtu.be/VALID"})
    assert response.status_code == 200
    by_itag = {f["itag"]: f for f in response.json()["info"]}
    assert by_itag["18"]["contentLength"] == 1234


@pytest.mark.asyncio
async def test_unexpected_info_shape_returns_json_500(client, fake_run, info):
    info["formats"][2]["height"] = "tall"
    fake_run.return_value = dumped(info)

    response = await client.get("/api/format", params={"videoUrl": "https://youtu.be/VALID"})
    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to retrieve video information. Please check the URL and try again."
    }
