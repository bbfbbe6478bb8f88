import pytest

from clipper.core.platform import Platform
from clipper.models.internal import DownloadIntent, MediaFormat, MediaPayload
from clipper.models.request import DownloadRequest
from clipper.services.format import (
    DEFAULT_AUDIO_FORMAT,
    DEFAULT_VIDEO_FORMAT,
    LOWEST_VIDEO_FORMAT,
    FormatDecision,
)
from clipper.services.ytdlp import YTDLPCommandBuilder, is_valid_youtube_url

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def intent(fmt: MediaFormat, quality=None) -> DownloadIntent:
    return DownloadIntent(url=URL, platform=Platform.YOUTUBE, format=fmt, quality=quality)


@pytest.mark.parametrize("quality,expected", [
    (None, DEFAULT_VIDEO_FORMAT),
    ("highest", DEFAULT_VIDEO_FORMAT),
    ("lowest", LOWEST_VIDEO_FORMAT),
    ("18", f"18/{DEFAULT_VIDEO_FORMAT}"),
])
def test_video_format_selection(quality, expected):
    assert FormatDecision.decide(intent(MediaFormat.MP4, quality)) == expected


def test_height_capped_video_format():
    format_str = FormatDecision.decide(intent(MediaFormat.MP4, "720p"))

    assert format_str.startswith("best[vcodec!=none][acodec!=none][ext=mp4][height<=720]/")
    assert format_str.endswith(DEFAULT_VIDEO_FORMAT)


@pytest.mark.parametrize("quality,prefix", [
    (None, "bestaudio"),
    ("highestaudio", "bestaudio"),
    ("lowestaudio", "worstaudio"),
    ("140", "140/"),
])
def test_audio_format_selection(quality, prefix):
    format_str = FormatDecision.decide(intent(MediaFormat.MP3, quality))

    assert format_str.startswith(prefix)
    assert "[vcodec=none]" in format_str


def test_metadata():
    video = FormatDecision.get_metadata(intent(MediaFormat.MP4))
    audio = FormatDecision.get_metadata(intent(MediaFormat.MP3))

    assert (video.ext, video.media_type) == ("mp4", "video/mp4")
    assert (audio.ext, audio.media_type, audio.format_str) == ("mp3", "audio/mpeg", DEFAULT_AUDIO_FORMAT)


def test_download_request_to_intent():
    result = DownloadRequest(url=URL, format="MP3", quality="").to_intent()

    assert result.format == MediaFormat.MP3
    assert result.platform == Platform.YOUTUBE
    assert result.quality is None

    with pytest.raises(ValueError):
        DownloadRequest(url=URL, format="flac").to_intent()


def test_media_payload_headers():
    payload = MediaPayload(content=b"x" * 1536, filename="Clip.mp4", media_type="video/mp4")

    assert payload.headers() == {
        "Content-Type": "video/mp4",
        "Content-Disposition": 'attachment; filename="Clip.mp4"',
        "Content-Length": "1536",
        "X-File-Size": "1.5 KB",
        "Cache-Control": "no-cache",
    }


@pytest.mark.parametrize("url,valid", [
    ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", True),
    ("https://youtu.be/dQw4w9WgXcQ", True),
    ("https://www.youtube.com/shorts/dQw4w9WgXcQ", True),
    ("https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PL0123456789ABCDEF", True),
    ("https://www.youtube.com/watch?v=short", False),
    ("https://example.com/watch?v=dQw4w9WgXcQ", False),
    ("dQw4w9WgXcQ", False),
    ("", False),
])
def test_is_valid_youtube_url(url, valid):
    assert is_valid_youtube_url(url) is valid


def test_download_command():
    cmd = YTDLPCommandBuilder.build_download_command(
        URL, "bestaudio", "/tmp/abc.%(ext)s", audio_only=True, file_format="mp3"
    )

    assert cmd[0] == "yt-dlp"
    assert cmd[-1] == URL
    assert cmd[cmd.index("-o") + 1] == "/tmp/abc.%(ext)s"
    assert cmd[cmd.index("-f") + 1] == "bestaudio"
    assert "--no-playlist" in cmd
    assert cmd[cmd.index("--retries") + 1] == "0"
    assert cmd[cmd.index("--fragment-retries") + 1] == "0"
    assert ["-x", "--audio-format", "mp3"] == cmd[cmd.index("-x"):cmd.index("-x") + 3]


def test_info_command():
    cmd = YTDLPCommandBuilder.build_info_command(URL)

    assert "--dump-json" in cmd
    assert "--no-playlist" in cmd
    assert cmd[cmd.index("--retries") + 1] == "0"
    assert cmd[cmd.index("--fragment-retries") + 1] == "0"
    assert cmd[-1] == URL
