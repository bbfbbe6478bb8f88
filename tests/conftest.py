import asyncio
import json
import os
from typing import Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from clipper.config.settings import config
from clipper.core.state import state
from clipper.main import app
from clipper.services.ytdlp import CompletedProcess, SubprocessExecutor

YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
YOUTUBE_URL_2 = "https://youtu.be/9bZkp7q19f0"
TIKTOK_URL = "https://www.tiktok.com/@someone/video/7234567890123456789"


def youtube_info(title: str = "Never Gonna Give You Up", **overrides) -> dict:
    info = {
        "id": "dQw4w9WgXcQ",
        "title": title,
        "uploader": "Rick Astley",
        "channel": "RickAstleyVEVO",
        "duration": 212,
        "view_count": 1500000000,
        "thumbnail": "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg",
        "description": "The official video",
        "availability": "public",
        "is_live": False,
        "was_live": False,
        "formats": [
            {"format_id": "18", "vcodec": "avc1.42001E", "acodec": "mp4a.40.2", "height": 360, "filesize": 10485760},
            {"format_id": "22", "vcodec": "avc1.64001F", "acodec": "mp4a.40.2", "height": 720, "filesize_approx": 31457280},
            {"format_id": "137", "vcodec": "avc1.640028", "acodec": "none", "height": 1080, "filesize": 99999999},
            {"format_id": "140", "vcodec": "none", "acodec": "mp4a.40.2", "abr": 129.5, "filesize": 3407872},
            {"format_id": "139", "vcodec": "none", "acodec": "mp4a.40.5", "abr": 48.8, "filesize": 1048576},
            {"format_id": "sb0", "vcodec": "none", "acodec": "none"},
        ],
    }
    info.update(overrides)
    return info


class FakeYtDlp:
    """Stands in for the yt-dlp subprocess"""

    def __init__(self):
        self.infos: Dict[str, dict] = {}
        self.media: Dict[str, bytes] = {}
        self.info_returncode = 0
        self.download_returncode = 0
        self.raw_info_stdout: Optional[bytes] = None
        self.calls: List[List[str]] = []

    async def run(self, cmd, timeout):
        self.calls.append(list(cmd))
        url = cmd[-1]
        await asyncio.sleep(0)

        if "--dump-json" in cmd:
            if self.info_returncode != 0:
                return CompletedProcess(self.info_returncode, b"", b"ERROR: Video unavailable")
            stdout = self.raw_info_stdout
            if stdout is None:
                stdout = json.dumps(self.infos.get(url, youtube_info())).encode()
            return CompletedProcess(0, stdout, b"")

        template = cmd[cmd.index("-o") + 1]
        if "-x" in cmd:
            ext = cmd[cmd.index("--audio-format") + 1]
        else:
            ext = cmd[cmd.index("--remux-video") + 1]

        if self.download_returncode != 0:
            with open(template.replace("%(ext)s", "webm.part"), "wb") as f:
                f.write(b"partial")
            return CompletedProcess(self.download_returncode, b"", b"ERROR: HTTP Error 403: Forbidden")

        await asyncio.sleep(0.01)
        with open(template.replace("%(ext)s", ext), "wb") as f:
            f.write(self.media.get(url, b"\x00media\x00"))
        return CompletedProcess(0, b"", b"")

    def download_commands(self) -> List[List[str]]:
        return [c for c in self.calls if "--dump-json" not in c]


class MockMirror:
    """Stands in for tikwm.com and the TikTok media CDN"""

    def __init__(self):
        self.api_payload: object = {"code": 0, "msg": "success", "data": tiktok_data()}
        self.api_status = 200
        self.media: Dict[str, httpx.Response] = {}
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "tikwm.com":
            if isinstance(self.api_payload, (bytes, str)):
                return httpx.Response(self.api_status, content=self.api_payload)
            return httpx.Response(self.api_status, json=self.api_payload)
        return self.media.get(str(request.url), httpx.Response(404))


def tiktok_data(**overrides) -> dict:
    data = {
        "id": "7234567890123456789",
        "title": "Dance #fyp",
        "duration": 15,
        "play_count": 4200,
        "cover": "https://p16-sign.tiktokcdn.com/cover.jpeg",
        "size": 2621440,
        "play": "https://cdn.tikwm.test/play.mp4",
        "wmplay": "https://cdn.tikwm.test/wmplay.mp4",
        "hdplay": "https://cdn.tikwm.test/hdplay.mp4",
        "author": {"nickname": "Some One", "unique_id": "someone"},
    }
    data.update(overrides)
    return data


@pytest.fixture
def scratch_dir(tmp_path, monkeypatch):
    path = tmp_path / "temp"
    monkeypatch.setattr(config.download, "temp_dir", str(path))
    return path


@pytest.fixture
def fake_ytdlp(monkeypatch, scratch_dir):
    fake = FakeYtDlp()
    monkeypatch.setattr(SubprocessExecutor, "run", fake.run)
    return fake


@pytest_asyncio.fixture
async def mirror():
    mock = MockMirror()
    state.http_client = httpx.AsyncClient(transport=httpx.MockTransport(mock.handler))
    yield mock
    await state.http_client.aclose()
    state.http_client = None


@pytest_asyncio.fixture
async def client():
    state.active_downloads = 0
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def scratch_files(path) -> List[str]:
    return os.listdir(path) if os.path.isdir(path) else []
