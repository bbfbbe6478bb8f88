import asyncio
from typing import List, NamedTuple
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from yt_dlp.extractor.youtube import YoutubeIE

from clipper.config.settings import config


class CompletedProcess(NamedTuple):
    """Subprocess result"""
    returncode: int
    stdout: bytes
    stderr: bytes


PLAYLIST_PARAMS = ("list", "index", "start_radio")


def strip_playlist_params(url: str) -> str:
    """Drop playlist context from a watch URL; downloads always use --no-playlist"""
    parsed = urlparse(url)
    query = [
        (key, value)
        for key, value in parse_qsl(parsed.query, keep_blank_values=True)
        if key not in PLAYLIST_PARAMS
    ]
    return urlunparse(parsed._replace(query=urlencode(query)))


def is_valid_youtube_url(url: str) -> bool:
    """Validate a single-video YouTube URL with yt-dlp's own extractor"""
    if not url or not url.startswith(("http://", "https://")):
        return False
    try:
        return bool(YoutubeIE.suitable(strip_playlist_params(url)))
    except ValueError:
        return False


class SubprocessExecutor:
    """Run yt-dlp as a child process"""

    @staticmethod
    async def run(cmd: List[str], timeout: float) -> CompletedProcess:
        """
        Run cmd to completion, capturing both streams.
        The child is killed if the timeout expires or the caller is cancelled.
        """
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL
        )

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()

        return CompletedProcess(returncode=process.returncode, stdout=stdout, stderr=stderr)


class YTDLPCommandBuilder:
    """Build yt-dlp commands"""

    @staticmethod
    def _base_command() -> List[str]:
        cmd = [
            config.ytdlp.binary,
            '--no-playlist',
            '--socket-timeout', str(config.download.socket_timeout),
            '--retries', '0',
            '--fragment-retries', '0',
        ]
        if config.ytdlp.js_runtime:
            cmd.extend(['--js-runtimes', config.ytdlp.js_runtime])
        return cmd

    @staticmethod
    def build_version_command() -> List[str]:
        return [config.ytdlp.binary, '--version']

    @staticmethod
    def build_info_command(url: str) -> List[str]:
        """Build command for fetching video info"""
        cmd = YTDLPCommandBuilder._base_command()
        cmd.append('--dump-json')
        cmd.append(url)
        return cmd

    @staticmethod
    def build_download_command(
        url: str,
        format_str: str,
        output_template: str,
        audio_only: bool,
        file_format: str
    ) -> List[str]:
        """Build command for downloading to a scratch file"""
        cmd = YTDLPCommandBuilder._base_command()
        cmd.extend([
            '-f', format_str,
            '-o', output_template,
            '--no-progress',
            '--quiet',
            '--no-part',
        ])

        if audio_only:
            # Extract audio into the requested container
            cmd.extend(['-x', '--audio-format', file_format])
        else:
            cmd.extend(['--remux-video', file_format])

        cmd.append(url)
        return cmd
