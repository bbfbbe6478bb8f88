import asyncio
import os
import time
import uuid

import aiofiles
from fastapi import HTTPException, Request

from clipper.config.settings import config
from clipper.core.logging import log_debug, log_error, log_info
from clipper.core.platform import Platform
from clipper.i18n import i18n
from clipper.models.internal import DownloadIntent, MediaFormat, MediaPayload
from clipper.services.format import FormatDecision
from clipper.services.info import ensure_youtube_url, extract_youtube_info
from clipper.services.tiktok import TikwmClient
from clipper.services.ytdlp import SubprocessExecutor, YTDLPCommandBuilder
from clipper.utils.filename import attachment_filename, url_fallback_name
from clipper.utils.filesize import format_file_size
from clipper.utils.locale import safe_url_for_log
from clipper.utils.scratch import pick_scratch_file, remove_scratch_files

STDERR_MAX_CHARS = 500
TIKTOK_FALLBACK_NAME = "tiktok-video"


class DownloadService:
    """Media download service"""

    @staticmethod
    async def download(intent: DownloadIntent, locale: str, request: Request) -> MediaPayload:
        """Fetch the full media payload for a validated intent"""
        if intent.platform == Platform.TIKTOK:
            return await DownloadService._download_tiktok(intent, locale, request)
        return await DownloadService._download_youtube(intent, locale, request)

    @staticmethod
    async def _download_tiktok(intent: DownloadIntent, locale: str, request: Request) -> MediaPayload:
        _ = i18n.translator(locale)

        if intent.format != MediaFormat.MP4:
            raise HTTPException(status_code=400, detail=_("error.tiktok_mp4_only"))

        video = await TikwmClient.resolve(intent.url, locale, "error.tiktok_video_failed")
        media_url = video.download_url
        if not media_url:
            raise HTTPException(status_code=400, detail=_("error.tiktok_no_video"))

        log_info(request, _("log.starting_download", url=safe_url_for_log(intent.url), format="mp4"))
        content = await TikwmClient.fetch_media(media_url, locale)

        return MediaPayload(
            content=content,
            filename=attachment_filename(video.title, "mp4", TIKTOK_FALLBACK_NAME),
            media_type="video/mp4"
        )

    @staticmethod
    async def _download_youtube(intent: DownloadIntent, locale: str, request: Request) -> MediaPayload:
        """
        Download to a per-request scratch file, read it back, then delete it.
        Scratch files are keyed by a fresh uuid so concurrent requests
        for the same title never share a path.
        """
        _ = i18n.translator(locale)
        kind = _("media.video") if intent.format == MediaFormat.MP4 else _("media.audio")
        safe_url = safe_url_for_log(intent.url)

        ensure_youtube_url(intent.url, locale)
        info = await extract_youtube_info(intent.url, locale)
        title = info.get("title") or ""

        metadata = FormatDecision.get_metadata(intent)
        log_info(request, _("log.starting_download", url=safe_url, format=metadata.format_str))

        scratch_dir = config.download.temp_dir
        os.makedirs(scratch_dir, exist_ok=True)
        temp_id = uuid.uuid4().hex
        output_template = os.path.join(scratch_dir, f"{temp_id}.%(ext)s")

        cmd = YTDLPCommandBuilder.build_download_command(
            intent.url,
            metadata.format_str,
            output_template,
            audio_only=intent.format == MediaFormat.MP3,
            file_format=metadata.ext
        )

        started = time.monotonic()
        try:
            try:
                result = await SubprocessExecutor.run(cmd, timeout=config.download.timeout_seconds)
            except asyncio.TimeoutError:
                log_error(request, f"yt-dlp timed out after {config.download.timeout_seconds}s")
                raise HTTPException(status_code=504, detail=_("error.timeout"))
            except OSError as e:
                log_error(request, f"Could not start yt-dlp: {e}")
                raise HTTPException(status_code=500, detail=_("error.download_failed", kind=kind))

            if result.returncode != 0:
                error_summary = result.stderr.decode(errors="replace").strip()
                log_error(request, f"yt-dlp failed: {error_summary[:STDERR_MAX_CHARS]}")
                raise HTTPException(status_code=500, detail=_("error.download_failed", kind=kind))

            output_path = pick_scratch_file(scratch_dir, temp_id, metadata.ext)
            if output_path is None:
                log_error(request, "Output file not found after download")
                raise HTTPException(status_code=500, detail=_("error.download_failed", kind=kind))

            try:
                async with aiofiles.open(output_path, "rb") as f:
                    content = await f.read()
            except OSError as e:
                log_error(request, f"Error reading {output_path}: {e}")
                raise HTTPException(status_code=500, detail=_("error.process_failed", kind=kind))
        finally:
            removed = remove_scratch_files(scratch_dir, temp_id)
            log_debug(request, _("log.cleaned_up", count=removed, temp_id=temp_id))

        log_info(
            request,
            _("log.download_finished", size=format_file_size(len(content)), elapsed=time.monotonic() - started)
        )

        return MediaPayload(
            content=content,
            filename=attachment_filename(title, metadata.ext, url_fallback_name(intent.url)),
            media_type=metadata.media_type
        )
