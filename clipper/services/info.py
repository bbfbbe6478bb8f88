import asyncio
import json
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from clipper.config.settings import config
from clipper.core.platform import Platform, classify_url
from clipper.i18n import i18n
from clipper.models.response import MediaInfo
from clipper.services.tiktok import TikwmClient
from clipper.services.ytdlp import SubprocessExecutor, YTDLPCommandBuilder, is_valid_youtube_url
from clipper.utils.filesize import format_file_size

ERROR_REASON_MAX = 200


def _has_codec(value: Optional[str]) -> bool:
    return bool(value) and value != "none"


def is_audio_and_video(f: Dict[str, Any]) -> bool:
    return _has_codec(f.get("vcodec")) and _has_codec(f.get("acodec"))


def is_audio_only(f: Dict[str, Any]) -> bool:
    return f.get("vcodec") == "none" and _has_codec(f.get("acodec"))


def estimate_size(formats: List[Dict[str, Any]], rank_key: str) -> str:
    """Size of the best rendition in a group, ranked by rank_key"""
    if not formats:
        return "Unknown"
    best = max(formats, key=lambda f: f.get(rank_key) or 0)
    size = best.get("filesize") or best.get("filesize_approx")
    if not size:
        return "Unknown"
    return format_file_size(int(size))


def summarize_youtube_info(info: Dict[str, Any]) -> MediaInfo:
    """Build the preview record from a yt-dlp JSON dump"""
    formats = info.get("formats") or []
    video_formats = [f for f in formats if is_audio_and_video(f)]
    audio_formats = [f for f in formats if is_audio_only(f)]

    thumbnail = info.get("thumbnail")
    if not thumbnail:
        thumbnails = info.get("thumbnails") or []
        thumbnail = thumbnails[0].get("url") if thumbnails else None

    return MediaInfo(
        title=info.get("title") or "Unknown",
        author=info.get("uploader") or info.get("channel") or "Unknown",
        length_seconds=int(info.get("duration") or 0),
        view_count=int(info.get("view_count") or 0),
        thumbnail=thumbnail or "",
        description=info.get("description") or "",
        is_private=info.get("availability") == "private",
        is_live_content=bool(info.get("is_live") or info.get("was_live")),
        estimated_video_size=estimate_size(video_formats, "height"),
        estimated_audio_size=estimate_size(audio_formats, "abr")
    )


def ensure_youtube_url(url: str, locale: str) -> None:
    if not is_valid_youtube_url(url):
        raise HTTPException(
            status_code=400,
            detail=i18n.get("error.invalid_youtube_url", locale=locale)
        )


async def extract_youtube_info(url: str, locale: str) -> Dict[str, Any]:
    """Run yt-dlp --dump-json; extraction failures surface as 500"""
    _ = i18n.translator(locale)
    cmd = YTDLPCommandBuilder.build_info_command(url)

    try:
        result = await SubprocessExecutor.run(cmd, timeout=config.download.info_timeout_seconds)
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail=_("error.timeout"))

    if result.returncode != 0:
        error_msg = result.stderr.decode(errors="replace").strip()
        raise HTTPException(
            status_code=500,
            detail=_("error.fetch_info_failed", reason=error_msg[:ERROR_REASON_MAX])
        )

    try:
        return json.loads(result.stdout.decode())
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise HTTPException(status_code=500, detail=_("error.parse_failed"))


class MediaInfoService:
    """Media info fetching service"""

    @staticmethod
    async def fetch(url: str, locale: str) -> MediaInfo:
        """Classify the URL and resolve a preview from the matching upstream"""
        if classify_url(url) == Platform.TIKTOK:
            video = await TikwmClient.resolve(url, locale, "error.tiktok_info_failed")
            return TikwmClient.to_media_info(video)

        ensure_youtube_url(url, locale)
        info = await extract_youtube_info(url, locale)
        return summarize_youtube_info(info)
