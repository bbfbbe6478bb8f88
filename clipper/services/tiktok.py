import httpx
from fastapi import HTTPException
from pydantic import ValidationError

from clipper.config.settings import config
from clipper.i18n import i18n
from clipper.infra.http import get_http_client
from clipper.models.response import MediaInfo
from clipper.models.tikwm import TikwmResponse, TikwmVideo
from clipper.utils.filesize import format_file_size


class TikwmClient:
    """Client for the tikwm.com TikTok mirror API"""

    @staticmethod
    async def resolve(url: str, locale: str, failure_key: str) -> TikwmVideo:
        """
        Resolve a TikTok page URL to mirror metadata and download links.
        failure_key names the message used when the mirror gives no reason.
        """
        _ = i18n.translator(locale)
        client = get_http_client()

        try:
            resp = await client.get(config.tiktok.api_url, params={"url": url})
            payload = TikwmResponse.model_validate(resp.json())
        except httpx.TimeoutException:
            raise HTTPException(status_code=504, detail=_("error.timeout"))
        except (httpx.HTTPError, ValueError, ValidationError):
            raise HTTPException(status_code=500, detail=_(failure_key))

        if not payload.ok:
            raise HTTPException(status_code=400, detail=payload.msg or _(failure_key))

        return payload.data

    @staticmethod
    async def fetch_media(media_url: str, locale: str) -> bytes:
        """Fetch the binary behind a resolved download link"""
        _ = i18n.translator(locale)
        client = get_http_client()

        try:
            resp = await client.get(media_url, headers={"Referer": "https://www.tiktok.com/"})
        except httpx.TimeoutException:
            raise HTTPException(status_code=504, detail=_("error.timeout"))
        except httpx.HTTPError:
            raise HTTPException(status_code=500, detail=_("error.tiktok_download_failed"))

        if not resp.is_success:
            raise HTTPException(status_code=500, detail=_("error.tiktok_file_failed"))

        return resp.content

    @staticmethod
    def to_media_info(video: TikwmVideo) -> MediaInfo:
        """Map mirror data to the preview record, with fallbacks for absent fields"""
        return MediaInfo(
            title=video.title or "TikTok Video",
            author=(video.author.nickname if video.author else None) or "Unknown",
            length_seconds=video.duration or 0,
            view_count=video.play_count or 0,
            thumbnail=video.cover or "",
            description=video.title or "",
            is_private=False,
            is_live_content=False,
            estimated_video_size=format_file_size(video.size) if video.size else "Unknown",
            estimated_audio_size="N/A (TikTok)"
        )
