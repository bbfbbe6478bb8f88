from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from clipper.core.logging import log_error, log_info
from clipper.core.platform import Platform
from clipper.i18n import i18n
from clipper.infra.concurrency import concurrency_limiter
from clipper.models.request import DownloadRequest
from clipper.models.response import ErrorResponse
from clipper.services.download import DownloadService
from clipper.services.info import ensure_youtube_url
from clipper.utils.filesize import format_file_size
from clipper.utils.locale import get_locale

router = APIRouter()

@router.post(
    "/download",
    dependencies=[Depends(concurrency_limiter)],
    responses={
        200: {"content": {"video/mp4": {}, "audio/mpeg": {}}},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    }
)
async def download_media(request: Request, download_request: DownloadRequest):
    """Download media as an mp4/mp3 attachment"""
    
    locale = get_locale(request.headers.get("accept-language"))
    _ = i18n.translator(locale)

    try:
        if not download_request.url or not download_request.format:
            raise HTTPException(status_code=400, detail=_("error.url_and_format_required"))

        platform = download_request.platform
        if platform == Platform.TIKTOK and download_request.format.lower() != "mp4":
            raise HTTPException(status_code=400, detail=_("error.tiktok_mp4_only"))
        if platform == Platform.YOUTUBE:
            ensure_youtube_url(download_request.url, locale)

        try:
            intent = download_request.to_intent()
        except ValueError:
            raise HTTPException(status_code=400, detail=_("error.invalid_format"))

        payload = await DownloadService.download(intent, locale, request)
    except HTTPException:
        raise
    except Exception as e:
        log_error(request, f"Download error: {str(e)}")
        raise HTTPException(status_code=500, detail=_("error.internal"))

    log_info(request, _("log.sending_response", filename=payload.filename, size=format_file_size(payload.size)))
    return Response(
        content=payload.content,
        status_code=200,
        media_type=payload.media_type,
        headers=payload.headers()
    )
