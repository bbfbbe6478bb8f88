from fastapi import APIRouter, HTTPException, Request

from clipper.core.logging import log_error, log_info
from clipper.i18n import i18n
from clipper.models.request import InfoRequest
from clipper.models.response import ErrorResponse, MediaInfo
from clipper.services.info import MediaInfoService
from clipper.utils.locale import get_locale, safe_url_for_log

router = APIRouter()

@router.post(
    "/info",
    response_model=MediaInfo,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def get_media_info(request: Request, info_request: InfoRequest):
    """Resolve a metadata preview for a YouTube or TikTok URL"""
    
    locale = get_locale(request.headers.get("accept-language"))
    _ = i18n.translator(locale)

    if not info_request.url:
        raise HTTPException(status_code=400, detail=_("error.url_required"))
    
    safe_url = safe_url_for_log(info_request.url)
    log_info(request, _("log.fetching_info", url=safe_url))
    
    try:
        media_info = await MediaInfoService.fetch(info_request.url, locale)
    except HTTPException:
        raise
    except Exception as e:
        log_error(request, f"Media info error: {str(e)}")
        raise HTTPException(status_code=500, detail=_("error.internal"))

    log_info(request, _("log.info_retrieved", title=media_info.title))
    log_info(
        request,
        _(
            "log.estimated_sizes",
            video=media_info.estimated_video_size,
            audio=media_info.estimated_audio_size
        )
    )
    return media_info
