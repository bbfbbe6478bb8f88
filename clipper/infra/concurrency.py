from fastapi import HTTPException, Request

from clipper.config.settings import config
from clipper.core.state import state
from clipper.i18n import i18n
from clipper.utils.locale import get_locale


class ConcurrencyLimiter:
    """
    In-process concurrent download limiter.
    Requests run on a single event loop, so the counter needs no lock.
    The slot is held until the request finishes, including requests
    whose body fails validation after the slot was taken.
    """

    async def __call__(self, request: Request):
        if state.active_downloads >= config.download.max_concurrent:
            locale = get_locale(request.headers.get("accept-language"))
            _ = i18n.translator(locale)
            raise HTTPException(
                status_code=503,
                detail=_("error.server_busy", max=config.download.max_concurrent)
            )

        state.active_downloads += 1
        try:
            yield
        finally:
            state.active_downloads = max(0, state.active_downloads - 1)

concurrency_limiter = ConcurrencyLimiter()
