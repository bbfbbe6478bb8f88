import httpx

from clipper.config.settings import config
from clipper.core.state import state


def get_http_client() -> httpx.AsyncClient:
    """Shared client for keep-alive; created on first use"""
    if state.http_client is None:
        state.http_client = httpx.AsyncClient(
            follow_redirects=True,
            timeout=config.tiktok.timeout_seconds,
            headers={"User-Agent": config.tiktok.user_agent},
        )
    return state.http_client


async def close_http_client() -> None:
    if state.http_client is not None:
        await state.http_client.aclose()
        state.http_client = None
