from dataclasses import dataclass
from typing import Optional

import httpx


@dataclass
class RuntimeState:
    """Centralized runtime state"""
    http_client: Optional[httpx.AsyncClient] = None
    ytdlp_version: str = "unknown"
    active_downloads: int = 0

state = RuntimeState()
