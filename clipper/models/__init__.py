from .internal import DownloadIntent, MediaFormat, MediaMetadata, MediaPayload
from .request import DownloadRequest, InfoRequest
from .response import ErrorResponse, MediaInfo
from .tikwm import TikwmResponse, TikwmVideo

__all__ = [
    "DownloadIntent",
    "DownloadRequest",
    "ErrorResponse",
    "InfoRequest",
    "MediaFormat",
    "MediaInfo",
    "MediaMetadata",
    "MediaPayload",
    "TikwmResponse",
    "TikwmVideo",
]
