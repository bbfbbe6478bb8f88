from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel

from clipper.core.platform import Platform
from clipper.utils.filesize import format_file_size


class MediaFormat(str, Enum):
    """Output container requested by the client"""
    MP4 = "mp4"
    MP3 = "mp3"


class DownloadIntent(BaseModel):
    """Internal download intent (separated from HTTP concerns)"""
    url: str
    platform: Platform
    format: MediaFormat
    quality: Optional[str] = None


class MediaMetadata(BaseModel):
    """Media metadata"""
    format_str: str
    ext: str
    media_type: str


class MediaPayload(BaseModel):
    """Downloaded media held in memory for a single response"""
    content: bytes
    filename: str
    media_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    def headers(self) -> Dict[str, str]:
        return {
            'Content-Type': self.media_type,
            'Content-Disposition': f'attachment; filename="{self.filename}"',
            'Content-Length': str(self.size),
            'X-File-Size': format_file_size(self.size),
            'Cache-Control': 'no-cache',
        }
