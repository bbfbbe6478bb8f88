from typing import Optional

from pydantic import BaseModel, Field

from clipper.core.platform import Platform, classify_url
from clipper.models.internal import DownloadIntent, MediaFormat


class InfoRequest(BaseModel):
    url: Optional[str] = Field(None, description="YouTube or TikTok URL")

    @property
    def platform(self) -> Platform:
        return classify_url(self.url or "")


class DownloadRequest(InfoRequest):
    format: Optional[str] = Field(None, description="Output format: mp4 or mp3")
    quality: Optional[str] = Field(
        None,
        description="Quality hint (highest, lowest, highestaudio, lowestaudio, 720p or a yt-dlp format id)"
    )

    def to_intent(self) -> DownloadIntent:
        """
        Convert to download intent.
        Raises ValueError for formats outside mp4/mp3.
        """
        return DownloadIntent(
            url=self.url,
            platform=self.platform,
            format=MediaFormat(str(self.format).lower()),
            quality=self.quality or None
        )
