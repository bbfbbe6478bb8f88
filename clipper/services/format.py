import re
from typing import Optional

from clipper.models.internal import DownloadIntent, MediaFormat, MediaMetadata

# Progressive renditions only: a single file carrying both tracks
AUDIO_AND_VIDEO = "[vcodec!=none][acodec!=none]"
AUDIO_ONLY = "[vcodec=none][acodec!=none]"

DEFAULT_VIDEO_FORMAT = f"best{AUDIO_AND_VIDEO}[ext=mp4]/best{AUDIO_AND_VIDEO}"
LOWEST_VIDEO_FORMAT = f"worst{AUDIO_AND_VIDEO}[ext=mp4]/worst{AUDIO_AND_VIDEO}"
DEFAULT_AUDIO_FORMAT = f"bestaudio{AUDIO_ONLY}/bestaudio"
LOWEST_AUDIO_FORMAT = f"worstaudio{AUDIO_ONLY}/worstaudio"

HEIGHT_QUALITY = re.compile(r"^(\d{3,4})p$")

MEDIA_TYPES = {
    MediaFormat.MP4: "video/mp4",
    MediaFormat.MP3: "audio/mpeg",
}


class FormatDecision:
    """Make format decisions"""

    @staticmethod
    def _video_format(quality: Optional[str]) -> str:
        if not quality or quality == "highest":
            return DEFAULT_VIDEO_FORMAT
        if quality == "lowest":
            return LOWEST_VIDEO_FORMAT

        match = HEIGHT_QUALITY.match(quality)
        if match:
            height = match.group(1)
            return (
                f"best{AUDIO_AND_VIDEO}[ext=mp4][height<={height}]/"
                f"best{AUDIO_AND_VIDEO}[height<={height}]/"
                f"{DEFAULT_VIDEO_FORMAT}"
            )

        # Explicit format id; fall back to default if it doesn't exist
        return f"{quality}/{DEFAULT_VIDEO_FORMAT}"

    @staticmethod
    def _audio_format(quality: Optional[str]) -> str:
        if not quality or quality in ("highest", "highestaudio"):
            return DEFAULT_AUDIO_FORMAT
        if quality in ("lowest", "lowestaudio"):
            return LOWEST_AUDIO_FORMAT
        return f"{quality}/{DEFAULT_AUDIO_FORMAT}"

    @staticmethod
    def decide(intent: DownloadIntent) -> str:
        """Decide yt-dlp format selector based on intent"""
        if intent.format == MediaFormat.MP3:
            return FormatDecision._audio_format(intent.quality)
        return FormatDecision._video_format(intent.quality)

    @staticmethod
    def get_metadata(intent: DownloadIntent) -> MediaMetadata:
        """Get media metadata based on intent"""
        return MediaMetadata(
            format_str=FormatDecision.decide(intent),
            ext=intent.format.value,
            media_type=MEDIA_TYPES[intent.format]
        )
