from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class MediaInfo(BaseModel):
    """Media preview response (camelCase on the wire)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    author: str = "Unknown"
    length_seconds: int = 0
    view_count: int = 0
    thumbnail: str = ""
    description: str = ""
    is_private: bool = False
    is_live_content: bool = False
    estimated_video_size: str = "Unknown"
    estimated_audio_size: str = "Unknown"


class ErrorResponse(BaseModel):
    """Error body returned for every failed request"""
    error: str
