from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class TikwmAuthor(BaseModel):
    model_config = ConfigDict(extra="ignore")

    nickname: Optional[str] = None
    unique_id: Optional[str] = None


class TikwmVideo(BaseModel):
    """The `data` object of a tikwm.com response"""
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    duration: Optional[int] = None
    play_count: Optional[int] = None
    cover: Optional[str] = None
    size: Optional[int] = None
    play: Optional[str] = None
    url: Optional[str] = None
    wmplay: Optional[str] = None
    hdplay: Optional[str] = None
    author: Optional[TikwmAuthor] = None

    @property
    def download_url(self) -> Optional[str]:
        """First available link in play > url > wmplay > hdplay order"""
        for candidate in (self.play, self.url, self.wmplay, self.hdplay):
            if candidate:
                return candidate
        return None


class TikwmResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: int = -1
    msg: Optional[str] = None
    data: Optional[TikwmVideo] = None

    @field_validator("data", mode="before")
    @classmethod
    def drop_non_object_data(cls, v):
        # error responses sometimes carry an empty string or list here
        return v if isinstance(v, dict) else None

    @property
    def ok(self) -> bool:
        return self.code == 0 and self.data is not None
