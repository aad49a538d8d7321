from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from utils.validation import strip_markup


class Like(BaseModel):
    user: str


class Comment(BaseModel):
    id: str
    user: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    text: str
    date: datetime


class Post(BaseModel):
    id: str
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    user: str
    date: datetime
    likes: List[Like] = []
    comments: List[Comment] = []


class PostRequest(BaseModel):
    text: str = Field("", validate_default=True)

    @field_validator("text")
    @classmethod
    def text_required(cls, value: str) -> str:
        value = strip_markup(value)
        if not value:
            raise PydanticCustomError("text_required", "Text is required to create a post.")
        return value


class CommentRequest(BaseModel):
    text: str = Field("", validate_default=True)

    @field_validator("text")
    @classmethod
    def text_required(cls, value: str) -> str:
        value = strip_markup(value)
        if not value:
            raise PydanticCustomError("text_required", "Text is required")
        return value


class MessageResponse(BaseModel):
    msg: str
