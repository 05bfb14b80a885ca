# models/resources.py

"""
Request payloads for the nested resources.

Only the fields authorization cares about are modelled strictly;
the rest of each record is passed through to storage untouched.
"""

from typing import Optional
from pydantic import BaseModel, field_validator


class ProjectCreate(BaseModel):
    title: str
    description: Optional[str] = None

    @field_validator("title")
    def title_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("title is required")
        return v.strip()


class ProjectUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


class StageCreate(BaseModel):
    title: str
    description: Optional[str] = None
    order_index: int = 0


class StageUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    order_index: Optional[int] = None


class MediaCreate(BaseModel):
    """Metadata for a photo, video, BIM model or document; the file lives elsewhere."""
    file_name: str
    file_url: Optional[str] = None
    folder_id: Optional[int] = None
    stage_id: Optional[int] = None
    project_id: Optional[int] = None
    visible_to_owner: Optional[bool] = None


class CommentCreate(BaseModel):
    content: str
    x: Optional[float] = None
    y: Optional[float] = None
    visible_to_owner: Optional[bool] = None

    @field_validator("content")
    def content_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("content is required")
        return v.strip()

    @field_validator("x", "y")
    def coordinate_in_range(cls, v):
        # Pin coordinates are percentages of the image
        if v is not None and not 0 <= v <= 100:
            raise ValueError("coordinates must be between 0 and 100")
        return v


class VisibilityUpdate(BaseModel):
    visible_to_owner: bool


class FolderCreate(BaseModel):
    name: str
    order_index: int = 0

    @field_validator("name")
    def name_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()


class FolderUpdate(BaseModel):
    name: Optional[str] = None
    order_index: Optional[int] = None

    @field_validator("name")
    def name_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("name cannot be blank")
        return v.strip() if v else v


class MediaMove(BaseModel):
    """Target folder for a photo or video; None files it back under "All"."""
    folder_id: Optional[int] = None
