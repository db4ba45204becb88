from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from notes_admin.queries import SortBy


# Users

class UserCreateRequest(BaseModel):
    """Request model to create a user"""
    name: str = Field(..., description="Display name")
    email: str = Field("", description="Contact email")


class UserUpdateRequest(BaseModel):
    """Rename a user; email is kept when omitted"""
    name: str = Field(..., description="New display name")
    email: Optional[str] = Field(None, description="New contact email")


class UserResponse(BaseModel):
    """User response model"""
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


# Categories

class CategoryRequest(BaseModel):
    """Create or rename a category"""
    name: str = Field(..., description="Display name")


class CategoryResponse(BaseModel):
    """Category response model"""
    id: int
    name: str

    class Config:
        from_attributes = True


# Notes

class NoteCreateRequest(BaseModel):
    """Create note request"""
    user_id: int = Field(..., description="Owning user")
    category_id: int = Field(..., description="Category the note is filed under")
    content: str = Field("", description="Note content")


class NoteUpdateRequest(BaseModel):
    """Edit note request; the owning user cannot be changed"""
    category_id: int = Field(..., description="New category")
    content: str = Field("", description="New note content")


class NoteResponse(BaseModel):
    """Note response model"""
    id: int
    user_id: int
    user_name: str
    category_id: int
    category_name: str
    content: str

    class Config:
        from_attributes = True


# Statistics

class UserStatistic(BaseModel):
    """Number of notes owned by one user"""
    user_id: int
    user_name: str
    notes_count: int


class StatisticsResponse(BaseModel):
    """Per-user note counts"""
    user_statistics: List[UserStatistic] = Field(default_factory=list)


class IndexQuery(BaseModel):
    """Index filters; a blank form value means no filter"""
    user_id: Optional[int] = None
    category_id: Optional[int] = None
    sort_by: Optional[SortBy] = None

    @field_validator("user_id", "category_id", "sort_by", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class IndexResponse(BaseModel):
    """Filtered note listing with live statistics and the lookup lists"""
    notes: List[NoteResponse]
    statistics: StatisticsResponse
    categories: List[CategoryResponse]
    users: List[UserResponse]
    user_id: Optional[int] = None
    category_id: Optional[int] = None
    sort_by: Optional[SortBy] = None
