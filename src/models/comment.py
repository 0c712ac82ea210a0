"""Comment model."""

from typing import Optional, Any
from pydantic import BaseModel, Field, field_validator


class Comment(BaseModel):
    """Remark attached to exactly one task."""
    id: str = Field(..., description="Store-assigned comment ID")
    task_id: str = Field(..., description="Referenced task ID")
    body: str = Field(..., description="Comment text")
    created_by: Optional[str] = Field(None, description="Author user ID, null when unknown")
    created_at: str = Field(..., description="Store-assigned creation timestamp")

    @field_validator("id", "task_id", "created_by", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        return str(value) if value is not None else value
