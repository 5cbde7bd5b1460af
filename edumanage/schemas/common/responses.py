from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Notice(BaseModel):
    """User-visible outcome of a mutation"""
    level: Literal["success", "error"]
    message: str


class MutationResponse(BaseModel, Generic[T]):
    message: str = Field(..., description="Success notice to display")
    data: Optional[T] = None


class SuccessResponse(BaseModel):
    success: bool = True
