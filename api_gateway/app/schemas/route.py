"""
Pydantic models for gateway routes.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class RouteBase(BaseModel):
    prefix: str = Field(..., min_length=1, example="/api/users")
    service: str = Field(..., min_length=1, example="users")
    methods: List[str] = Field(default_factory=list, example=["GET", "POST"], description="Empty means any method")
    strip_prefix: bool = Field(True, description="Forward only the part of the path after the prefix")
    priority: int = Field(0, description="Higher priority routes win over longer prefixes")
    is_active: bool = Field(True, description="Inactive routes answer 503 instead of proxying")


class RouteCreate(RouteBase):
    """Schema for creating a route."""
    pass


class RouteUpdate(BaseModel):
    """Schema for updating a route.  Omitted fields keep their value."""

    prefix: Optional[str] = Field(None, min_length=1, example="/api/users")
    service: Optional[str] = Field(None, min_length=1, example="users")
    methods: Optional[List[str]] = None
    strip_prefix: Optional[bool] = None
    priority: Optional[int] = None
    is_active: Optional[bool] = Field(None, example=False)


class RouteRead(RouteBase):
    """Schema for reading a route."""

    id: str
