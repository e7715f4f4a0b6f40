"""
Pydantic models for services and their backends.

A service is a logical upstream name; its targets are the concrete
backend URLs the load balancer rotates through.
"""

from typing import List

from pydantic import BaseModel, Field


class TargetCreate(BaseModel):
    """Schema for adding one backend to a service."""

    url: str = Field(..., min_length=1, example="http://users-1:8001")


class ServiceRegister(BaseModel):
    """Schema for replacing the backend list of a service.

    An empty list is allowed: the service then exists but resolving it
    fails with 503 until a backend is added.
    """

    targets: List[str] = Field(default_factory=list, example=["http://users-1:8001", "http://users-2:8001"])


class ServiceRead(BaseModel):
    name: str
    targets: List[str]
    cursor: int = Field(..., description="Index of the backend the next resolve will return")
    dispatched: int = Field(..., description="Number of times the service has been resolved")


class ResolvedTarget(BaseModel):
    url: str = Field(..., example="http://users-1:8001")
