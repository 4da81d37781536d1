"""
Core data models for the Feature Flag Service
"""

import time
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, StrictBool, StrictStr


class GetFlagRequest(BaseModel):
    """Body of a ``get`` request"""
    key: StrictStr


class GetFlagResponse(BaseModel):
    """Body of a ``get`` response"""
    value: bool


class SetFlagRequest(BaseModel):
    """Body of a ``set`` request"""
    key: StrictStr
    value: StrictBool


class SetFlagResponse(BaseModel):
    """Body of a ``set`` response"""
    success: bool = True


class ErrorResponse(BaseModel):
    """Error body returned by the exception handlers"""
    error: str
    detail: Optional[Any] = None


class HealthStatus(BaseModel):
    """Health status"""
    status: str  # healthy, degraded, unhealthy
    timestamp: int = Field(default_factory=lambda: int(time.time()))
    version: str = "1.0.0"
    uptime_seconds: int = 0


class ComponentHealth(BaseModel):
    """Health of a single service component"""
    status: str
    backend: Optional[str] = None
    error: Optional[str] = None


class DetailedHealthStatus(HealthStatus):
    """Health status with per-component detail"""
    components: Dict[str, ComponentHealth] = {}


def validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Reduce pydantic error entries to JSON-safe location/message pairs"""
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in errors
    ]
