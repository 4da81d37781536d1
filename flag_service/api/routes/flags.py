"""
Feature Flags API
"""

from fastapi import APIRouter, Depends

from flag_service.api.dependencies import get_flag_store
from flag_service.core.models import (
    GetFlagRequest,
    GetFlagResponse,
    SetFlagRequest,
    SetFlagResponse,
)
from flag_service.feature_flags.store import FlagStore
from flag_service.middleware.metrics import MetricsCollector

router = APIRouter()


@router.post("/get", response_model=GetFlagResponse)
async def get_flag(payload: GetFlagRequest, store: FlagStore = Depends(get_flag_store)):
    value = await store.get_flag(payload.key)
    MetricsCollector.record_flag_read(value)
    return GetFlagResponse(value=value)


@router.post("/set", response_model=SetFlagResponse)
async def set_flag(payload: SetFlagRequest, store: FlagStore = Depends(get_flag_store)):
    success = await store.set_flag(payload.key, payload.value)
    MetricsCollector.record_flag_write()
    return SetFlagResponse(success=success)
