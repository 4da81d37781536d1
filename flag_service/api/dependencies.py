"""
Request dependencies shared by the API routes
"""

from fastapi import HTTPException, Request

from flag_service.feature_flags.store import FlagStore


def get_flag_store(request: Request) -> FlagStore:
    """Return the flag store owned by the running application"""
    store = getattr(request.app.state, "flag_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Flag store not available")
    return store
