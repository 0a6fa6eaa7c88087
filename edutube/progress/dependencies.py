"""FastAPI dependencies for progress tracking."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .service import ProgressError
from .store import ProgressStore


async def get_progress_store(request: Request) -> ProgressStore:
    """Get the progress store from app state.

    Raises:
        HTTPException 503: If the store was not initialized
    """
    store = getattr(request.app.state, "progress_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Progress store not available",
        )
    return store


ProgressStoreDep = Annotated[ProgressStore, Depends(get_progress_store)]


def handle_progress_error(error: ProgressError) -> HTTPException:
    """Convert progress errors to HTTP exceptions."""
    status_map = {
        "invalid_course": status.HTTP_400_BAD_REQUEST,
        "invalid_lesson": status.HTTP_400_BAD_REQUEST,
        "invalid_watch_progress": status.HTTP_422_UNPROCESSABLE_ENTITY,
    }

    status_code = status_map.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    return HTTPException(
        status_code=status_code,
        detail=error.message,
    )
