"""
Contains utility functions and dependencies for resolving the current user.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from .. import crud
from ..database import get_db


def get_user_id_from_header(
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> int:
    """
    FastAPI dependency to get the current user ID from the X-User-ID header.

    When the header is absent the request is served as the demo user, which
    is created on first access.

    Args:
        x_user_id (str | None): The value of the X-User-ID header.
        db (Session): The database session dependency.

    Raises:
        HTTPException: 400 if the header has an invalid format.
        HTTPException: 404 if no user has that ID.

    Returns:
        int: The validated user ID.
    """
    if x_user_id is None:
        return crud.ensure_demo_user(db).id
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid User ID format in X-User-ID header."
        )
    if crud.get_user(db, user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user_id
