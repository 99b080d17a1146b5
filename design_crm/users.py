"""User-related routes for the Design CRM API."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .auth import AuthContext, get_auth_context
from .database import get_db
from .errors import NotFoundError
from . import schemas, crud

router = APIRouter(prefix="/api/auth", tags=["users"])


@router.get("/user", response_model=schemas.UserOut)
def read_current_user(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Retrieve the profile of the signed-in user.

    Args:
        auth (AuthContext): Caller identity.
        db (Session): Database session.

    Returns:
        UserOut: User profile information.
    """
    user = crud.get_user(db, auth.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
