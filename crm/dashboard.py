"""Dashboard route: aggregate contact counts for the current user."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import schemas, crud
from .auth import get_current_user_id
from .database import get_db
from .models import ContactStatus

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=schemas.DashboardStats)
def dashboard_stats(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Count the current user's contacts, in total and per status.

    The four counts are separate queries taken at call time; they are not
    a consistent snapshot under concurrent writes.
    """
    return schemas.DashboardStats(
        total_contacts=crud.count_contacts(db, user_id),
        leads=crud.count_contacts(db, user_id, ContactStatus.LEAD),
        customers=crud.count_contacts(db, user_id, ContactStatus.CUSTOMER),
        partners=crud.count_contacts(db, user_id, ContactStatus.PARTNER),
    )
