"""Contact management routes for the CRM API."""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from . import schemas, crud
from .database import get_db
from .auth import get_current_user_id
from .errors import NotFound

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.get("", response_model=List[schemas.ContactOut])
def list_contacts(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Retrieve every contact belonging to the current user.

    Args:
        db (Session): Database session.
        user_id (int): Authenticated user id.

    Returns:
        list[ContactOut]: Contacts, newest first.
    """
    return crud.get_contacts(db, user_id=user_id)


@router.get("/{contact_id}", response_model=schemas.ContactOut)
def get_contact(
    contact_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Retrieve a single contact by ID for the current user.

    Args:
        contact_id (int): Contact identifier.
        db (Session): Database session.
        user_id (int): Authenticated user id.

    Raises:
        NotFound: If the user owns no contact with that id.

    Returns:
        ContactOut: Contact data.
    """
    c = crud.get_contact(db, contact_id, user_id)
    if not c:
        raise NotFound()
    return c


@router.post(
    "", response_model=schemas.ContactOut, status_code=status.HTTP_201_CREATED
)
def create_contact(
    contact_in: schemas.ContactCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Create a new contact owned by the current user.

    Args:
        contact_in (ContactCreate): Contact input data.
        db (Session): Database session.
        user_id (int): Authenticated user id.

    Returns:
        ContactOut: Created contact.
    """
    c = crud.create_contact(db, contact_in, user_id)
    logger.info("User %s created contact %s", user_id, c.id)
    return c


@router.put("/{contact_id}", response_model=schemas.ContactOut)
def update_contact(
    contact_id: int,
    changes: schemas.ContactUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Update an existing contact.

    Fields present in the body replace the stored values; the id, owner
    and creation time never change.

    Args:
        contact_id (int): Contact identifier.
        changes (ContactUpdate): Fields to update.
        db (Session): Database session.
        user_id (int): Authenticated user id.

    Raises:
        NotFound: If the user owns no contact with that id.

    Returns:
        ContactOut: Updated contact.
    """
    c = crud.get_contact(db, contact_id, user_id)
    if not c:
        raise NotFound()
    c = crud.update_contact(
        db, c, changes.model_dump(mode="json", exclude_unset=True)
    )
    logger.info("User %s updated contact %s", user_id, c.id)
    return c


@router.delete("/{contact_id}", response_model=schemas.Message)
def remove_contact(
    contact_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Delete a contact owned by the current user.

    Args:
        contact_id (int): Contact identifier.
        db (Session): Database session.
        user_id (int): Authenticated user id.

    Raises:
        NotFound: If the user owns no contact with that id.

    Returns:
        dict: Deletion message.
    """
    c = crud.get_contact(db, contact_id, user_id)
    if not c:
        raise NotFound()
    crud.delete_contact(db, c)
    logger.info("User %s deleted contact %s", user_id, contact_id)
    return {"message": "Contact deleted successfully"}
