"""CRUD operations for users and contacts.

This module contains database interaction logic for user and contact
entities, isolated from FastAPI route handlers. Every contact query is
scoped to the owning user's id. Storage failures are rolled back and
surfaced as :class:`~crm.errors.Internal`; nothing is retried.
"""

import logging
from functools import wraps

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas
from .errors import DuplicateIdentity, Internal

logger = logging.getLogger(__name__)

#: Range of ids a 64-bit signed integer primary key can hold
MIN_ID = 1
MAX_ID = 2**63 - 1


def storage_errors(func_):
    """Translate SQLAlchemy failures of a CRUD helper into ``Internal``."""

    @wraps(func_)
    def wrapper(db: Session, *args, **kwargs):
        try:
            return func_(db, *args, **kwargs)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Storage error in %s", func_.__name__)
            raise Internal(str(exc)) from exc

    return wrapper


def create_user(
    db: Session, username: str, email: str, password_hash: str
) -> models.User:
    """
    Create and persist a new user.

    Args:
        db (Session): SQLAlchemy database session.
        username (str): Unique login name.
        email (str): Unique email address.
        password_hash (str): Securely hashed password.

    Raises:
        DuplicateIdentity: If the username or email is already taken.
        Internal: On any other storage failure.

    Returns:
        User: Newly created user instance.
    """
    try:
        existing = db.execute(
            select(models.User).where(
                or_(models.User.email == email, models.User.username == username)
            )
        ).first()
        if existing:
            raise DuplicateIdentity()

        user = models.User(
            username=username,
            email=email,
            password_hash=password_hash,
        )
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        # Lost a race against a concurrent registration.
        db.rollback()
        raise DuplicateIdentity() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Storage error in create_user")
        raise Internal(str(exc)) from exc
    db.refresh(user)
    return user


@storage_errors
def get_user_by_email(db: Session, email: str) -> models.User | None:
    """
    Retrieve a user by email address.

    Args:
        db (Session): Database session.
        email (str): User email.

    Returns:
        User | None: User if found, otherwise ``None``.
    """
    return db.execute(
        select(models.User).where(models.User.email == email)
    ).scalar_one_or_none()


@storage_errors
def get_user_by_id(db: Session, user_id: int) -> models.User | None:
    """
    Retrieve a user by primary key.

    Args:
        db (Session): Database session.
        user_id (int): User identifier.

    Returns:
        User | None: User if found, otherwise ``None``.
    """
    return db.execute(
        select(models.User).where(models.User.id == user_id)
    ).scalar_one_or_none()


@storage_errors
def create_contact(
    db: Session, contact_in: schemas.ContactCreate, user_id: int
) -> models.Contact:
    """
    Create a new contact owned by the given user.

    ``created_at`` and ``updated_at`` start out identical.

    Args:
        db (Session): Database session.
        contact_in (ContactCreate): Validated contact data.
        user_id (int): Owner of the contact.

    Returns:
        Contact: Newly created contact.
    """
    now = models.utcnow()
    contact = models.Contact(
        **contact_in.model_dump(mode="json"),
        owner_id=user_id,
        created_at=now,
        updated_at=now,
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


@storage_errors
def get_contact(db: Session, contact_id: int, user_id: int):
    """
    Retrieve a single contact owned by the given user.

    A contact owned by someone else is reported exactly like a missing one.

    Args:
        db (Session): Database session.
        contact_id (int): Contact identifier.
        user_id (int): Contact owner.

    Returns:
        Contact | None: Contact if found, otherwise ``None``.
    """
    if not MIN_ID <= contact_id <= MAX_ID:
        # Ids outside the column range can never have been stored.
        return None
    return db.execute(
        select(models.Contact).where(
            models.Contact.id == contact_id,
            models.Contact.owner_id == user_id,
        )
    ).scalar_one_or_none()


@storage_errors
def get_contacts(db: Session, user_id: int):
    """
    Retrieve every contact of the given user, newest first.

    Args:
        db (Session): Database session.
        user_id (int): Contact owner.

    Returns:
        list[Contact]: List of contacts.
    """
    stmt = (
        select(models.Contact)
        .where(models.Contact.owner_id == user_id)
        .order_by(models.Contact.created_at.desc(), models.Contact.id.desc())
    )
    return db.scalars(stmt).all()


@storage_errors
def update_contact(db: Session, contact: models.Contact, changes: dict):
    """
    Replace the supplied fields of a contact and touch ``updated_at``.

    Args:
        db (Session): Database session.
        contact (Contact): Contact instance.
        changes (dict): Fields to update.

    Returns:
        Contact: Updated contact.
    """
    for key, value in changes.items():
        setattr(contact, key, value)
    contact.updated_at = models.utcnow()

    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


@storage_errors
def delete_contact(db: Session, contact: models.Contact):
    """
    Delete a contact from the database.

    Args:
        db (Session): Database session.
        contact (Contact): Contact to delete.
    """
    db.delete(contact)
    db.commit()
    return None


@storage_errors
def count_contacts(
    db: Session, user_id: int, status: models.ContactStatus | None = None
) -> int:
    """
    Count the contacts of a user, optionally only those in one status.

    Args:
        db (Session): Database session.
        user_id (int): Contact owner.
        status (ContactStatus | None): Status to filter by.

    Returns:
        int: Number of matching contacts.
    """
    stmt = (
        select(func.count())
        .select_from(models.Contact)
        .where(models.Contact.owner_id == user_id)
    )
    if status is not None:
        stmt = stmt.where(models.Contact.status == status.value)
    return db.scalar(stmt)
