from typing import List, Optional
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from configs import db
from db.models.user import User, UserRole
from utils.errors import ValidationError


def list_users(role: UserRole | None = None) -> List[User]:
    q = User.query
    if role is not None:
        q = q.filter(User.role == UserRole(role))
    return q.order_by(User.email.asc()).all()


def get_user(user_id: str) -> Optional[User]:
    return db.session.get(User, user_id)


def get_user_by_email(email: str) -> Optional[User]:
    return User.query.filter(func.lower(User.email) == email.strip().lower()).first()


def upsert_user(now: datetime, **fields) -> User:
    user = db.session.get(User, fields["id"]) if fields.get("id") else None
    if user is None:
        user = User(created_at=now, **fields)
        db.session.add(user)
    else:
        for k, v in fields.items():
            if v is not None:
                setattr(user, k, v)
    user.updated_at = now
    try:
        _commit()
    except IntegrityError:
        raise ValidationError("Email already registered")
    return user


def create_employee_user(
    email: str, first_name: str, last_name: str | None, password_hash: str, now: datetime
) -> User:
    if get_user_by_email(email) is not None:
        raise ValidationError("Email already registered")
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        password_hash=password_hash,
        role=UserRole.EMPLOYEE,
        created_at=now,
        updated_at=now,
    )
    db.session.add(user)
    try:
        _commit()
    except IntegrityError:
        raise ValidationError("Email already registered")
    return user


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
