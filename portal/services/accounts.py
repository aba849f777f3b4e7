"""Account helpers: password hashing, lookups and OAuth upserts."""

from __future__ import annotations

from typing import Any, Dict, Optional

import bcrypt
from sqlmodel import Session, func, select

from ..models import User

MAX_BCRYPT_BYTES = 72


def hash_password(password: str) -> str:
    p = password.encode("utf-8")[:MAX_BCRYPT_BYTES]
    return bcrypt.hashpw(p, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    p = plain.encode("utf-8")[:MAX_BCRYPT_BYTES]
    return bcrypt.checkpw(p, hashed.encode("utf-8"))


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def find_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(
        select(User).where(func.lower(User.email) == normalize_email(email))
    ).first()


def create_local_user(session: Session, *, name: str, email: str, password: str) -> User:
    user = User(
        name=(name or "").strip() or email.strip().split("@")[0],
        email=normalize_email(email),
        password_hash=hash_password(password),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def upsert_oauth_user(
    session: Session,
    *,
    provider: str,
    email: str,
    sub: str,
    name: Optional[str],
) -> User:
    """Link or create the account for an OAuth identity, matching on email."""

    user = find_user_by_email(session, email)
    if user:
        changed = False
        if not user.provider_sub:
            user.provider_sub = sub
            changed = True
        if not user.verified:
            user.verified = True
            changed = True
        if changed:
            session.add(user)
            session.commit()
            session.refresh(user)
        return user

    email = normalize_email(email)
    user = User(
        name=name or email.split("@")[0],
        email=email,
        provider=provider,
        provider_sub=sub,
        verified=True,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def user_to_dict(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "level": user.level,
        "coins": user.coins,
        "verified": user.verified,
    }


__all__ = [
    "create_local_user",
    "find_user_by_email",
    "hash_password",
    "normalize_email",
    "upsert_oauth_user",
    "user_to_dict",
    "verify_password",
]
