"""Auth functions: password hashing, sessions, audit trail."""

import pytest
from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.core.auth import (
    hash_password,
    login_user,
    logout_user,
    register_user,
    verify_password,
)
from coursemint.models.audit import AuditLogEvent
from coursemint.models.user import Session, UserStatus


def test_password_hash_verifies():
    hashed = hash_password("SecurePass123!")
    assert hashed != "SecurePass123!"
    assert verify_password("SecurePass123!", hashed)
    assert not verify_password("other", hashed)


@pytest.mark.asyncio
async def test_register_normalises_email(db_session: AsyncSession):
    user = await register_user(
        db_session, email="  Ana@Example.COM ", password="SecurePass123!", full_name="Ana"
    )
    assert user.email == "ana@example.com"
    assert user.status == UserStatus.active
    assert user.full_name == "Ana"


@pytest.mark.asyncio
async def test_login_opens_session(db_session: AsyncSession):
    await register_user(db_session, email="login@example.com", password="SecurePass123!")
    user, token = await login_user(
        db_session, email="login@example.com", password="SecurePass123!"
    )
    result = await db_session.execute(select(Session).where(Session.token == token))
    session = result.scalar_one()
    assert len(token) == 64
    assert session.user_id == user.id
    assert session.revoked is False


@pytest.mark.asyncio
async def test_login_inactive_account(db_session: AsyncSession):
    user = await register_user(db_session, email="off@example.com", password="SecurePass123!")
    user.status = UserStatus.suspended
    await db_session.flush()

    with pytest.raises(HTTPException) as exc:
        await login_user(db_session, email="off@example.com", password="SecurePass123!")
    assert exc.value.status_code == 403


@pytest.mark.asyncio
async def test_login_unknown_email(db_session: AsyncSession):
    with pytest.raises(HTTPException) as exc:
        await login_user(db_session, email="ghost@example.com", password="whatever1")
    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_auth_events_audit_logged(db_session: AsyncSession):
    user = await register_user(db_session, email="audit@example.com", password="SecurePass123!")
    _, token = await login_user(db_session, email="audit@example.com", password="SecurePass123!")
    await logout_user(db_session, token=token)
    await logout_user(db_session, token="unknown-token")

    result = await db_session.execute(
        select(AuditLogEvent)
        .where(AuditLogEvent.user_id == user.id)
        .order_by(AuditLogEvent.timestamp.asc())
    )
    events = result.scalars().all()
    assert [e.event_type for e in events] == ["auth.register", "auth.login", "auth.logout"]
    assert events[1].entity_type == "Session"
    assert events[1].entity_id == events[2].entity_id
    assert [e.action for e in events[1:]] == ["login", "logout"]
