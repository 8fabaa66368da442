"""Tests for the seed_user script."""

import pytest
from sqlalchemy import select

from app.models.enums import UserRole
from app.models.user import User
from app.scripts.seed_user import create_or_update_user, main
from app.services.auth import verify_password


@pytest.mark.asyncio
async def test_creates_manager(db, session_factory):
    await create_or_update_user("boss@example.com", "managerpass", session_factory=session_factory)

    user = (await db.execute(select(User).where(User.email == "boss@example.com"))).scalar_one()
    assert user.role == UserRole.MANAGER
    assert user.is_active is True
    assert verify_password("managerpass", user.hashed_password)


@pytest.mark.asyncio
async def test_updates_existing_user(db, make_user, session_factory):
    existing = await make_user(UserRole.SALES, email="rep@example.com")
    existing.is_active = False
    await db.commit()

    await create_or_update_user(
        "rep@example.com", "newpassword", role=UserRole.FINANCE, session_factory=session_factory
    )

    await db.refresh(existing)
    assert existing.role == UserRole.FINANCE
    assert existing.is_active is True
    assert verify_password("newpassword", existing.hashed_password)
    count = len((await db.execute(select(User))).scalars().all())
    assert count == 1


@pytest.mark.parametrize("argv", [
    ["--email", "not-an-email", "--password", "longenough"],
    ["--email", "boss@example.com", "--password", "short"],
])
def test_main_rejects_bad_input(argv, capsys):
    assert main(argv) == 1
    assert "Error" in capsys.readouterr().err
