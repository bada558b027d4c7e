# tests/test_bans.py
"""Tests for the ban gate and ban administration."""

import logging
from datetime import timedelta

import pytest

from threadline.core.errors import ForbiddenError
from threadline.db.time import utcnow
from threadline.services.bans import (
    BANNED_MESSAGE,
    ban_user,
    check_user_ban,
    ensure_not_banned,
    get_user_ban,
    unban_user,
)
from threadline.services.posts import create_post

from conftest import session_for


class TestCheckUserBan:
    def test_expired_ban_is_lifted_once(self, db_session, alice, caplog):
        caplog.set_level(logging.INFO, logger="threadline.services.bans")
        alice.banned = True
        alice.ban_reason = "spam"
        alice.ban_expires = utcnow() - timedelta(hours=1)
        db_session.commit()

        first = check_user_ban(db_session, alice.id)

        db_session.refresh(alice)
        assert first.banned is False
        assert alice.banned is False
        assert alice.ban_reason is None
        assert alice.ban_expires is None
        lifted = [r for r in caplog.records if "expired" in r.getMessage()]
        assert len(lifted) == 1

        second = check_user_ban(db_session, alice.id)

        assert second.banned is False
        lifted = [r for r in caplog.records if "expired" in r.getMessage()]
        assert len(lifted) == 1

    def test_active_ban_is_reported(self, db_session, alice):
        expires = utcnow() + timedelta(days=1)
        alice.banned = True
        alice.ban_reason = "harassment"
        alice.ban_expires = expires
        db_session.commit()

        status = check_user_ban(db_session, alice.id)

        assert status.banned is True
        assert status.reason == "harassment"
        assert status.expires_at is not None

    def test_permanent_ban_never_expires(self, db_session, alice):
        alice.banned = True
        db_session.commit()

        assert check_user_ban(db_session, alice.id).banned is True

    def test_unknown_user_is_not_banned(self, db_session):
        assert check_user_ban(db_session, 9999).banned is False

    def test_ensure_not_banned_raises_for_banned_user(self, db_session, alice):
        alice.banned = True
        db_session.commit()

        with pytest.raises(ForbiddenError) as exc_info:
            ensure_not_banned(db_session, alice.id)

        assert exc_info.value.message == BANNED_MESSAGE


class TestBanAdministration:
    def test_admin_bans_user(self, db_session, admin, alice):
        expires = utcnow() + timedelta(days=3)

        result = ban_user(db_session, session_for(admin), alice.id, "spam", expires)

        assert result.success
        db_session.refresh(alice)
        assert alice.banned is True
        assert alice.ban_reason == "spam"

    def test_anonymous_caller(self, db_session, alice):
        result = ban_user(db_session, None, alice.id, "spam")

        assert result.success is False
        assert result.error == "Not authenticated"
        assert result.code == "unauthorized"

    def test_non_admin_caller(self, db_session, moderator, alice):
        result = ban_user(db_session, session_for(moderator), alice.id, "spam")

        assert result.error == "Not authorized"
        assert result.code == "forbidden"

    def test_unknown_user(self, db_session, admin):
        result = ban_user(db_session, session_for(admin), 9999, "spam")

        assert result.error == "User not found"

    def test_admin_cannot_ban_themselves(self, db_session, admin):
        result = ban_user(db_session, session_for(admin), admin.id, "oops")

        assert result.success is False
        assert result.error == "You cannot ban yourself"

    def test_expiry_must_be_in_the_future(self, db_session, admin, alice):
        result = ban_user(
            db_session, session_for(admin), alice.id, "spam", utcnow() - timedelta(minutes=1)
        )

        assert result.success is False
        db_session.refresh(alice)
        assert alice.banned is False

    def test_unban_clears_every_field(self, db_session, admin, alice):
        ban_user(db_session, session_for(admin), alice.id, "spam", utcnow() + timedelta(days=1))

        result = unban_user(db_session, session_for(admin), alice.id)

        assert result.success
        db_session.refresh(alice)
        assert (alice.banned, alice.ban_reason, alice.ban_expires) == (False, None, None)


class TestBanGate:
    def test_banned_user_cannot_post(self, db_session, alice, thread):
        alice.banned = True
        db_session.commit()

        result = create_post(
            db_session,
            session_for(alice),
            {"thread_id": thread.id, "content": "Let me in"},
        )

        assert result.success is False
        assert result.error == BANNED_MESSAGE

    def test_user_whose_ban_expired_can_post(self, db_session, alice, thread):
        alice.banned = True
        alice.ban_expires = utcnow() - timedelta(seconds=1)
        db_session.commit()

        result = create_post(
            db_session,
            session_for(alice),
            {"thread_id": thread.id, "content": "Back again"},
        )

        assert result.success


class TestGetUserBan:
    def test_moderator_sees_ban_state(self, db_session, moderator, alice):
        alice.banned = True
        alice.ban_reason = "Spam"
        db_session.commit()

        result = get_user_ban(db_session, session_for(moderator), alice.id)

        assert result.success
        assert result.data.banned is True
        assert result.data.reason == "Spam"

    def test_member_is_refused(self, db_session, alice, bob):
        result = get_user_ban(db_session, session_for(alice), bob.id)

        assert result.code == "forbidden"

    def test_unknown_user(self, db_session, admin):
        assert get_user_ban(db_session, session_for(admin), 999).error == "User not found"
