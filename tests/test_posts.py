# tests/test_posts.py
"""Tests for replying to threads and its side effects."""

from datetime import timedelta

from sqlalchemy import select

from threadline.db.time import as_utc, utcnow
from threadline.models import Notification, NotificationType, Post, Thread
from threadline.services import notifications as notification_service
from threadline.services.posts import DELETED_CONTENT, create_post, delete_post, update_post
from threadline.services.reputation import reputation_ledger

from conftest import make_post, make_thread, session_for


class TestReplyScenario:
    def test_reply_to_someone_elses_thread(self, db_session, alice, bob, thread):
        stale = utcnow() - timedelta(hours=1)
        thread.updated_at = stale
        db_session.commit()

        result = create_post(
            db_session,
            session_for(alice),
            {"thread_id": thread.id, "content": "Have you tried turning it off?"},
        )

        assert result.success
        db_session.refresh(alice)
        assert alice.reputation == 2

        notifications = db_session.scalars(select(Notification)).all()
        assert len(notifications) == 1
        assert notifications[0].type == NotificationType.REPLY
        assert notifications[0].user_id == bob.id
        assert notifications[0].link == f"{thread.link}#post-{result.data.id}"

        refreshed = db_session.get(Thread, thread.id)
        db_session.refresh(refreshed)
        assert as_utc(refreshed.updated_at) > stale
        assert refreshed.reply_count == 1
        assert refreshed.last_post_at is not None

    def test_reply_in_own_thread_earns_reputation_without_notification(
        self, db_session, bob, thread
    ):
        create_post(db_session, session_for(bob), {"thread_id": thread.id, "content": "Bump"})

        db_session.refresh(bob)
        assert bob.reputation == 2
        assert db_session.scalars(select(Notification)).all() == []


class TestBestEffortSideEffects:
    def test_reputation_failure_keeps_post_and_notification(
        self, db_session, alice, thread, monkeypatch
    ):
        def explode(db, author_id):
            raise RuntimeError("ledger offline")

        monkeypatch.setattr(reputation_ledger, "reward_post", explode)

        result = create_post(
            db_session, session_for(alice), {"thread_id": thread.id, "content": "Still here"}
        )

        assert result.success
        assert db_session.get(Post, result.data.id) is not None
        db_session.refresh(alice)
        assert alice.reputation == 0
        assert len(db_session.scalars(select(Notification)).all()) == 1

    def test_notification_failure_keeps_post_and_reputation(
        self, db_session, alice, thread, monkeypatch
    ):
        def explode(**kwargs):
            raise RuntimeError("insert failed")

        monkeypatch.setattr(notification_service, "Notification", explode)

        result = create_post(
            db_session, session_for(alice), {"thread_id": thread.id, "content": "Still here"}
        )

        assert result.success
        db_session.refresh(alice)
        assert alice.reputation == 2
        assert db_session.scalars(select(Notification)).all() == []


class TestReplyRules:
    def test_locked_thread(self, db_session, alice, thread):
        thread.is_locked = True
        db_session.commit()

        result = create_post(
            db_session, session_for(alice), {"thread_id": thread.id, "content": "Too late"}
        )

        assert result.error == "Thread is locked"
        assert result.code == "forbidden"

    def test_missing_thread(self, db_session, alice):
        result = create_post(db_session, session_for(alice), {"thread_id": 404, "content": "Hi"})

        assert result.error == "Thread not found"

    def test_parent_from_another_thread(self, db_session, alice, bob, thread, other_category):
        elsewhere = make_thread(db_session, bob, other_category)
        foreign_parent = make_post(db_session, bob, elsewhere)

        result = create_post(
            db_session,
            session_for(alice),
            {"thread_id": thread.id, "content": "Hi", "parent_id": foreign_parent.id},
        )

        assert result.error == "Parent post belongs to a different thread"

    def test_empty_content(self, db_session, alice, thread):
        result = create_post(db_session, session_for(alice), {"thread_id": thread.id, "content": ""})

        assert result.success is False
        assert result.code == "validation"

    def test_empty_replies_do_not_use_the_window(self, db_session, alice, thread):
        for _ in range(10):
            result = create_post(db_session, session_for(alice), {"thread_id": thread.id, "content": ""})
            assert result.code == "validation"

        result = create_post(db_session, session_for(alice), {"thread_id": thread.id, "content": "Hi"})

        assert result.success

    def test_anonymous(self, db_session, thread):
        result = create_post(db_session, None, {"thread_id": thread.id, "content": "Hi"})

        assert result.error == "Not authenticated"


class TestEditAndDelete:
    def test_author_edits(self, db_session, alice, thread):
        post = make_post(db_session, alice, thread)

        result = update_post(db_session, session_for(alice), post.id, {"content": "Edited"})

        assert result.data.content == "Edited"
        assert result.data.is_edited is True

    def test_stranger_cannot_edit(self, db_session, alice, bob, thread):
        post = make_post(db_session, bob, thread)

        result = update_post(db_session, session_for(alice), post.id, {"content": "Mine now"})

        assert result.error == "Not authorized to update this post"

    def test_category_moderator_edits(self, db_session, moderator, alice, thread):
        post = make_post(db_session, alice, thread)

        assert update_post(db_session, session_for(moderator), post.id, {"content": "Tidied"}).success

    def test_delete_is_soft_and_decrements_reply_count(self, db_session, alice, thread):
        create_post(db_session, session_for(alice), {"thread_id": thread.id, "content": "Oops"})
        post = db_session.scalars(select(Post).order_by(Post.id.desc())).first()

        result = delete_post(db_session, session_for(alice), post.id)
        delete_post(db_session, session_for(alice), post.id)

        assert result.data.is_deleted is True
        assert result.data.content == DELETED_CONTENT
        db_session.refresh(thread)
        assert thread.reply_count == 0
