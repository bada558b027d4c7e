# tests/test_recipients.py
"""Tests for the fan-out rules of every forum event."""

from threadline.models import CategoryModerator, ReportStatus, ReportType
from threadline.services.recipients import (
    LikeAdded,
    ReplyCreated,
    ReportFiled,
    ReportResolved,
    ThreadCreated,
    plan_notifications,
    resolve_recipients,
)

from conftest import make_post, make_thread, make_user


class TestReplyCreated:
    def test_reply_to_thread_notifies_thread_author(self, db_session, alice, bob, thread):
        post = make_post(db_session, alice, thread)

        event = ReplyCreated(post_id=post.id, actor_id=alice.id, actor_name="Alice")

        assert resolve_recipients(db_session, event) == {bob.id}
        [payload] = plan_notifications(db_session, event)
        assert payload.message == f"Alice replied to your thread: {thread.title}"

    def test_author_replying_in_own_thread_notifies_nobody(self, db_session, bob, thread):
        post = make_post(db_session, bob, thread)

        event = ReplyCreated(post_id=post.id, actor_id=bob.id, actor_name="Bob")

        assert resolve_recipients(db_session, event) == set()

    def test_nested_reply_notifies_thread_and_parent_authors(self, db_session, alice, bob, thread):
        carol = make_user(db_session, "Carol")
        parent = make_post(db_session, carol, thread)
        post = make_post(db_session, alice, thread, parent=parent)

        event = ReplyCreated(post_id=post.id, actor_id=alice.id, actor_name="Alice")

        assert resolve_recipients(db_session, event) == {bob.id, carol.id}
        messages = [p.message for p in plan_notifications(db_session, event)]
        assert messages[1] == f"Alice replied to your post in thread: {thread.title}"

    def test_thread_author_who_wrote_parent_gets_both(self, db_session, alice, bob, thread):
        parent = make_post(db_session, bob, thread)
        post = make_post(db_session, alice, thread, parent=parent)

        planned = plan_notifications(
            db_session, ReplyCreated(post_id=post.id, actor_id=alice.id, actor_name="Alice")
        )

        assert [p.user_id for p in planned] == [bob.id, bob.id]

    def test_reply_to_own_post_in_foreign_thread(self, db_session, alice, bob, thread):
        parent = make_post(db_session, alice, thread)
        post = make_post(db_session, alice, thread, parent=parent)

        event = ReplyCreated(post_id=post.id, actor_id=alice.id, actor_name="Alice")

        assert resolve_recipients(db_session, event) == {bob.id}


class TestThreadCreated:
    def test_category_moderators_are_notified(self, db_session, moderator, bob, thread):
        event = ThreadCreated(thread_id=thread.id, actor_id=bob.id, actor_name="Bob")

        assert resolve_recipients(db_session, event) == {moderator.id}

    def test_moderator_opening_a_thread_is_notified_too(self, db_session, moderator, category):
        own = make_thread(db_session, moderator, category, title="Forum rules")

        event = ThreadCreated(thread_id=own.id, actor_id=moderator.id, actor_name="Max")

        assert resolve_recipients(db_session, event) == {moderator.id}

    def test_unmoderated_category_notifies_nobody(self, db_session, bob, other_category):
        quiet = make_thread(db_session, bob, other_category)

        event = ThreadCreated(thread_id=quiet.id, actor_id=bob.id, actor_name="Bob")

        assert resolve_recipients(db_session, event) == set()


class TestLikeAdded:
    def test_thread_like(self, db_session, alice, bob, thread):
        event = LikeAdded(entity_type="thread", entity_id=thread.id, actor_id=alice.id, actor_name="Alice")

        assert resolve_recipients(db_session, event) == {bob.id}

    def test_self_like(self, db_session, bob, thread):
        event = LikeAdded(entity_type="thread", entity_id=thread.id, actor_id=bob.id, actor_name="Bob")

        assert resolve_recipients(db_session, event) == set()


class TestReportFiled:
    def test_admins_and_category_moderators_minus_reporter(
        self, db_session, admin, moderator, alice, thread
    ):
        event = ReportFiled(
            report_id=1, report_type=ReportType.SPAM, reporter_id=alice.id, thread_id=thread.id
        )

        assert resolve_recipients(db_session, event) == {admin.id, moderator.id}

    def test_admin_who_moderates_category_is_notified_once(
        self, db_session, admin, alice, category, thread
    ):
        db_session.add(CategoryModerator(category_id=category.id, user_id=admin.id))
        db_session.commit()

        planned = plan_notifications(
            db_session,
            ReportFiled(
                report_id=1, report_type=ReportType.SPAM, reporter_id=alice.id, thread_id=thread.id
            ),
        )

        assert [p.user_id for p in planned] == [admin.id]
        assert planned[0].message == "A new spam report has been filed and needs review"
        assert planned[0].link == "/admin/reports/1"

    def test_reporting_admin_is_excluded(self, db_session, admin, moderator, thread):
        event = ReportFiled(
            report_id=1, report_type=ReportType.SPAM, reporter_id=admin.id, thread_id=thread.id
        )

        assert resolve_recipients(db_session, event) == {moderator.id}

    def test_user_report_goes_to_admins_only(self, db_session, admin, moderator, alice, bob):
        event = ReportFiled(report_id=1, report_type=ReportType.HARASSMENT, reporter_id=alice.id)

        assert resolve_recipients(db_session, event) == {admin.id}


class TestReportResolved:
    def test_resolved_thread_report_links_thread(self, db_session, alice, thread):
        [payload] = plan_notifications(
            db_session,
            ReportResolved(
                report_id=3, reporter_id=alice.id, status=ReportStatus.RESOLVED, thread_id=thread.id
            ),
        )

        assert payload.user_id == alice.id
        assert payload.actor_id is None
        assert payload.link == thread.link
        assert payload.message == "Your report has been resolved"

    def test_resolved_post_report_links_post_anchor(self, db_session, alice, bob, thread):
        post = make_post(db_session, bob, thread)

        [payload] = plan_notifications(
            db_session,
            ReportResolved(
                report_id=3, reporter_id=alice.id, status=ReportStatus.RESOLVED, post_id=post.id
            ),
        )

        assert payload.link.endswith(f"#post-{post.id}")

    def test_rejected_report_has_no_link(self, db_session, alice, thread):
        [payload] = plan_notifications(
            db_session,
            ReportResolved(
                report_id=3, reporter_id=alice.id, status=ReportStatus.REJECTED, thread_id=thread.id
            ),
        )

        assert payload.link is None
        assert payload.message == "Your report has been rejected"

    def test_in_progress_wording(self, db_session, alice):
        [payload] = plan_notifications(
            db_session,
            ReportResolved(report_id=3, reporter_id=alice.id, status=ReportStatus.IN_PROGRESS),
        )

        assert payload.message == "Your report has been in progress"
