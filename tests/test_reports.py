# tests/test_reports.py
"""Tests for filing, moderating and listing reports."""

from sqlalchemy import select

from threadline.models import (
    CategoryModerator,
    Notification,
    NotificationType,
    Report,
    ReportStatus,
    ReportType,
    UserRole,
)
from threadline.services.rate_limit import RATE_LIMITED_MESSAGE
from threadline.services.reports import (
    create_report,
    get_report_stats,
    get_reports,
    update_report_status,
)
from threadline.services.threads import delete_thread

from conftest import make_post, make_thread, make_user, session_for


def _form(**targets) -> dict:
    form = {"type": "SPAM", "reason": "spam links", "details": "Posted the same link twice"}
    form.update(targets)
    return form


def _notified(db) -> list[int]:
    return sorted(n.user_id for n in db.scalars(select(Notification)))


def _report(db, reporter, status=ReportStatus.PENDING, **targets) -> Report:
    report = Report(
        type=ReportType.SPAM,
        reason="spam links",
        reporter_id=reporter.id,
        status=status,
        **targets,
    )
    db.add(report)
    db.commit()
    return report


class TestReportValidation:
    def test_missing_target(self, db_session, alice):
        result = create_report(db_session, session_for(alice), _form())

        assert result.success is False
        assert result.error == "You must specify what you are reporting"
        assert result.code == "validation"

    def test_blank_targets_count_as_missing(self, db_session, alice):
        result = create_report(
            db_session, session_for(alice), _form(thread_id="", post_id="", reported_id="")
        )

        assert result.error == "You must specify what you are reporting"

    def test_more_than_one_target(self, db_session, alice, bob, thread):
        result = create_report(
            db_session, session_for(alice), _form(thread_id=thread.id, reported_id=bob.id)
        )

        assert result.error == "Report only one item at a time"

    def test_reason_too_short(self, db_session, alice, thread):
        form = _form(thread_id=thread.id)
        form["reason"] = "bad"

        result = create_report(db_session, session_for(alice), form)

        assert result.success is False
        assert result.error.startswith("reason:")

    def test_unknown_target(self, db_session, alice):
        result = create_report(db_session, session_for(alice), _form(post_id=999))

        assert result.error == "Post not found"

    def test_anonymous(self, db_session, thread):
        result = create_report(db_session, None, _form(thread_id=thread.id))

        assert result.error == "You must be signed in to report content"

    def test_banned_reporter(self, db_session, alice, thread):
        alice.banned = True
        db_session.commit()

        result = create_report(db_session, session_for(alice), _form(thread_id=thread.id))

        assert result.error == "Your account has been banned"

    def test_invalid_reports_do_not_use_the_window(self, db_session, alice, thread):
        for _ in range(5):
            assert create_report(db_session, session_for(alice), _form()).code == "validation"

        result = create_report(db_session, session_for(alice), _form(thread_id=thread.id))

        assert result.success

    def test_deleted_thread_cannot_be_reported(self, db_session, alice, thread):
        thread.is_deleted = True
        db_session.commit()

        result = create_report(db_session, session_for(alice), _form(thread_id=thread.id))

        assert result.error == "Thread not found"

    def test_reports_are_rate_limited(self, db_session, alice, thread):
        for _ in range(5):
            assert create_report(db_session, session_for(alice), _form(thread_id=thread.id)).success

        result = create_report(db_session, session_for(alice), _form(thread_id=thread.id))

        assert result.success is False
        assert result.error == RATE_LIMITED_MESSAGE
        assert result.code == "rate_limited"
        assert result.reset_time is not None


class TestReportFanOut:
    def test_single_target_report_is_pending(self, db_session, alice, thread):
        result = create_report(
            db_session, session_for(alice), _form(thread_id=str(thread.id), post_id="")
        )

        assert result.success
        assert result.data.status == ReportStatus.PENDING
        assert result.data.thread_id == thread.id
        assert result.data.reporter_id == alice.id

    def test_post_report_notifies_moderators_and_admins_not_reporter(
        self, db_session, admin, moderator, bob, thread
    ):
        reporter = make_user(db_session, "Rita", UserRole.admin)
        post = make_post(db_session, bob, thread)

        result = create_report(db_session, session_for(reporter), _form(post_id=post.id))

        assert result.success
        assert _notified(db_session) == sorted([admin.id, moderator.id])
        notification = db_session.scalar(select(Notification))
        assert notification.type == NotificationType.MODERATION
        assert notification.entity_id == result.data.id
        assert notification.link == f"/admin/reports/{result.data.id}"

    def test_admin_moderator_gets_a_single_notification(
        self, db_session, admin, alice, category, thread
    ):
        db_session.add(CategoryModerator(category_id=category.id, user_id=admin.id))
        db_session.commit()

        create_report(db_session, session_for(alice), _form(thread_id=thread.id))

        assert _notified(db_session) == [admin.id]


class TestUpdateReportStatus:
    def test_category_moderator_resolves_and_reporter_is_told(
        self, db_session, moderator, alice, thread
    ):
        report = _report(db_session, alice, thread_id=thread.id)

        result = update_report_status(
            db_session, session_for(moderator), report.id, ReportStatus.RESOLVED, "Removed"
        )

        assert result.success
        assert result.data.status == ReportStatus.RESOLVED
        assert result.data.closed_by_id == moderator.id
        assert result.data.resolution == "Removed"
        notification = db_session.scalar(select(Notification))
        assert notification.user_id == alice.id
        assert notification.title == "Report Update"
        assert notification.link == thread.link

    def test_report_on_deleted_thread_stays_with_its_moderators(
        self, db_session, moderator, alice, bob, thread
    ):
        post = make_post(db_session, bob, thread)
        thread_report = _report(db_session, alice, thread_id=thread.id)
        post_report = _report(db_session, alice, post_id=post.id)
        assert delete_thread(db_session, session_for(moderator), thread.id).success

        queue = get_reports(db_session, session_for(moderator)).data
        results = [
            update_report_status(
                db_session, session_for(moderator), report.id, ReportStatus.RESOLVED, "Removed"
            )
            for report in (thread_report, post_report)
        ]

        assert queue.pagination.total_count == 2
        assert [r.success for r in results] == [True, True]
        assert [r.data.status for r in results] == [ReportStatus.RESOLVED] * 2

    def test_moderator_of_other_category_is_refused(
        self, db_session, alice, thread, other_category
    ):
        outsider = make_user(db_session, "Olga", UserRole.moderator)
        db_session.add(CategoryModerator(category_id=other_category.id, user_id=outsider.id))
        db_session.commit()
        report = _report(db_session, alice, thread_id=thread.id)

        result = update_report_status(
            db_session, session_for(outsider), report.id, ReportStatus.RESOLVED
        )

        assert result.error == "You don't have permission to moderate this content"

    def test_user_reports_are_admin_only(self, db_session, moderator, alice, bob):
        report = _report(db_session, alice, reported_id=bob.id)

        result = update_report_status(
            db_session, session_for(moderator), report.id, ReportStatus.RESOLVED
        )

        assert result.error == "Only administrators can handle user reports"

    def test_admin_handles_user_reports(self, db_session, admin, alice, bob):
        report = _report(db_session, alice, reported_id=bob.id)

        result = update_report_status(
            db_session, session_for(admin), report.id, ReportStatus.REJECTED
        )

        assert result.success
        assert db_session.scalar(select(Notification)).link is None

    def test_regular_user_is_refused(self, db_session, alice, thread):
        report = _report(db_session, alice, thread_id=thread.id)

        result = update_report_status(
            db_session, session_for(alice), report.id, ReportStatus.RESOLVED
        )

        assert result.error == "Unauthorized"

    def test_missing_report(self, db_session, admin):
        result = update_report_status(db_session, session_for(admin), 404, ReportStatus.RESOLVED)

        assert result.error == "Report not found"


class TestListing:
    def _populate(self, db, reporter, author, thread, other_thread):
        post = make_post(db, author, thread)
        other_post = make_post(db, author, other_thread)
        return [
            _report(db, reporter, thread_id=thread.id),
            _report(db, reporter, status=ReportStatus.RESOLVED, post_id=post.id),
            _report(db, reporter, thread_id=other_thread.id),
            _report(db, reporter, post_id=other_post.id),
            _report(db, reporter, reported_id=author.id),
        ]

    def test_moderator_sees_only_moderated_categories(
        self, db_session, moderator, alice, bob, thread, other_category
    ):
        other_thread = make_thread(db_session, bob, other_category)
        reports = self._populate(db_session, alice, bob, thread, other_thread)

        result = get_reports(db_session, session_for(moderator))

        assert result.success
        assert sorted(r.id for r in result.data.items) == [reports[0].id, reports[1].id]
        assert result.data.pagination.total_count == 2

    def test_admin_sees_everything(self, db_session, admin, alice, bob, thread, other_category):
        other_thread = make_thread(db_session, bob, other_category)
        self._populate(db_session, alice, bob, thread, other_thread)

        result = get_reports(db_session, session_for(admin))

        assert result.data.pagination.total_count == 5
        assert result.data.items[0].reported_id == bob.id

    def test_status_filter(self, db_session, admin, moderator, alice, bob, thread, other_category):
        other_thread = make_thread(db_session, bob, other_category)
        self._populate(db_session, alice, bob, thread, other_thread)

        admin_pending = get_reports(db_session, session_for(admin), ReportStatus.PENDING)
        mod_resolved = get_reports(db_session, session_for(moderator), ReportStatus.RESOLVED)

        assert admin_pending.data.pagination.total_count == 4
        assert mod_resolved.data.pagination.total_count == 1

    def test_moderator_without_categories_sees_nothing(self, db_session, alice, thread):
        loner = make_user(db_session, "Lone", UserRole.moderator)
        _report(db_session, alice, thread_id=thread.id)

        result = get_reports(db_session, session_for(loner))

        assert result.data.items == []

    def test_regular_user_cannot_list(self, db_session, alice):
        assert get_reports(db_session, session_for(alice)).error == "Unauthorized"

    def test_stats(self, db_session, admin, moderator, alice, bob, thread, other_category):
        other_thread = make_thread(db_session, bob, other_category)
        self._populate(db_session, alice, bob, thread, other_thread)

        admin_stats = get_report_stats(db_session, session_for(admin)).data
        mod_stats = get_report_stats(db_session, session_for(moderator)).data

        assert (admin_stats.total, admin_stats.pending, admin_stats.total_this_week) == (5, 4, 5)
        assert admin_stats.resolved_today == 1
        assert (mod_stats.total, mod_stats.pending) == (2, 1)
