"""
Notification dispatch: event producers in, per-recipient notifications out.

Two layers:

Producer functions (``notify_*``):
    Called by the code that performed the triggering write (a view, a
    service). Each one enqueues ``notifications.tasks.dispatch_notification_event``
    and returns immediately. They never raise: a broker outage is logged and
    the producer's own request carries on.

NotificationDispatcher:
    Runs inside the Celery task. One classmethod per event performs
    resolve recipients -> resolve actor identity -> render title/message ->
    write one draft per recipient. A failed write for one recipient is
    logged and fan-out continues with the rest. Each handler returns a
    FanOutReport.

Event registry:
    EVENT_HANDLERS maps the event name carried in the task payload to the
    dispatcher method. ``NotificationDispatcher.dispatch`` is the catch-all
    boundary used by the task.

Usage:
    from notifications.dispatch import notify_post_liked

    like = PostLike.objects.create(user=request.user, post=post)
    notify_post_liked(post.id, request.user.id)
    return Response(status=201)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from django.utils import timezone

from authentication.models import UserRole
from core.exceptions import NotFoundError
from notifications.identity import IdentityResolver, clean_display_value
from notifications.models import EntityType, NotificationType
from notifications.recipients import RecipientResolver, RoleScope
from notifications.services import NotificationDraft, NotificationService
from posts.models import Post, PostComment
from profiles.models import StudentProfile
from schools.models import PaymentType, School, SchoolPaymentRecord

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

    from notifications.recipients import Recipient, RecipientSet

logger = logging.getLogger(__name__)

# Name fallbacks used in message templates when no source has a name
FALLBACK_SCOUT = "A scout"
FALLBACK_PLAYER = "A player"

SCOUT_SCOPES = (RoleScope(UserRole.XEN_SCOUT), RoleScope(UserRole.SCOUT_ADMIN))


@dataclass
class FanOutReport:
    """Outcome of one fan-out."""

    event: str
    recipients: int = 0
    created: int = 0
    refreshed: int = 0
    duplicates: int = 0
    failed: int = 0
    aborted: bool = False
    failed_user_ids: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "event": self.event,
            "recipients": self.recipients,
            "created": self.created,
            "refreshed": self.refreshed,
            "duplicates": self.duplicates,
            "failed": self.failed,
            "aborted": self.aborted,
        }


def format_amount(value: Any) -> str:
    """Render a money amount with two decimals ("250" -> "250.00")."""
    try:
        return f"{Decimal(str(value)):.2f}"
    except (InvalidOperation, ValueError):
        return str(value)


def currency_symbol(currency: str | None) -> str:
    """Dollar sign for USD or a missing currency, else the upper-cased code."""
    code = clean_display_value(currency).upper()
    return "$" if code in ("", "USD") else code


def days_until(moment, now=None) -> int:
    """Whole days until ``moment``, rounded up (12 hours away -> 1)."""
    now = now or timezone.now()
    return math.ceil((moment - now).total_seconds() / 86400)


def plural_days(days: int) -> str:
    return f"{days} day" if days == 1 else f"{days} days"


def quoted(value: Any) -> str:
    """Space-prefixed quoted value for message templates, "" when missing."""
    value = clean_display_value(value)
    return f' "{value}"' if value else ""


def subscription_label(frequency: Any) -> str:
    frequency = clean_display_value(frequency)
    return f"{frequency} subscription" if frequency else "subscription"


def possessive_school(name: Any) -> str:
    """Possessive school name, "A school's" when the name is missing."""
    name = clean_display_value(name)
    return f"{name}'s" if name else "A school's"


def change_range(before: Any, after: Any, unit: str = "") -> str:
    """
    Render " from X to Y" for a before/after pair.

    Degrades to " to Y" without a before value and to "" without an after
    value, so templates never show a missing value.
    """
    before = clean_display_value(before)
    after = clean_display_value(after)
    suffix = f" {unit}" if unit else ""
    if before and after:
        return f" from {before} to {after}{suffix}"
    if after:
        return f" to {after}{suffix}"
    return ""


class NotificationDispatcher:
    """
    Per-event fan-out handlers.

    Handlers receive plain JSON-serializable arguments (ids as strings) so
    they can be invoked from the Celery task payload.
    """

    # -------------------------------------------------------------------------
    # Boundary
    # -------------------------------------------------------------------------

    @classmethod
    def dispatch(cls, event: str, payload: dict[str, Any]) -> FanOutReport:
        """
        Run the handler registered for ``event``.

        Never raises. Unknown events, missing entities and recipient lookup
        failures abort the fan-out with zero notifications written.
        """
        handler = EVENT_HANDLERS.get(event)
        if handler is None:
            logger.error(f"No notification handler registered for event {event!r}")
            return FanOutReport(event=event, aborted=True)

        try:
            return handler(**payload)
        except NotFoundError as e:
            logger.warning(f"Skipping {event} notifications: {e.message}")
        except Exception:
            logger.exception(f"Notification fan-out for {event} aborted")
        return FanOutReport(event=event, aborted=True)

    @classmethod
    def fan_out(
        cls,
        event: str,
        recipients: RecipientSet,
        build_draft: Callable[[Recipient], NotificationDraft],
    ) -> FanOutReport:
        """
        Write one notification per recipient.

        Each write is independent: a failure is logged with its stack trace
        and the loop moves on to the next recipient.
        """
        report = FanOutReport(event=event, recipients=len(recipients))

        for recipient in recipients:
            try:
                result = NotificationService.create_notification(
                    build_draft(recipient)
                )
            except Exception:
                report.failed += 1
                report.failed_user_ids.append(str(recipient.user_id))
                logger.exception(
                    f"Failed to write {event} notification for user {recipient.user_id}"
                )
                continue

            if result.success and result.error_code == "REFRESHED":
                report.refreshed += 1
            elif result.success:
                report.created += 1
            else:
                report.duplicates += 1

        logger.info(
            f"Fan-out {event}: {report.created} created, {report.refreshed} refreshed, "
            f"{report.duplicates} duplicates, {report.failed} failed "
            f"of {report.recipients} recipients"
        )
        return report

    @staticmethod
    def actor_name(
        actor_id: Any, hint: str | None = None, fallback: str | None = None
    ) -> str:
        """Producer-supplied name when usable, else resolved, else fallback."""
        name = clean_display_value(hint)
        if name:
            return name
        return IdentityResolver.display_name(actor_id, fallback=fallback)

    # -------------------------------------------------------------------------
    # Social
    # -------------------------------------------------------------------------

    @classmethod
    def post_created(cls, post_id: str) -> FanOutReport:
        """Followers of the author learn about a new post."""
        post = Post.objects.select_related("student").filter(pk=post_id).first()
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")

        student = post.student
        name = clean_display_value(student.name) or cls.actor_name(student.user_id)
        recipients = RecipientResolver.followers_of_student(
            student.id, exclude=student.user_id
        )

        return cls.fan_out(
            "post_created",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.FOLLOWING_POSTED,
                title="New Post",
                message=f"{name} posted something new",
                entity_type=EntityType.POST,
                entity_id=post.id,
                related_user_id=student.user_id,
                metadata={"postId": str(post.id), "studentId": str(student.id)},
            ),
        )

    @classmethod
    def post_liked(
        cls, post_id: str, liker_id: str, liker_name: str | None = None
    ) -> FanOutReport:
        """
        The post author learns about a like.

        One notification per liker per post; a re-like bumps it to the top
        of the feed and marks it unread again.
        """
        post = Post.objects.select_related("student").filter(pk=post_id).first()
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")

        name = cls.actor_name(liker_id, liker_name)
        recipients = RecipientResolver.explicit_set(
            [post.student.user_id], exclude=liker_id
        )

        return cls.fan_out(
            "post_liked",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.POST_LIKE,
                title="New Like",
                message=f"{name} liked your post",
                entity_type=EntityType.POST_LIKE,
                entity_id=f"{post.id}:{liker_id}",
                related_user_id=liker_id,
                metadata={"postId": str(post.id)},
                refresh=True,
            ),
        )

    @classmethod
    def post_commented(
        cls, comment_id: str, commenter_name: str | None = None
    ) -> FanOutReport:
        """The post author learns about a comment."""
        comment = (
            PostComment.objects.select_related("post__student")
            .filter(pk=comment_id)
            .first()
        )
        if comment is None:
            raise NotFoundError(f"Comment {comment_id} not found")

        post = comment.post
        name = cls.actor_name(comment.user_id, commenter_name)
        recipients = RecipientResolver.explicit_set(
            [post.student.user_id], exclude=comment.user_id
        )

        return cls.fan_out(
            "post_commented",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.POST_COMMENT,
                title="New Comment",
                message=f"{name} commented on your post",
                entity_type=EntityType.POST_COMMENT,
                entity_id=comment.id,
                related_user_id=comment.user_id,
                metadata={"postId": str(post.id), "commentId": str(comment.id)},
            ),
        )

    @classmethod
    def student_followed(
        cls, student_id: str, follower_id: str, follower_name: str | None = None
    ) -> FanOutReport:
        """The followed player learns about a new follower."""
        student = StudentProfile.objects.filter(pk=student_id).first()
        if student is None:
            raise NotFoundError(f"Student {student_id} not found")

        name = cls.actor_name(follower_id, follower_name)
        recipients = RecipientResolver.explicit_set(
            [student.user_id], exclude=follower_id
        )

        return cls.fan_out(
            "student_followed",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.NEW_FOLLOWER,
                title="New Follower",
                message=f"{name} started following you",
                entity_type=EntityType.USER,
                entity_id=f"{student.user_id}:{follower_id}",
                related_user_id=follower_id,
                metadata={"followerId": str(follower_id), "studentId": str(student.id)},
                refresh=True,
            ),
        )

    # -------------------------------------------------------------------------
    # XEN Watch submissions
    # -------------------------------------------------------------------------

    @classmethod
    def submission_created(
        cls,
        submission_id: str,
        student_user_id: str,
        student_name: str | None = None,
    ) -> FanOutReport:
        """Every scout and scout admin learns about a new video submission."""
        name = cls.actor_name(student_user_id, student_name, fallback=FALLBACK_PLAYER)
        recipients = RecipientResolver.union_of_roles(
            SCOUT_SCOPES, exclude=student_user_id
        )

        return cls.fan_out(
            "submission_created",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.SUBMISSION_CREATED,
                title="New Submission",
                message=f"{name} has submitted a new video for review",
                entity_type=EntityType.SUBMISSION,
                entity_id=submission_id,
                related_user_id=student_user_id,
                metadata={"submissionId": str(submission_id)},
            ),
        )

    @classmethod
    def review_submitted(
        cls,
        submission_id: str,
        reviewer_id: str,
        is_submitted: bool = True,
        reviewer_name: str | None = None,
    ) -> FanOutReport:
        """Other scouts learn that a review was submitted (drafts are ignored)."""
        if not is_submitted:
            logger.debug(
                f"Review by {reviewer_id} on submission {submission_id} is a draft, "
                f"not notifying"
            )
            return FanOutReport(event="review_submitted")

        name = cls.actor_name(reviewer_id, reviewer_name, fallback=FALLBACK_SCOUT)
        recipients = RecipientResolver.union_of_roles(SCOUT_SCOPES, exclude=reviewer_id)

        return cls.fan_out(
            "review_submitted",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.REVIEW_SUBMITTED,
                title="Review Submitted",
                message=f"{name} has submitted their review for a submission",
                entity_type=EntityType.SUBMISSION_REVIEW,
                entity_id=f"{submission_id}:{reviewer_id}",
                related_user_id=reviewer_id,
                metadata={"submissionId": str(submission_id)},
            ),
        )

    @classmethod
    def submission_finalized(
        cls, submission_id: str, finalized_by_id: str | None = None
    ) -> FanOutReport:
        """Scouts learn that a submission was finalized and sent back."""
        recipients = RecipientResolver.union_of_roles(
            SCOUT_SCOPES, exclude=finalized_by_id
        )

        return cls.fan_out(
            "submission_finalized",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.SUBMISSION_FINALIZED,
                title="Submission Finalized",
                message=(
                    "A submission you reviewed has been finalized and sent to "
                    "the student"
                ),
                entity_type=EntityType.SUBMISSION,
                entity_id=submission_id,
                metadata={"submissionId": str(submission_id)},
            ),
        )

    @classmethod
    def submission_received(
        cls, submission_id: str, student_user_id: str
    ) -> FanOutReport:
        """The player gets a receipt for their submission."""
        recipients = RecipientResolver.explicit_set([student_user_id])

        return cls.fan_out(
            "submission_received",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.SUBMISSION_RECEIVED,
                title="Submission Received",
                message=(
                    "Your video has been received! Our scouts will review it "
                    "shortly and provide feedback."
                ),
                entity_type=EntityType.SUBMISSION,
                entity_id=submission_id,
                metadata={"submissionId": str(submission_id)},
            ),
        )

    @classmethod
    def submission_feedback_ready(
        cls,
        submission_id: str,
        student_user_id: str,
        rating: Any = None,
    ) -> FanOutReport:
        """The player learns their submission has been reviewed."""
        rating_label = clean_display_value(rating)
        rating_text = ""
        if rating_label:
            rating_text = f" Your submission received a {rating_label}/5 rating."
        message = (
            f"Your XEN Watch submission has been reviewed!{rating_text} "
            "Check your submissions page to view the detailed feedback."
        )
        recipients = RecipientResolver.explicit_set([student_user_id])

        return cls.fan_out(
            "submission_feedback_ready",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.SUBMISSION_FEEDBACK_READY,
                title="Feedback Ready",
                message=message,
                entity_type=EntityType.SUBMISSION,
                entity_id=submission_id,
                metadata={"submissionId": str(submission_id), "rating": rating},
            ),
        )

    # -------------------------------------------------------------------------
    # Schools and subscriptions
    # -------------------------------------------------------------------------

    @classmethod
    def subscription_expiring(cls, school_id: str) -> FanOutReport:
        """
        System admins and the school's admins learn the subscription is
        about to expire. The two audiences get different wording.
        """
        school = School.objects.filter(pk=school_id).first()
        if school is None:
            raise NotFoundError(f"School {school_id} not found")
        if school.subscription_expires_at is None:
            logger.info(f"School {school_id} has no subscription expiry, skipping")
            return FanOutReport(event="subscription_expiring")

        expires_at = school.subscription_expires_at
        days = days_until(expires_at)
        school_name = clean_display_value(school.name)
        subscription = subscription_label(school.payment_frequency)
        recipients = RecipientResolver.union_of_roles(
            [
                RoleScope(UserRole.SYSTEM_ADMIN),
                RoleScope(UserRole.SCHOOL_ADMIN, school.id),
            ]
        )
        metadata = {
            "schoolId": str(school.id),
            "schoolName": school_name or None,
            "expiresAt": expires_at.isoformat(),
            "daysUntilExpiry": days,
            "paymentAmount": format_amount(school.payment_amount),
            "paymentFrequency": school.payment_frequency,
        }

        def build(r: Recipient) -> NotificationDraft:
            if r.role == UserRole.SYSTEM_ADMIN:
                title = "School Subscription Expiring"
                message = (
                    f"{possessive_school(school_name)} {subscription} expires in "
                    f"{plural_days(days)}. Please renew to avoid service interruption."
                )
            else:
                title = "Subscription Expiring Soon"
                message = (
                    f"Your school's {subscription} expires in "
                    f"{plural_days(days)}. Please contact your administrator to renew."
                )
            return NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.SUBSCRIPTION_EXPIRING,
                title=title,
                message=message,
                entity_type=EntityType.SCHOOL_SUBSCRIPTION,
                entity_id=f"{school.id}:{expires_at.date().isoformat()}",
                metadata=metadata,
            )

        return cls.fan_out("subscription_expiring", recipients, build)

    @classmethod
    def school_payment_recorded(cls, payment_record_id: str) -> FanOutReport:
        """
        System admins and the school's admins learn about a recorded payment.

        The notification type and wording depend on the payment type.
        """
        record = (
            SchoolPaymentRecord.objects.select_related("school")
            .filter(pk=payment_record_id)
            .first()
        )
        if record is None:
            raise NotFoundError(f"School payment record {payment_record_id} not found")

        school = record.school
        notification_type, title, message = cls._school_payment_text(record)
        recipients = RecipientResolver.union_of_roles(
            [
                RoleScope(UserRole.SYSTEM_ADMIN),
                RoleScope(UserRole.SCHOOL_ADMIN, school.id),
            ]
        )
        metadata = {
            "paymentRecordId": str(record.id),
            "schoolId": str(school.id),
            "schoolName": clean_display_value(school.name) or None,
            "paymentAmount": format_amount(record.payment_amount),
            "paymentFrequency": record.payment_frequency,
            "paymentType": record.payment_type,
            "studentLimitBefore": record.student_limit_before,
            "studentLimitAfter": record.student_limit_after,
            "oldFrequency": record.old_frequency or None,
            "newFrequency": record.new_frequency or None,
        }

        return cls.fan_out(
            "school_payment_recorded",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=notification_type,
                title=title,
                message=message,
                entity_type=EntityType.SCHOOL_PAYMENT_RECORD,
                entity_id=record.id,
                metadata=metadata,
            ),
        )

    @staticmethod
    def _school_payment_text(record: SchoolPaymentRecord) -> tuple[str, str, str]:
        school_name = clean_display_value(record.school.name)
        owner = possessive_school(school_name)
        amount = format_amount(record.payment_amount)
        frequency = clean_display_value(record.payment_frequency)

        if record.payment_type == PaymentType.RENEWAL:
            return (
                NotificationType.SCHOOL_RENEWAL,
                "School Subscription Renewed",
                f"{owner} {subscription_label(frequency)} has been renewed for ${amount}",
            )
        if record.payment_type == PaymentType.STUDENT_LIMIT_INCREASE:
            change = change_range(
                record.student_limit_before, record.student_limit_after, "students"
            )
            return (
                NotificationType.SCHOOL_LIMIT_INCREASE,
                "Student Limit Increased",
                f"{owner} student limit has been increased{change} (Payment: ${amount})",
            )
        if record.payment_type == PaymentType.STUDENT_LIMIT_DECREASE:
            change = change_range(
                record.student_limit_before, record.student_limit_after, "students"
            )
            return (
                NotificationType.SCHOOL_LIMIT_DECREASE,
                "Student Limit Decreased",
                f"{owner} student limit has been decreased{change}",
            )
        if record.payment_type == PaymentType.FREQUENCY_CHANGE:
            change = change_range(record.old_frequency, record.new_frequency)
            return (
                NotificationType.SCHOOL_FREQUENCY_CHANGE,
                "Payment Frequency Changed",
                f"{owner} payment frequency changed{change} (Payment: ${amount})",
            )

        frequency_text = f" ({frequency})" if frequency else ""
        school_text = f" for {school_name}" if school_name else ""
        return (
            NotificationType.SCHOOL_PAYMENT_RECORDED,
            "School Payment Recorded",
            f"Payment of ${amount}{frequency_text} recorded{school_text}",
        )

    @classmethod
    def xen_watch_payment(
        cls,
        transaction_id: str,
        student_user_id: str,
        amount_cents: int,
        currency: str = "usd",
        student_name: str | None = None,
    ) -> FanOutReport:
        """System admins learn about a XEN Watch payment."""
        name = cls.actor_name(student_user_id, student_name, fallback=FALLBACK_PLAYER)
        amount = f"{Decimal(amount_cents) / 100:.2f}"
        symbol = currency_symbol(currency)
        recipients = RecipientResolver.role_in_scope(UserRole.SYSTEM_ADMIN)

        return cls.fan_out(
            "xen_watch_payment",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.XEN_WATCH_PAYMENT,
                title="XEN Watch Payment Received",
                message=f"{name} made a payment of {symbol}{amount} for XEN Watch submission",
                entity_type=EntityType.PAYMENT_TRANSACTION,
                entity_id=transaction_id,
                related_user_id=student_user_id,
                metadata={
                    "transactionId": str(transaction_id),
                    "studentId": str(student_user_id),
                    "studentName": name,
                    "amountCents": amount_cents,
                    "amount": amount,
                    "currency": clean_display_value(currency).lower() or "usd",
                },
            ),
        )

    @classmethod
    def school_created(
        cls, school_id: str, created_by_id: str | None = None
    ) -> FanOutReport:
        """System admins learn about a new school."""
        school = School.objects.filter(pk=school_id).first()
        if school is None:
            raise NotFoundError(f"School {school_id} not found")

        recipients = RecipientResolver.role_in_scope(
            UserRole.SYSTEM_ADMIN, exclude=created_by_id
        )

        return cls.fan_out(
            "school_created",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.SCHOOL_CREATED,
                title="New School Created",
                message=f"A new school{quoted(school.name)} has been added to the platform",
                entity_type=EntityType.SCHOOL,
                entity_id=school.id,
                related_user_id=created_by_id,
                metadata={
                    "schoolId": str(school.id),
                    "schoolName": clean_display_value(school.name) or None,
                },
            ),
        )

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    @classmethod
    def school_admin_created(
        cls,
        admin_user_id: str,
        school_id: str,
        admin_name: str | None = None,
    ) -> FanOutReport:
        """System admins learn about a new school admin."""
        school = School.objects.filter(pk=school_id).first()
        if school is None:
            raise NotFoundError(f"School {school_id} not found")

        name = cls.actor_name(admin_user_id, admin_name)
        school_name = clean_display_value(school.name)
        school_text = f"for {school_name}" if school_name else "for their school"
        recipients = RecipientResolver.role_in_scope(
            UserRole.SYSTEM_ADMIN, exclude=admin_user_id
        )

        return cls.fan_out(
            "school_admin_created",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.SCHOOL_ADMIN_CREATED,
                title="New School Admin Created",
                message=f"{name} has been added as an admin {school_text}",
                entity_type=EntityType.USER,
                entity_id=admin_user_id,
                related_user_id=admin_user_id,
                metadata={
                    "schoolAdminId": str(admin_user_id),
                    "schoolId": str(school.id),
                    "schoolName": school_name or None,
                },
            ),
        )

    @classmethod
    def scout_created(
        cls, scout_user_id: str, scout_name: str | None = None
    ) -> FanOutReport:
        """Scout admins learn about a new scout profile."""
        name = cls.actor_name(scout_user_id, scout_name, fallback=FALLBACK_SCOUT)
        recipients = RecipientResolver.role_in_scope(
            UserRole.SCOUT_ADMIN, exclude=scout_user_id
        )

        return cls.fan_out(
            "scout_created",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.SCOUT_CREATED,
                title="New Scout Added",
                message=f"A new scout profile has been created: {name}",
                entity_type=EntityType.USER,
                entity_id=scout_user_id,
                related_user_id=scout_user_id,
                metadata={"scoutId": str(scout_user_id)},
            ),
        )

    @classmethod
    def xen_scout_created(
        cls, scout_user_id: str, xen_id: str = "", scout_name: str | None = None
    ) -> FanOutReport:
        """System admins learn about a new XEN scout."""
        return cls._scout_account_created(
            "xen_scout_created",
            NotificationType.XEN_SCOUT_CREATED,
            "New XEN Scout Created",
            "XEN Scout",
            scout_user_id,
            xen_id,
            scout_name,
        )

    @classmethod
    def scout_admin_created(
        cls, scout_user_id: str, xen_id: str = "", scout_name: str | None = None
    ) -> FanOutReport:
        """System admins learn about a new scout admin."""
        return cls._scout_account_created(
            "scout_admin_created",
            NotificationType.SCOUT_ADMIN_CREATED,
            "New Scout Admin Created",
            "Scout Admin",
            scout_user_id,
            xen_id,
            scout_name,
        )

    @classmethod
    def _scout_account_created(
        cls,
        event: str,
        notification_type: str,
        title: str,
        role_label: str,
        scout_user_id: str,
        xen_id: str,
        scout_name: str | None,
    ) -> FanOutReport:
        name = cls.actor_name(scout_user_id, scout_name, fallback=FALLBACK_SCOUT)
        xen_id = clean_display_value(xen_id)
        suffix = f" ({xen_id})" if xen_id else ""
        recipients = RecipientResolver.role_in_scope(
            UserRole.SYSTEM_ADMIN, exclude=scout_user_id
        )

        return cls.fan_out(
            event,
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=notification_type,
                title=title,
                message=f"A new {role_label} {name}{suffix} has been added to the platform",
                entity_type=EntityType.USER,
                entity_id=scout_user_id,
                related_user_id=scout_user_id,
                metadata={"scoutId": str(scout_user_id), "xenId": xen_id or None},
            ),
        )

    # -------------------------------------------------------------------------
    # Evaluation forms
    # -------------------------------------------------------------------------

    @classmethod
    def form_created(
        cls, form_template_id: str, form_name: str, created_by_id: str
    ) -> FanOutReport:
        """Admins and scouts learn about a new evaluation form."""
        form_name = clean_display_value(form_name)
        recipients = RecipientResolver.union_of_roles(
            [
                RoleScope(UserRole.SYSTEM_ADMIN),
                RoleScope(UserRole.SCOUT_ADMIN),
                RoleScope(UserRole.XEN_SCOUT),
            ],
            exclude=created_by_id,
        )

        return cls.fan_out(
            "form_created",
            recipients,
            lambda r: NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.FORM_CREATED,
                title="New Evaluation Form Created",
                message=(
                    f"A new evaluation form{quoted(form_name)} has been created and is "
                    "available for use"
                ),
                entity_type=EntityType.EVALUATION_FORM_TEMPLATE,
                entity_id=form_template_id,
                related_user_id=created_by_id,
                metadata={
                    "formTemplateId": str(form_template_id),
                    "formName": form_name or None,
                },
            ),
        )

    @classmethod
    def form_submitted(
        cls,
        submission_id: str,
        form_template_id: str,
        form_name: str,
        submitted_by_id: str,
        submitted_by_name: str | None = None,
        student_name: str | None = None,
    ) -> FanOutReport:
        """
        System admins and scout admins learn about a form submission.

        A submitter holding a scout role also receives a confirmation with
        its own wording; this is the one event that deliberately notifies
        the actor.
        """
        name = cls.actor_name(submitted_by_id, submitted_by_name, fallback=FALLBACK_SCOUT)
        student = clean_display_value(student_name)
        for_student = f" for {student}" if student else ""
        form_name = clean_display_value(form_name)
        form_text = (
            f'the evaluation form "{form_name}"' if form_name else "an evaluation form"
        )

        recipients = RecipientResolver.union_of_roles(
            [RoleScope(UserRole.SYSTEM_ADMIN), RoleScope(UserRole.SCOUT_ADMIN)],
            exclude=submitted_by_id,
        )
        submitter = RecipientResolver.explicit_set([submitted_by_id])
        recipients.update(
            r for r in submitter if r.role in (UserRole.SCOUT_ADMIN, UserRole.XEN_SCOUT)
        )

        def build(r: Recipient) -> NotificationDraft:
            if str(r.user_id) == str(submitted_by_id):
                title = "Form Submission Confirmed"
                message = f"You have successfully submitted {form_text}{for_student}"
            else:
                title = "New Form Submission"
                message = f"{name} has submitted {form_text}{for_student}"
            return NotificationDraft(
                user_id=r.user_id,
                type=NotificationType.FORM_SUBMITTED,
                title=title,
                message=message,
                entity_type=EntityType.EVALUATION_FORM_SUBMISSION,
                entity_id=submission_id,
                related_user_id=submitted_by_id,
                metadata={
                    "formTemplateId": str(form_template_id),
                    "formName": form_name or None,
                    "studentName": student or None,
                },
            )

        return cls.fan_out("form_submitted", recipients, build)


EVENT_HANDLERS: dict[str, Callable[..., FanOutReport]] = {
    "post_created": NotificationDispatcher.post_created,
    "post_liked": NotificationDispatcher.post_liked,
    "post_commented": NotificationDispatcher.post_commented,
    "student_followed": NotificationDispatcher.student_followed,
    "submission_created": NotificationDispatcher.submission_created,
    "review_submitted": NotificationDispatcher.review_submitted,
    "submission_finalized": NotificationDispatcher.submission_finalized,
    "submission_received": NotificationDispatcher.submission_received,
    "submission_feedback_ready": NotificationDispatcher.submission_feedback_ready,
    "subscription_expiring": NotificationDispatcher.subscription_expiring,
    "school_payment_recorded": NotificationDispatcher.school_payment_recorded,
    "xen_watch_payment": NotificationDispatcher.xen_watch_payment,
    "school_created": NotificationDispatcher.school_created,
    "school_admin_created": NotificationDispatcher.school_admin_created,
    "scout_created": NotificationDispatcher.scout_created,
    "xen_scout_created": NotificationDispatcher.xen_scout_created,
    "scout_admin_created": NotificationDispatcher.scout_admin_created,
    "form_created": NotificationDispatcher.form_created,
    "form_submitted": NotificationDispatcher.form_submitted,
}


# =============================================================================
# Producer functions
# =============================================================================


def enqueue(event: str, **payload: Any) -> bool:
    """
    Queue a fan-out without waiting for it.

    Returns False (after logging) when the task could not be queued; never
    raises into the producer.
    """
    from notifications.tasks import dispatch_notification_event

    payload = {key: _serializable(value) for key, value in payload.items()}
    try:
        dispatch_notification_event.delay(event, payload)
    except Exception:
        logger.exception(f"Failed to enqueue {event} notifications")
        return False
    return True


def _serializable(value: Any) -> Any:
    # UUIDs, Decimals and dates travel as strings
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def notify_followers_of_new_post(post_id: Any) -> bool:
    return enqueue("post_created", post_id=post_id)


def notify_post_liked(post_id: Any, liker_id: Any, liker_name: str | None = None) -> bool:
    return enqueue("post_liked", post_id=post_id, liker_id=liker_id, liker_name=liker_name)


def notify_post_commented(comment_id: Any, commenter_name: str | None = None) -> bool:
    return enqueue("post_commented", comment_id=comment_id, commenter_name=commenter_name)


def notify_new_follower(
    student_id: Any, follower_id: Any, follower_name: str | None = None
) -> bool:
    return enqueue(
        "student_followed",
        student_id=student_id,
        follower_id=follower_id,
        follower_name=follower_name,
    )


def notify_scouts_of_new_submission(
    submission_id: Any, student_user_id: Any, student_name: str | None = None
) -> bool:
    return enqueue(
        "submission_created",
        submission_id=submission_id,
        student_user_id=student_user_id,
        student_name=student_name,
    )


def notify_scouts_of_review(
    submission_id: Any,
    reviewer_id: Any,
    is_submitted: bool,
    reviewer_name: str | None = None,
) -> bool:
    return enqueue(
        "review_submitted",
        submission_id=submission_id,
        reviewer_id=reviewer_id,
        is_submitted=is_submitted,
        reviewer_name=reviewer_name,
    )


def notify_scouts_of_submission_finalized(
    submission_id: Any, finalized_by_id: Any = None
) -> bool:
    return enqueue(
        "submission_finalized",
        submission_id=submission_id,
        finalized_by_id=finalized_by_id,
    )


def notify_student_of_submission(submission_id: Any, student_user_id: Any) -> bool:
    return enqueue(
        "submission_received",
        submission_id=submission_id,
        student_user_id=student_user_id,
    )


def notify_student_of_feedback(
    submission_id: Any, student_user_id: Any, rating: Any = None
) -> bool:
    return enqueue(
        "submission_feedback_ready",
        submission_id=submission_id,
        student_user_id=student_user_id,
        rating=rating,
    )


def notify_subscription_expiring(school_id: Any) -> bool:
    return enqueue("subscription_expiring", school_id=school_id)


def notify_school_payment_recorded(payment_record_id: Any) -> bool:
    return enqueue("school_payment_recorded", payment_record_id=payment_record_id)


def notify_xen_watch_payment(
    transaction_id: Any,
    student_user_id: Any,
    amount_cents: int,
    currency: str = "usd",
    student_name: str | None = None,
) -> bool:
    return enqueue(
        "xen_watch_payment",
        transaction_id=transaction_id,
        student_user_id=student_user_id,
        amount_cents=amount_cents,
        currency=currency,
        student_name=student_name,
    )


def notify_school_created(school_id: Any, created_by_id: Any = None) -> bool:
    return enqueue("school_created", school_id=school_id, created_by_id=created_by_id)


def notify_school_admin_created(
    admin_user_id: Any, school_id: Any, admin_name: str | None = None
) -> bool:
    return enqueue(
        "school_admin_created",
        admin_user_id=admin_user_id,
        school_id=school_id,
        admin_name=admin_name,
    )


def notify_scout_created(scout_user_id: Any, scout_name: str | None = None) -> bool:
    return enqueue("scout_created", scout_user_id=scout_user_id, scout_name=scout_name)


def notify_xen_scout_created(
    scout_user_id: Any, xen_id: str = "", scout_name: str | None = None
) -> bool:
    return enqueue(
        "xen_scout_created",
        scout_user_id=scout_user_id,
        xen_id=xen_id,
        scout_name=scout_name,
    )


def notify_scout_admin_created(
    scout_user_id: Any, xen_id: str = "", scout_name: str | None = None
) -> bool:
    return enqueue(
        "scout_admin_created",
        scout_user_id=scout_user_id,
        xen_id=xen_id,
        scout_name=scout_name,
    )


def notify_form_created(
    form_template_id: Any, form_name: str, created_by_id: Any
) -> bool:
    return enqueue(
        "form_created",
        form_template_id=form_template_id,
        form_name=form_name,
        created_by_id=created_by_id,
    )


def notify_form_submitted(
    submission_id: Any,
    form_template_id: Any,
    form_name: str,
    submitted_by_id: Any,
    submitted_by_name: str | None = None,
    student_name: str | None = None,
) -> bool:
    return enqueue(
        "form_submitted",
        submission_id=submission_id,
        form_template_id=form_template_id,
        form_name=form_name,
        submitted_by_id=submitted_by_id,
        submitted_by_name=submitted_by_name,
        student_name=student_name,
    )
