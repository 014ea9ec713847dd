"""
Tests for NotificationService.

Test Classes:
    TestCreateNotification: Idempotent single-recipient writes
    TestGetNotifications: Feed pagination, ordering and related users
    TestMarkAsRead: Owner-only single mark
    TestMarkAllAsRead: Bulk mark
    TestGetUnreadCount: Badge count
"""

import uuid
from datetime import timedelta

import pytest
from django.db import IntegrityError
from django.utils import timezone
from freezegun import freeze_time

from core.exceptions import ValidationError
from notifications.models import EntityType, Notification, NotificationType
from notifications.services import NotificationDraft, NotificationService
from notifications.tests.factories import NotificationFactory


def comment_draft(user, entity_id="comment-1", **overrides):
    values = {
        "user_id": user.id,
        "type": NotificationType.POST_COMMENT,
        "title": "New Comment",
        "message": "Sam commented on your post",
        "entity_type": EntityType.POST_COMMENT,
        "entity_id": entity_id,
    }
    values.update(overrides)
    return NotificationDraft(**values)


class TestCreateNotification:
    def test_creates_notification(self, db, user, other_user):
        result = NotificationService.create_notification(
            comment_draft(user, related_user_id=other_user.id, metadata={"postId": "p1"})
        )

        assert result.success
        notification = result.data
        assert notification.user_id == user.id
        assert notification.type == NotificationType.POST_COMMENT
        assert notification.related_user_id == other_user.id
        assert notification.metadata == {"postId": "p1"}
        assert notification.is_read is False

    def test_duplicate_is_discarded(self, db, user):
        """
        Given a notification already written for a dedup key
        When the same draft is written again
        Then nothing new is stored and the result reports DUPLICATE
        """
        NotificationService.create_notification(comment_draft(user))

        result = NotificationService.create_notification(
            comment_draft(user, message="A different message")
        )

        assert not result.success
        assert result.error_code == "DUPLICATE"
        assert Notification.objects.filter(user=user).count() == 1
        assert Notification.objects.get(user=user).message == "Sam commented on your post"

    def test_uuid_and_string_entity_ids_share_a_key(self, db, user):
        entity_id = uuid.uuid4()
        NotificationService.create_notification(comment_draft(user, entity_id=entity_id))

        result = NotificationService.create_notification(
            comment_draft(user, entity_id=str(entity_id))
        )

        assert result.error_code == "DUPLICATE"

    def test_missing_entity_is_stored_as_empty_string(self, db, user):
        result = NotificationService.create_notification(
            comment_draft(user, entity_type=None, entity_id=None)
        )

        assert result.data.entity_type == ""
        assert result.data.entity_id == ""

    def test_refresh_bumps_existing_notification(self, db, user):
        """
        Given a read engagement notification from yesterday
        When a refreshing draft with the same key arrives
        Then the row moves to now and is unread again, without a second row
        """
        with freeze_time(timezone.now() - timedelta(days=1)):
            first = NotificationService.create_notification(
                comment_draft(user, refresh=True)
            ).data
        Notification.objects.filter(pk=first.pk).update(is_read=True)

        result = NotificationService.create_notification(
            comment_draft(user, refresh=True)
        )

        assert result.success
        assert result.error_code == "REFRESHED"
        assert Notification.objects.filter(user=user).count() == 1
        first.refresh_from_db()
        assert first.is_read is False
        assert first.created_at > timezone.now() - timedelta(minutes=1)

    def test_refresh_creates_when_absent(self, db, user):
        result = NotificationService.create_notification(
            comment_draft(user, refresh=True)
        )

        assert result.success
        assert result.error_code is None

    def test_unknown_type_raises(self, db, user):
        with pytest.raises(ValidationError) as exc_info:
            NotificationService.create_notification(
                comment_draft(user, type="carrier_pigeon")
            )

        assert exc_info.value.error_code == "INVALID_TYPE"

    def test_race_on_insert_reported_as_duplicate(self, db, user, mocker):
        """
        Given a concurrent writer that inserted the same key after the pre-check
        When the insert hits the unique constraint
        Then the draft is reported as a duplicate
        """
        NotificationService.create_notification(comment_draft(user))
        mocker.patch(
            "django.db.models.query.QuerySet.exists", side_effect=[False, True]
        )

        result = NotificationService.create_notification(comment_draft(user))

        assert result.error_code == "DUPLICATE"
        assert Notification.objects.filter(user=user).count() == 1

    def test_other_store_errors_propagate(self, db, user, mocker):
        mocker.patch.object(
            Notification.objects, "create", side_effect=IntegrityError("boom")
        )

        with pytest.raises(IntegrityError):
            NotificationService.create_notification(comment_draft(user))


class TestGetNotifications:
    def test_newest_first(self, db, user, dated_notifications):
        feed = NotificationService.get_notifications(user)

        assert [item["id"] for item in feed] == [
            n.id for n in reversed(dated_notifications)
        ]

    def test_only_own_notifications(self, db, user, unread_notification, other_user_notification):
        feed = NotificationService.get_notifications(user)

        assert [item["id"] for item in feed] == [unread_notification.id]

    def test_limit_and_offset(self, db, user, dated_notifications):
        feed = NotificationService.get_notifications(user, limit=1, offset=1)

        assert [item["id"] for item in feed] == [dated_notifications[1].id]

    def test_limit_is_clamped_to_maximum(self, db, user, settings):
        settings.NOTIFICATIONS_MAX_LIMIT = 2
        NotificationFactory.create_batch(3, user=user)

        feed = NotificationService.get_notifications(user, limit=500)

        assert len(feed) == 2

    def test_default_limit(self, db, user, settings):
        settings.NOTIFICATIONS_DEFAULT_LIMIT = 2
        NotificationFactory.create_batch(3, user=user)

        assert len(NotificationService.get_notifications(user)) == 2

    @pytest.mark.parametrize(
        "kwargs,error_code",
        [
            ({"limit": 0}, "INVALID_LIMIT"),
            ({"limit": -5}, "INVALID_LIMIT"),
            ({"offset": -1}, "INVALID_OFFSET"),
        ],
    )
    def test_invalid_pagination(self, db, user, kwargs, error_code):
        with pytest.raises(ValidationError) as exc_info:
            NotificationService.get_notifications(user, **kwargs)

        assert exc_info.value.error_code == error_code

    def test_unread_only(self, db, user, unread_notification, read_notification):
        feed = NotificationService.get_notifications(user, unread_only=True)

        assert [item["id"] for item in feed] == [unread_notification.id]

    def test_offset_past_end_is_empty(self, db, user, unread_notification):
        assert NotificationService.get_notifications(user, offset=10) == []

    def test_item_shape(self, db, user, unread_notification, other_user):
        item = NotificationService.get_notifications(user)[0]

        assert item["type"] == NotificationType.POST_COMMENT
        assert item["entity_type"] == EntityType.POST_COMMENT
        assert item["is_read"] is False
        assert item["related_user"] == {
            "id": str(other_user.id),
            "name": "Otto Other",
            "profile_pic_url": None,
            "role": other_user.role,
        }

    def test_empty_entity_fields_are_null(self, db, user):
        NotificationFactory(user=user, entity_type="", entity_id="")

        item = NotificationService.get_notifications(user)[0]

        assert item["entity_type"] is None
        assert item["entity_id"] is None
        assert item["related_user"] is None

    def test_related_user_reflects_current_name(self, db, user, unread_notification, other_user):
        other_user.name = "Renamed Actor"
        other_user.save()

        item = NotificationService.get_notifications(user)[0]

        assert item["related_user"]["name"] == "Renamed Actor"

    def test_deleted_actor_renders_without_related_user(
        self, db, user, unread_notification, other_user
    ):
        other_user.delete()

        item = NotificationService.get_notifications(user)[0]

        assert item["related_user"] is None


class TestMarkAsRead:
    def test_marks_own_notification(self, db, user, unread_notification):
        assert NotificationService.mark_as_read(unread_notification.id, user) == 1

        unread_notification.refresh_from_db()
        assert unread_notification.is_read is True

    def test_idempotent(self, db, user, unread_notification):
        NotificationService.mark_as_read(unread_notification.id, user)

        assert NotificationService.mark_as_read(unread_notification.id, user) == 0

    def test_foreign_notification_untouched(self, db, user, other_user_notification):
        assert NotificationService.mark_as_read(other_user_notification.id, user) == 0

        other_user_notification.refresh_from_db()
        assert other_user_notification.is_read is False

    @pytest.mark.parametrize("notification_id", ["not-a-uuid", None, str(uuid.uuid4())])
    def test_unknown_ids_mark_nothing(self, db, user, notification_id):
        assert NotificationService.mark_as_read(notification_id, user) == 0


class TestMarkAllAsRead:
    def test_marks_only_unread_of_user(
        self, db, user, unread_notification, read_notification, other_user_notification
    ):
        assert NotificationService.mark_all_as_read(user) == 1

        assert not Notification.objects.filter(user=user, is_read=False).exists()
        other_user_notification.refresh_from_db()
        assert other_user_notification.is_read is False

    def test_nothing_to_mark(self, db, user):
        assert NotificationService.mark_all_as_read(user) == 0


class TestGetUnreadCount:
    def test_counts_unread(self, db, user, unread_notification, read_notification):
        assert NotificationService.get_unread_count(user) == 1

    def test_zero_after_mark_all(self, db, user, unread_notification):
        NotificationService.mark_all_as_read(user)

        assert NotificationService.get_unread_count(user) == 0

    def test_new_notification_after_mark_all_counts_once(self, db, user, other_user):
        """
        Given a user who has marked everything read
        When one new notification is written for them
        Then the unread count is exactly 1 and matches the unread feed
        """
        NotificationFactory(user=user, is_read=False)
        NotificationService.mark_all_as_read(user)

        result = NotificationService.create_notification(
            NotificationDraft(
                user_id=user.id,
                type=NotificationType.POST_COMMENT,
                title="New Comment",
                message="Otto Other commented on your post",
                entity_type=EntityType.POST_COMMENT,
                entity_id=uuid.uuid4(),
                related_user_id=other_user.id,
            )
        )

        assert result.success
        assert NotificationService.get_unread_count(user) == 1
        assert len(NotificationService.get_notifications(user, unread_only=True)) == 1
