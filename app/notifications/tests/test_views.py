"""
API tests for notification endpoints.

Test Classes:
    TestNotificationList: GET /api/v1/notifications/
    TestUnreadCount: GET /api/v1/notifications/unread-count/
    TestMarkSingleRead: POST|PUT /api/v1/notifications/{id}/read/
    TestMarkAllRead: POST|PUT /api/v1/notifications/read-all/
"""

import uuid

import pytest
from django.urls import reverse
from rest_framework import status

from notifications.models import Notification
from notifications.tests.factories import NotificationFactory


class TestNotificationList:
    def test_returns_users_notifications(
        self, authenticated_client, unread_notification, other_user_notification
    ):
        url = reverse("notifications:notification-list")
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        item = response.data[0]
        assert item["id"] == str(unread_notification.id)
        assert item["title"] == unread_notification.title
        assert item["is_read"] is False

    def test_item_carries_resolved_related_user(
        self, authenticated_client, unread_notification, other_user
    ):
        url = reverse("notifications:notification-list")
        response = authenticated_client.get(url)

        assert response.data[0]["related_user"] == {
            "id": str(other_user.id),
            "name": "Otto Other",
            "profile_pic_url": None,
            "role": "viewer",
        }

    def test_ordered_newest_first(self, authenticated_client, dated_notifications):
        url = reverse("notifications:notification-list")
        response = authenticated_client.get(url)

        assert [item["id"] for item in response.data] == [
            str(n.id) for n in reversed(dated_notifications)
        ]

    def test_limit_and_offset(self, authenticated_client, dated_notifications):
        url = reverse("notifications:notification-list")
        response = authenticated_client.get(url, {"limit": 2, "offset": 1})

        assert [item["id"] for item in response.data] == [
            str(dated_notifications[1].id),
            str(dated_notifications[0].id),
        ]

    def test_large_limit_is_clamped(self, authenticated_client, user, settings):
        settings.NOTIFICATIONS_MAX_LIMIT = 2
        NotificationFactory.create_batch(3, user=user)

        url = reverse("notifications:notification-list")
        response = authenticated_client.get(url, {"limit": 1000})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2

    @pytest.mark.parametrize(
        "params",
        [{"limit": 0}, {"limit": -1}, {"limit": "abc"}, {"offset": -3}],
    )
    def test_invalid_pagination_is_rejected(self, authenticated_client, params):
        url = reverse("notifications:notification-list")
        response = authenticated_client.get(url, params)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unread_only(
        self, authenticated_client, unread_notification, read_notification
    ):
        url = reverse("notifications:notification-list")
        response = authenticated_client.get(url, {"unread_only": "true"})

        assert [item["id"] for item in response.data] == [str(unread_notification.id)]

    def test_empty_feed(self, authenticated_client):
        url = reverse("notifications:notification-list")
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []

    def test_requires_authentication(self, db, api_client):
        url = reverse("notifications:notification-list")
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestUnreadCount:
    def test_counts_unread(
        self, authenticated_client, unread_notification, read_notification,
        other_user_notification,
    ):
        url = reverse("notifications:notification-unread-count")
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"count": 1}

    def test_requires_authentication(self, db, api_client):
        url = reverse("notifications:notification-unread-count")
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestMarkSingleRead:
    @pytest.mark.parametrize("method", ["post", "put"])
    def test_marks_own_notification(
        self, authenticated_client, unread_notification, method
    ):
        url = reverse(
            "notifications:notification-read", kwargs={"pk": unread_notification.id}
        )
        response = getattr(authenticated_client, method)(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"marked": 1}
        unread_notification.refresh_from_db()
        assert unread_notification.is_read is True

    def test_already_read_reports_zero(self, authenticated_client, read_notification):
        url = reverse(
            "notifications:notification-read", kwargs={"pk": read_notification.id}
        )
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"marked": 0}

    def test_other_users_notification_is_not_revealed(
        self, authenticated_client, other_user_notification
    ):
        """
        Given a notification owned by another user
        When the caller tries to mark it read
        Then the response is indistinguishable from a missing notification
        """
        url = reverse(
            "notifications:notification-read",
            kwargs={"pk": other_user_notification.id},
        )
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"marked": 0}
        other_user_notification.refresh_from_db()
        assert other_user_notification.is_read is False

    @pytest.mark.parametrize("pk", [uuid.uuid4(), "not-a-uuid"])
    def test_unknown_id_reports_zero(self, authenticated_client, pk):
        url = reverse("notifications:notification-read", kwargs={"pk": pk})
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"marked": 0}

    def test_requires_authentication(self, db, api_client, unread_notification):
        url = reverse(
            "notifications:notification-read", kwargs={"pk": unread_notification.id}
        )
        response = api_client.post(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestMarkAllRead:
    @pytest.mark.parametrize("method", ["post", "put"])
    def test_marks_all_unread(self, authenticated_client, user, method):
        NotificationFactory.create_batch(3, user=user, is_read=False)
        url = reverse("notifications:notification-read-all")

        response = getattr(authenticated_client, method)(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"marked_count": 3}
        assert not Notification.objects.filter(user=user, is_read=False).exists()

    def test_other_users_untouched(
        self, authenticated_client, unread_notification, other_user_notification
    ):
        url = reverse("notifications:notification-read-all")
        response = authenticated_client.post(url)

        assert response.data == {"marked_count": 1}
        other_user_notification.refresh_from_db()
        assert other_user_notification.is_read is False

    def test_requires_authentication(self, db, api_client):
        url = reverse("notifications:notification-read-all")
        response = api_client.post(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
