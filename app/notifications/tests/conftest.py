"""
Test configuration and fixtures for notification tests.

This module provides:
- Accounts for every recipient audience (system admins, academy admins,
  scouts, players, followers), each linked to its profile row the way
  production accounts are
- Notification fixtures (read/unread, with/without related user)
- API client helpers for authenticated requests

Usage:
    def test_example(user, unread_notification, authenticated_client):
        response = authenticated_client.get("/api/v1/notifications/")
        assert response.status_code == 200
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import UserRole
from authentication.tests.factories import UserFactory
from notifications.tests.factories import NotificationFactory
from profiles.tests.factories import (
    SchoolAdminProfileFactory,
    ScoutProfileFactory,
    StudentFollowFactory,
    StudentProfileFactory,
    SystemAdminProfileFactory,
)
from schools.tests.factories import SchoolFactory


def make_system_admin(name="Ada Admin", **kwargs):
    """System admin account linked to a system admin profile."""
    profile = SystemAdminProfileFactory(name=name)
    return UserFactory(
        role=UserRole.SYSTEM_ADMIN, linked_id=str(profile.id), **kwargs
    )


def make_school_admin(school, name="Sam Academy", **kwargs):
    """Academy admin account linked to a school admin profile."""
    profile = SchoolAdminProfileFactory(school=school, name=name)
    return UserFactory(
        role=UserRole.SCHOOL_ADMIN,
        linked_id=str(profile.id),
        school=school,
        **kwargs,
    )


def make_scout(role=UserRole.XEN_SCOUT, name="Riley Scout", **kwargs):
    """Scout account with its scout profile."""
    user = UserFactory(role=role, **kwargs)
    ScoutProfileFactory(user=user, name=name)
    return user


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a basic viewer account to receive notifications."""
    return UserFactory(name="Vera Viewer")


@pytest.fixture
def other_user(db):
    """Create another account for multi-user tests."""
    return UserFactory(name="Otto Other")


@pytest.fixture
def school(db):
    return SchoolFactory(name="Riverside Academy")


@pytest.fixture
def system_admin(db):
    return make_system_admin()


@pytest.fixture
def school_admins(school):
    """Two academy admins of ``school``."""
    return [
        make_school_admin(school, name="Sam Academy"),
        make_school_admin(school, name="Kim Academy"),
    ]


@pytest.fixture
def xen_scout(db):
    return make_scout(UserRole.XEN_SCOUT, name="Riley Scout")


@pytest.fixture
def scout_admin(db):
    return make_scout(UserRole.SCOUT_ADMIN, name="Morgan Chief")


@pytest.fixture
def student(school):
    """Player profile with its student account."""
    return StudentProfileFactory(
        school=school,
        name="Jamie Player",
        user=UserFactory(role=UserRole.STUDENT, name="jamie"),
    )


@pytest.fixture
def followers(student):
    """Two accounts following ``student``."""
    first = UserFactory(name="Fan One")
    second = UserFactory(name="Fan Two")
    StudentFollowFactory(follower=first, student=student)
    StudentFollowFactory(follower=second, student=student)
    return [first, second]


# =============================================================================
# Notification Fixtures
# =============================================================================


@pytest.fixture
def unread_notification(user, other_user):
    """Unread comment notification for ``user`` from ``other_user``."""
    return NotificationFactory(user=user, related_user=other_user, is_read=False)


@pytest.fixture
def read_notification(user):
    return NotificationFactory(user=user, is_read=True)


@pytest.fixture
def other_user_notification(other_user):
    return NotificationFactory(user=other_user, is_read=False)


@pytest.fixture
def dated_notifications(user):
    """Three notifications for ``user``, one day apart, oldest first."""
    notifications = [NotificationFactory(user=user) for _ in range(3)]
    now = timezone.now()
    for age, notification in zip((3, 2, 1), notifications):
        type(notification).objects.filter(pk=notification.pk).update(
            created_at=now - timedelta(days=age)
        )
    return notifications


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an API client authenticated as ``user`` via JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return api_client
