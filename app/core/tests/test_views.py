"""Tests for the health check endpoint."""

import pytest
from django.db import DatabaseError
from django.urls import reverse


@pytest.fixture
def local_cache(settings):
    settings.CACHES = {
        "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}
    }


class TestHealthCheck:
    def test_healthy(self, db, client, local_cache):
        response = client.get(reverse("health_check"))

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "database": "connected",
            "cache": "connected",
        }

    def test_database_down_is_unhealthy(self, db, client, local_cache, mocker):
        mocker.patch(
            "core.views.connection.cursor", side_effect=DatabaseError("gone")
        )

        response = client.get(reverse("health_check"))

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"

    def test_cache_miss_does_not_fail_check(self, db, client, mocker):
        mocker.patch("core.views.cache.get", return_value=None)
        mocker.patch("core.views.cache.set")

        response = client.get(reverse("health_check"))

        assert response.status_code == 200
        assert response.json()["cache"] == "disconnected"
