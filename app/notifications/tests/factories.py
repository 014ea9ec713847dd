"""
Factory Boy factories for notification models.

Usage:
    from notifications.tests.factories import NotificationFactory

    # Unread comment notification for a user
    notification = NotificationFactory(user=user)

    # Read notification with an actor
    notification = NotificationFactory(user=user, related_user=actor, is_read=True)
"""

import factory

from authentication.tests.factories import UserFactory
from notifications.models import EntityType, Notification, NotificationType


class NotificationFactory(factory.django.DjangoModelFactory):
    """
    Factory for Notification model.

    Each notification gets a distinct entity id so factories never collide
    on the deduplication key.
    """

    class Meta:
        model = Notification

    user = factory.SubFactory(UserFactory)
    type = NotificationType.POST_COMMENT
    title = "New Comment"
    message = factory.Sequence(lambda n: f"Someone commented on your post #{n}")
    entity_type = EntityType.POST_COMMENT
    entity_id = factory.Faker("uuid4")
    related_user = None
    metadata = None
    is_read = False
