"""
Factory Boy factories for authentication models.

Usage:
    from authentication.tests.factories import UserFactory

    # Viewer account (the default role)
    user = UserFactory()

    # Scout account
    scout = UserFactory(role=UserRole.XEN_SCOUT, name="Sam Scout")

    # Inactive account (never receives notifications)
    user = UserFactory(is_active=False)
"""

import factory

from authentication.models import User, UserRole


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Creates active, verified viewer accounts by default. Pass ``role`` to
    create other account kinds; role-specific profile rows are created with
    the factories in profiles.tests.factories.
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    role = UserRole.VIEWER
    name = ""
    email_verified = True
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )
