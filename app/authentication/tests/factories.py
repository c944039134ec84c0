"""
Factory Boy factories for account directory models.

Usage:
    from authentication.tests.factories import UserFactory, AdminFactory

    user = UserFactory()
    admin = AdminFactory()
    banned = UserFactory(banned=True)
"""

import factory
from django.utils import timezone

from authentication.models import User


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Creates active users with the default role and no moderation state.

    Traits:
        banned: User with an active ban
        restricted: User with an active restriction
        online: User with a fresh heartbeat
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    display_name = factory.Sequence(lambda n: f"User {n}")
    role = User.Role.USER
    is_active = True
    is_staff = False

    class Params:
        banned = factory.Trait(
            moderation_status=User.ModerationStatus.BANNED,
            moderation_reason="Spam",
            moderated_at=factory.LazyFunction(timezone.now),
        )
        restricted = factory.Trait(
            moderation_status=User.ModerationStatus.RESTRICTED,
            moderation_reason="Flooding",
            moderated_at=factory.LazyFunction(timezone.now),
        )
        online = factory.Trait(
            is_online=True,
            last_seen=factory.LazyFunction(timezone.now),
        )

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )


class ModeratorFactory(UserFactory):
    """User holding the moderator role."""

    role = User.Role.MODERATOR


class AdminFactory(UserFactory):
    """User holding the admin role."""

    role = User.Role.ADMIN
