"""
Reusable model mixins.

Mixins:
    UUIDPrimaryKeyMixin: UUID as primary key

Usage:
    from core.model_mixins import UUIDPrimaryKeyMixin

    class User(UUIDPrimaryKeyMixin, AbstractBaseUser):
        email = models.EmailField(unique=True)

Note:
    Always list mixins before the concrete base class in inheritance.
"""

from __future__ import annotations

import uuid

from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    User ids are handed out to clients in tokens and URLs, so they
    should not reveal signup order or the size of the user table.

    Fields:
        id: UUIDField as primary key (auto-generated)
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True
