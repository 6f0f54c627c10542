# Global Friendship Portal
# Copyright (C) 2025 Giovani per la Pace, Global Friendship organizing team
#
# This file is part of Global Friendship Portal and is dual-licensed:
#
# 1. Under the terms of the GNU Affero General Public License (AGPL) version 3,
#    as published by the Free Software Foundation. You may use, modify, and
#    distribute this file under those terms.
#
# 2. Under a commercial license, allowing use in closed-source or proprietary
#    environments without the obligations of the AGPL.
#
# If you have obtained this file under the AGPL, and you make it available over
# a network, you must also make the complete source code available under the same license.
#
# For more information or to purchase a commercial license, contact:
# info@giovaniperlapace.it
#
# SPDX-License-Identifier: AGPL-3.0-or-later OR Proprietary
from datetime import date, datetime
from decimal import Decimal
from itertools import chain
from typing import Any, ClassVar

from django.db import models
from django.utils import timezone
from safedelete.models import HARD_DELETE, SOFT_DELETE_CASCADE, SafeDeleteModel


class BaseModel(SafeDeleteModel):
    """Represents BaseModel model."""

    created = models.DateTimeField(default=timezone.now, editable=False)

    updated = models.DateTimeField(auto_now=True)

    _safedelete_policy = SOFT_DELETE_CASCADE

    class Meta:
        abstract = True
        ordering: ClassVar[list] = ["-updated"]

    def __str__(self) -> str:
        """Return string representation of the model.

        Returns:
            str: The 'name' attribute if the model has one, else the default representation.
        """
        if hasattr(self, "name") and self.name:
            return self.name

        return super().__str__()

    def as_dict(self, *, fields: list[str] | None = None) -> dict[str, Any]:
        """Convert model instance to a JSON-ready dictionary.

        Foreign keys are reported with their ``<name>_id`` attname, dates as ISO
        strings and decimals as floats, so the result can be handed directly to
        ``JsonResponse``.

        Args:
            fields: Optional whitelist of field names to include. Defaults to all
                concrete fields except the soft-delete marker.

        Returns:
            A dictionary with field attnames as keys.
        """
        # noinspection PyUnresolvedReferences
        model_options = self._meta
        serialized_data = {}

        for field in chain(model_options.concrete_fields, model_options.private_fields):
            if field.name == "deleted" or field.name == "deleted_by_cascade":
                continue
            if fields is not None and field.name not in fields and field.attname not in fields:
                continue
            serialized_data[field.attname] = json_value(field.value_from_object(self))

        return serialized_data


class ReplaceableModel(BaseModel):
    """Base for child rows that are rewritten wholesale on every parent save."""

    _safedelete_policy = HARD_DELETE

    class Meta:
        abstract = True


def json_value(value: Any) -> Any:
    """Convert a model field value into a JSON serializable one."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


class SingletonMixin:
    """Single-row tables, always stored with primary key 1."""

    SINGLETON_PK = 1

    @classmethod
    def load(cls):
        """Return the singleton row, creating it with defaults on first access."""
        # noinspection PyUnresolvedReferences
        instance, _created = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return instance

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        # noinspection PyUnresolvedReferences
        super().save(*args, **kwargs)
