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
from typing import ClassVar

from django.contrib.auth.models import User
from django.db import models
from django.utils.translation import gettext_lazy as _

from gfportal.models.base import BaseModel


class RoleChoices(models.TextChoices):
    ADMIN = "admin", _("Admin")
    GROUP_LEADER = "capogruppo", _("Group Leader")
    PARTICIPANT = "partecipante", _("Participant")
    MANAGER = "manager", _("Manager")
    ACCOMMODATION = "alloggi", _("Accommodation")


class EventGroup(BaseModel):
    """A group participants register with and group leaders look after.

    ``code`` is the identifier the registration form produces (a city, a country
    or a Rome parish group); ``name`` is the human label, usually identical.
    """

    code = models.CharField(max_length=150, unique=True, verbose_name=_("Code"))

    name = models.CharField(max_length=150, verbose_name=_("Name"))

    class Meta:
        ordering: ClassVar[list] = ["code"]


class Profile(BaseModel):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")

    email = models.EmailField(unique=True, verbose_name=_("Email"))

    name = models.CharField(max_length=100, blank=True, null=True, verbose_name=_("Name"))

    surname = models.CharField(max_length=100, blank=True, null=True, verbose_name=_("Surname"))

    role = models.CharField(
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.PARTICIPANT,
        verbose_name=_("Role"),
    )

    phone = models.CharField(max_length=50, blank=True, null=True, verbose_name=_("Phone"))

    italy = models.BooleanField(null=True, verbose_name=_("Based in Italy"))

    rome = models.BooleanField(null=True, verbose_name=_("Based in Rome"))

    groups = models.ManyToManyField(EventGroup, related_name="leaders", blank=True)

    class Meta:
        ordering: ClassVar[list] = ["-created"]

    def __str__(self):
        return self.full_name() or self.email

    def full_name(self) -> str:
        return " ".join(part.strip() for part in (self.name or "", self.surname or "") if part.strip())

    def group_codes(self) -> list[str]:
        """Return the sorted, distinct codes of the groups linked to this profile."""
        return sorted(set(self.groups.values_list("code", flat=True)))

    def to_json(self) -> dict:
        data = self.as_dict(fields=["id", "email", "name", "surname", "role", "phone", "italy", "rome", "created"])
        data["groups"] = self.group_codes()
        return data
