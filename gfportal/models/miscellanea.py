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

from django.conf import settings as conf_settings
from django.contrib.auth.models import User
from django.db import models
from django.utils.translation import gettext_lazy as _
from tinymce.models import HTMLField

from gfportal.models.base import BaseModel, SingletonMixin


class EmailTemplate(BaseModel):
    name = models.CharField(max_length=200, verbose_name=_("Name"))

    subject = models.CharField(max_length=500, blank=True, default="", verbose_name=_("Subject"))

    html = HTMLField(verbose_name=_("Body"))

    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, blank=True, null=True, related_name="created_email_templates"
    )

    updated_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, blank=True, null=True, related_name="updated_email_templates"
    )

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "subject": self.subject,
            "html": self.html,
            "updatedAt": self.updated.isoformat() if self.updated else None,
        }


class EmailSettings(SingletonMixin, BaseModel):
    """Sender credentials used for all outgoing portal mail."""

    sender_email = models.EmailField(blank=True, null=True, verbose_name=_("Sender email"))

    app_password = models.CharField(max_length=200, blank=True, null=True, verbose_name=_("Google App Password"))

    class Meta:
        ordering: ClassVar[list] = ["id"]
        verbose_name_plural = "Email settings"

    def __str__(self):
        return self.display_sender()

    def display_sender(self) -> str:
        """Return the stored sender, or the configured default when none was saved."""
        return (self.sender_email or "").strip() or conf_settings.DEFAULT_SENDER_EMAIL

    def password_is_set(self) -> bool:
        return bool((self.app_password or "").strip())
