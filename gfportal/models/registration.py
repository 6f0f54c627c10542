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

from django.db import models
from django.utils.translation import gettext_lazy as _

from gfportal.models.access import EventGroup
from gfportal.models.base import BaseModel


class Participant(BaseModel):
    """A registration to the event, usually created by the form webhook.

    ``nights``, ``total_fee``, ``age`` and ``is_minor`` are derived fields,
    recomputed on every save from the stay dates, the accommodation and the
    birth date.
    """

    name = models.CharField(max_length=150, verbose_name=_("Name"))

    surname = models.CharField(max_length=150, verbose_name=_("Surname"))

    email = models.EmailField(db_index=True, verbose_name=_("Email"))

    secondary_email = models.EmailField(blank=True, null=True, verbose_name=_("Secondary email"))

    phone = models.CharField(max_length=50, blank=True, null=True, verbose_name=_("Phone"))

    nationality = models.CharField(max_length=100, blank=True, null=True, verbose_name=_("Nationality"))

    residence_country = models.CharField(
        max_length=100, blank=True, null=True, verbose_name=_("Country of residence")
    )

    city = models.CharField(max_length=100, blank=True, null=True, verbose_name=_("City"))

    registration_type = models.CharField(max_length=100, blank=True, null=True, verbose_name=_("Registration type"))

    sex = models.CharField(max_length=30, blank=True, null=True, verbose_name=_("Sex"))

    birth_date = models.DateField(blank=True, null=True, verbose_name=_("Date of birth"))

    arrival_date = models.DateField(blank=True, null=True, verbose_name=_("Date of arrival"))

    departure_date = models.DateField(blank=True, null=True, verbose_name=_("Date of departure"))

    whole_event = models.BooleanField(null=True, verbose_name=_("Attends the whole event"))

    presence_detail = models.JSONField(blank=True, null=True)

    accommodation = models.CharField(max_length=250, blank=True, null=True, verbose_name=_("Accommodation"))

    accommodation_short = models.CharField(max_length=50, blank=True, null=True, editable=False)

    allergies = models.TextField(blank=True, null=True, verbose_name=_("Allergies"))

    dietary_needs = models.TextField(blank=True, null=True, verbose_name=_("Dietary requirements"))

    accessibility_needs = models.BooleanField(null=True, verbose_name=_("Accessibility support needed"))

    accessibility_details = models.TextField(blank=True, null=True, verbose_name=_("Accessibility details"))

    notes = models.TextField(blank=True, null=True, verbose_name=_("Notes"))

    privacy_accepted = models.BooleanField(null=True, verbose_name=_("Privacy accepted"))

    group = models.ForeignKey(
        EventGroup, on_delete=models.SET_NULL, blank=True, null=True, related_name="participants"
    )

    group_label = models.CharField(max_length=150, blank=True, null=True, verbose_name=_("Group"))

    group_leader = models.CharField(max_length=150, blank=True, null=True, verbose_name=_("Group leader"))

    nights = models.IntegerField(blank=True, null=True, editable=False)

    total_fee = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True, editable=False)

    fee_paid = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True, verbose_name=_("Fee paid"))

    age = models.IntegerField(blank=True, null=True, editable=False)

    is_minor = models.BooleanField(null=True, editable=False)

    tally_submission_id = models.CharField(max_length=100, blank=True, null=True, db_index=True)

    tally_respondent_id = models.CharField(max_length=100, blank=True, null=True)

    submitted_at = models.DateTimeField(blank=True, null=True)

    tally_payload = models.JSONField(blank=True, null=True)

    class Meta:
        ordering: ClassVar[list] = ["surname", "name"]

    def __str__(self):
        return f"{self.name} {self.surname}".strip()

    def group_display(self) -> str:
        """Return the group label, falling back to the group code, or '-'."""
        value = (self.group_label or (self.group.code if self.group_id else "") or "").strip()
        return value or "-"


class WebhookStatus(models.TextChoices):
    PROCESSED = "processed", _("Processed")
    SKIPPED = "skipped", _("Skipped")
    ERROR = "error", _("Error")


class WebhookEvent(BaseModel):
    """Audit trail of every webhook delivery, successful or not."""

    source = models.CharField(max_length=50)

    event_type = models.CharField(max_length=100)

    submission_id = models.CharField(max_length=100, blank=True, null=True, db_index=True)

    respondent_id = models.CharField(max_length=100, blank=True, null=True)

    email = models.CharField(max_length=254, blank=True, null=True, db_index=True)

    status = models.CharField(max_length=20, choices=WebhookStatus.choices)

    error_code = models.CharField(max_length=50, blank=True, null=True)

    error_message = models.TextField(blank=True, null=True)

    payload = models.JSONField(default=dict)

    normalized = models.JSONField(blank=True, null=True)

    class Meta:
        ordering: ClassVar[list] = ["-created"]
        indexes: ClassVar[list] = [models.Index(fields=["source", "-created"], name="gfportal_webhook_src_created")]
