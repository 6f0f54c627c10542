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

from django.contrib import admin
from import_export import fields, resources

from gfportal.admin.base import DefModelAdmin, reduced
from gfportal.models.registration import Participant, WebhookEvent


class ParticipantResource(resources.ModelResource):
    """Import/export resource for Participant model.

    Exports the group code instead of the group primary key.
    """

    group = fields.Field(attribute="group__code", column_name="group")

    class Meta:
        model = Participant
        exclude = ("deleted", "deleted_by_cascade", "tally_payload", "presence_detail")
        export_order = ("id", "name", "surname", "email", "group", "group_label")


@admin.register(Participant)
class ParticipantAdmin(DefModelAdmin):
    """Admin interface for Participant model."""

    resource_classes: ClassVar[list] = [ParticipantResource]
    list_display: ClassVar[tuple] = (
        "id",
        "surname",
        "name",
        "email",
        "group",
        "group_label",
        "arrival_date",
        "departure_date",
        "nights",
        "total_fee",
        "fee_paid",
    )
    search_fields: ClassVar[tuple] = ("name", "surname", "email", "group_label", "tally_submission_id")
    list_filter: ClassVar[tuple] = ("group", "accommodation_short", "is_minor")
    readonly_fields: ClassVar[tuple] = ("accommodation_short", "nights", "total_fee", "age", "is_minor")


@admin.register(WebhookEvent)
class WebhookEventAdmin(DefModelAdmin):
    list_display: ClassVar[tuple] = ("created", "source", "event_type", "status", "email", "error_code", "short_error")
    search_fields: ClassVar[tuple] = ("email", "submission_id")
    list_filter: ClassVar[tuple] = ("source", "status")
    ordering: ClassVar[list] = ["-created"]

    @admin.display(description="Error")
    def short_error(self, instance: WebhookEvent) -> str:
        return reduced(instance.error_message)
