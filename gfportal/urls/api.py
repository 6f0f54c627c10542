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
from django.urls import path

from gfportal.views import admin as views_admin
from gfportal.views import capogruppo as views_capogruppo
from gfportal.views import manager as views_manager
from gfportal.views import partecipante as views_partecipante
from gfportal.views import webhook as views_webhook

urlpatterns = [
    path(
        "api/tally/webhook",
        views_webhook.tally_webhook,
        name="tally_webhook",
    ),
    path(
        "api/manager/participants",
        views_manager.manager_participants,
        name="manager_participants",
    ),
    path(
        "api/manager/daily-presence",
        views_manager.manager_daily_presence,
        name="manager_daily_presence",
    ),
    path(
        "api/manager/participation-fees",
        views_manager.manager_participation_fees,
        name="manager_participation_fees",
    ),
    path(
        "api/manager/email-campaign",
        views_manager.manager_email_campaign,
        name="manager_email_campaign",
    ),
    path(
        "api/manager/email-templates",
        views_manager.manager_email_templates,
        name="manager_email_templates",
    ),
    path(
        "api/manager/group-leaders",
        views_manager.manager_group_leaders,
        name="manager_group_leaders",
    ),
    path(
        "api/manager/event-finance",
        views_manager.manager_event_finance,
        name="manager_event_finance",
    ),
    path(
        "api/capogruppo/participants",
        views_capogruppo.capogruppo_participants,
        name="capogruppo_participants",
    ),
    path(
        "api/partecipante/me",
        views_partecipante.partecipante_me,
        name="partecipante_me",
    ),
    path(
        "api/partecipante/contact",
        views_partecipante.partecipante_contact,
        name="partecipante_contact",
    ),
    path(
        "api/admin/profili",
        views_admin.admin_profiles,
        name="admin_profiles",
    ),
    path(
        "api/admin/profili/upload",
        views_admin.admin_profiles_upload,
        name="admin_profiles_upload",
    ),
    path(
        "api/admin/settings/email",
        views_admin.admin_email_settings,
        name="admin_email_settings",
    ),
    path(
        "api/admin/settings/email/test",
        views_admin.admin_email_settings_test,
        name="admin_email_settings_test",
    ),
]
