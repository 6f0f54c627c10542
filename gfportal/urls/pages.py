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
from django.shortcuts import redirect
from django.urls import path

from gfportal.views import auth as views_auth
from gfportal.views import dashboard as views_dashboard

urlpatterns = [
    path(
        "",
        lambda request: redirect("/dashboard"),
        name="home",
    ),
    path(
        "login",
        views_auth.login_view,
        name="login",
    ),
    path(
        "auth/callback",
        views_auth.auth_callback,
        name="auth_callback",
    ),
    path(
        "logout",
        views_auth.logout_view,
        name="logout",
    ),
    path(
        "locale",
        views_auth.set_locale,
        name="set_locale",
    ),
    path(
        "dashboard",
        views_dashboard.dashboard,
        name="dashboard",
    ),
    path(
        "dashboard/admin",
        views_dashboard.dashboard_admin,
        name="dashboard_admin",
    ),
    path(
        "dashboard/manager",
        views_dashboard.dashboard_manager,
        name="dashboard_manager",
    ),
    path(
        "dashboard/capogruppo",
        views_dashboard.dashboard_capogruppo,
        name="dashboard_capogruppo",
    ),
    path(
        "dashboard/partecipante",
        views_dashboard.dashboard_partecipante,
        name="dashboard_partecipante",
    ),
    path(
        "dashboard/alloggi",
        views_dashboard.dashboard_alloggi,
        name="dashboard_alloggi",
    ),
]
