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
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render

from gfportal.models.access import Profile, RoleChoices
from gfportal.models.miscellanea import EmailSettings, EmailTemplate
from gfportal.models.registration import Participant
from gfportal.utils.auth import ROLE_LABELS, get_effective_role, get_role_route, get_user_profile
from gfportal.utils.participant import sort_participants
from gfportal.utils.presence import daily_presence
from gfportal.views.capogruppo import get_leader_groups, participants_for_groups
from gfportal.views.partecipante import participants_for_email


def get_context(request, role: str) -> dict:
    """Base context shared by every dashboard page."""
    profile = get_user_profile(request.user)
    return {
        "role": role,
        "role_label": ROLE_LABELS[role],
        "profile": profile,
        "user_name": profile.full_name() if profile else request.user.email,
    }


@login_required
def dashboard(request):
    return redirect(get_role_route(get_effective_role(request.user)))


@login_required
def dashboard_admin(request):
    ctx = get_context(request, RoleChoices.ADMIN)
    ctx["profiles"] = Profile.objects.prefetch_related("groups").order_by("-created")
    ctx["participants_count"] = Participant.objects.count()
    ctx["email_settings"] = EmailSettings.load()
    ctx["roles"] = RoleChoices.choices
    return render(request, "gfportal/dashboard/admin.html", ctx)


@login_required
def dashboard_manager(request):
    participants = list(Participant.objects.all())
    ctx = get_context(request, RoleChoices.MANAGER)
    ctx["participants_count"] = len(participants)
    ctx["presence"] = {
        "both": daily_presence(participants, "both"),
        "organization": daily_presence(participants, "organization"),
        "autonomous": daily_presence(participants, "autonomous"),
    }
    ctx["templates"] = EmailTemplate.objects.order_by("-updated")
    return render(request, "gfportal/dashboard/manager.html", ctx)


@login_required
def dashboard_capogruppo(request):
    groups = get_leader_groups(request.user)
    ctx = get_context(request, RoleChoices.GROUP_LEADER)
    ctx["groups"] = groups
    ctx["show_group_column"] = len(groups) > 1
    ctx["participants"] = participants_for_groups(groups)
    return render(request, "gfportal/dashboard/capogruppo.html", ctx)


@login_required
def dashboard_partecipante(request):
    email = (request.user.email or request.user.username or "").strip().lower()
    ctx = get_context(request, RoleChoices.PARTICIPANT)
    ctx["participants"] = sort_participants(participants_for_email(email)) if email else []
    return render(request, "gfportal/dashboard/partecipante.html", ctx)


@login_required
def dashboard_alloggi(request):
    return render(request, "gfportal/dashboard/alloggi.html", get_context(request, RoleChoices.ACCOMMODATION))
