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
import logging
from typing import Any, Optional

from django.contrib.auth.models import User
from django.db import transaction

from gfportal.models.access import EventGroup, Profile, RoleChoices
from gfportal.utils.exceptions import NotFoundError, ValidationApiError

logger = logging.getLogger(__name__)


def normalize_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def ensure_role(role: Any) -> str:
    """Return the role when it is one of the portal roles.

    Raises:
        ValidationApiError: If the role is unknown
    """
    if role not in RoleChoices.values:
        raise ValidationApiError(f"Invalid role: {role}")
    return role


def get_or_create_user(email: str) -> User:
    """Return the Django user for an email, creating it with an unusable password."""
    email = email.strip().lower()
    user = User.objects.filter(username__iexact=email).first()
    if user:
        return user

    user = User(username=email, email=email)
    user.set_unusable_password()
    user.save()
    logger.info(f"Created user for {email}")
    return user


def ensure_profile_user(profile: Profile) -> None:
    """Normalize the profile email and attach the matching Django user if missing."""
    profile.email = (profile.email or "").strip().lower()
    if not profile.user_id and profile.email:
        profile.user = get_or_create_user(profile.email)


def get_or_create_group(label: str) -> EventGroup:
    """Resolve a group by code, then by name, creating it when neither matches."""
    label = label.strip()
    group = EventGroup.objects.filter(code=label).first()
    if not group:
        group = EventGroup.objects.filter(name=label).first()
    if not group:
        group = EventGroup.objects.create(code=label, name=label)
    return group


def clean_group_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(group).strip() for group in value if str(group).strip()]


def set_profile_groups(profile: Profile, groups: list[str]) -> int:
    """Replace the groups linked to a profile, returning the number of links."""
    resolved = [get_or_create_group(group) for group in groups]
    profile.groups.set(resolved)
    return len(resolved)


def add_profile_groups(profile: Profile, groups) -> int:
    """Link a profile to additional groups, keeping existing links."""
    count = 0
    for group in groups:
        profile.groups.add(get_or_create_group(group))
        count += 1
    return count


def upsert_profile_by_email(data: dict[str, Any]) -> Profile:
    """Create or update a profile keyed by its lowercased email.

    Only the values present in ``data`` are applied to an existing profile,
    while ``name``, ``surname`` and ``role`` are always written.

    Args:
        data: Profile fields: email, name, surname, role and optionally phone,
            italy and rome

    Returns:
        The saved profile

    Raises:
        ValidationApiError: If the email is missing or the role is invalid
    """
    email = (normalize_text(data.get("email")) or "").lower()
    role = ensure_role(data.get("role"))
    if not email:
        raise ValidationApiError("Email is required")

    with transaction.atomic():
        profile = Profile.objects.filter(email__iexact=email).first()
        if not profile:
            profile = Profile(email=email, user=get_or_create_user(email))

        profile.email = email
        profile.name = normalize_text(data.get("name"))
        profile.surname = normalize_text(data.get("surname"))
        profile.role = role
        for field in ("phone", "italy", "rome"):
            if data.get(field) is not None:
                setattr(profile, field, data[field])
        profile.save()

    return profile


def update_profile(profile_id: Any, data: dict[str, Any]) -> Profile:
    """Apply a partial update to a profile by primary key.

    Raises:
        NotFoundError: If no profile has the given id
        ValidationApiError: If the role is invalid
    """
    profile = Profile.objects.filter(pk=profile_id).first()
    if not profile:
        raise NotFoundError("Profile not found")

    if "name" in data:
        profile.name = normalize_text(data["name"])
    if "surname" in data:
        profile.surname = normalize_text(data["surname"])
    if data.get("role") is not None:
        profile.role = ensure_role(data["role"])
    if "phone" in data:
        profile.phone = normalize_text(data["phone"])
    for field in ("italy", "rome"):
        if field in data:
            setattr(profile, field, None if data[field] is None else bool(data[field]))

    with transaction.atomic():
        profile.save()
        if "groups" in data:
            groups = data["groups"]
            set_profile_groups(profile, clean_group_list(groups) if isinstance(groups, list) else [])

    return profile
