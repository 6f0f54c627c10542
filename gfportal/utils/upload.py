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
from __future__ import annotations

import io
import logging
import re
from typing import Any

import pandas as pd

from gfportal.utils.exceptions import ValidationApiError
from gfportal.utils.profiles import add_profile_groups, upsert_profile_by_email

logger = logging.getLogger(__name__)

EMAIL_COLUMNS = ["Email", "email", "e-mail"]
NAME_COLUMNS = ["Nome", "nome", "Name"]
SURNAME_COLUMNS = ["Cognome", "cognome", "Surname"]
PHONE_COLUMNS = ["telefono", "Telefono"]
ITALY_COLUMNS = ["italia", "Italia"]
ROME_COLUMNS = ["roma", "Roma"]
ROLE_COLUMNS = ["ruolo", "Ruolo"]
GROUP_COLUMNS = ["group_name", "group", "gruppo", "Gruppo"]

TRUE_VALUES = {"true", "1", "yes", "y", "si", "sì"}
FALSE_VALUES = {"false", "0", "no", "n"}

# bidirectional marks pasted along with numbers from spreadsheets
BIDI_CONTROL = re.compile("[\u200e\u200f\u202a-\u202e]")


def _read_uploaded_csv(uploaded_file: Any, sep: str = ";") -> list[dict[str, str]]:
    """Read a semicolon separated CSV upload into a list of row dictionaries.

    Tries several encodings in turn; header names are trimmed and stripped of a
    leading byte order mark, cells are returned as trimmed strings.

    Args:
        uploaded_file: Django uploaded file object containing CSV data.
        sep: Column separator.

    Returns:
        One dictionary per data row, keyed by header.

    Raises:
        ValidationApiError: If the file cannot be parsed with any encoding.
    """
    encodings = ["utf-8", "utf-8-sig", "latin1", "windows-1252", "utf-16"]

    for encoding in encodings:
        try:
            uploaded_file.seek(0)
            decoded_content = uploaded_file.read().decode(encoding)
            if not decoded_content.strip():
                return []

            data_frame = pd.read_csv(
                io.StringIO(decoded_content), sep=sep, dtype=str, keep_default_na=False, skipinitialspace=False
            )
        except (UnicodeDecodeError, pd.errors.ParserError) as parsing_error:
            logger.debug(f"Failed to parse CSV with encoding {encoding}: {parsing_error}")
            continue

        data_frame.columns = [str(column).lstrip("\ufeff").strip() for column in data_frame.columns]
        return [
            {column: (value or "").strip() for column, value in row.items()}
            for row in data_frame.to_dict(orient="records")
        ]

    raise ValidationApiError("Unable to read CSV file")


def pick_field(row: dict[str, str], keys: list[str]) -> str:
    """Return the first non-empty value among the given column aliases."""
    for key in keys:
        value = row.get(key)
        if value and value.strip():
            return value.strip()
    return ""


def parse_bool(value: str) -> bool | None:
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return None


def normalize_phone(value: str) -> str | None:
    value = value.strip()
    if not value:
        return None
    return BIDI_CONTROL.sub("", value)


def merge_profile_rows(rows: list[dict[str, str]], default_role: str) -> dict[str, dict]:
    """Group CSV rows by lowercased email.

    The first non-empty value of each field wins; every group mentioned by any
    row of the same email is collected.
    """
    merged = {}
    for row in rows:
        email = pick_field(row, EMAIL_COLUMNS).lower()
        if not email:
            continue

        values = {
            "email": email,
            "name": pick_field(row, NAME_COLUMNS) or None,
            "surname": pick_field(row, SURNAME_COLUMNS) or None,
            "phone": normalize_phone(pick_field(row, PHONE_COLUMNS)),
            "italy": parse_bool(pick_field(row, ITALY_COLUMNS)),
            "rome": parse_bool(pick_field(row, ROME_COLUMNS)),
            "role": pick_field(row, ROLE_COLUMNS) or default_role,
        }
        group = pick_field(row, GROUP_COLUMNS)

        existing = merged.get(email)
        if not existing:
            values["groups"] = [group] if group else []
            merged[email] = values
            continue

        for field, value in values.items():
            if existing.get(field) is None and value is not None:
                existing[field] = value
        if group and group not in existing["groups"]:
            existing["groups"].append(group)

    return merged


def import_profiles(uploaded_file: Any, default_role: str) -> dict[str, Any]:
    """Import group leader profiles from a CSV upload.

    Each email is processed independently: a failing row is reported in
    ``errors`` and does not stop the others.

    Args:
        uploaded_file: The uploaded CSV file
        default_role: Role assigned to rows without a role column

    Returns:
        Summary with imported, skipped (duplicate or email-less rows),
        groupLinks and errors
    """
    rows = _read_uploaded_csv(uploaded_file)
    merged = merge_profile_rows(rows, default_role)

    imported = 0
    group_links = 0
    errors = []
    for email, data in merged.items():
        try:
            profile = upsert_profile_by_email(data)
            group_links += add_profile_groups(profile, data["groups"])
            imported += 1
        except Exception as import_error:
            message = getattr(import_error, "message", None) or str(import_error)
            logger.warning(f"Profile import failed for {email}: {message}")
            errors.append(f"{email}: {message}")

    return {
        "imported": imported,
        "skipped": len(rows) - len(merged),
        "groupLinks": group_links,
        "errors": errors,
    }
