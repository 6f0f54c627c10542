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
from typing import Any, Optional


def parse_id(value: Any) -> Optional[int]:
    """Convert a JSON id, given as number or numeric string, to an integer."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def parse_id_list(value: Any) -> list[int]:
    """Parse a list of ids, dropping invalid entries and duplicates while keeping order."""
    if not isinstance(value, list):
        return []
    ids = [parse_id(item) for item in value]
    return list(dict.fromkeys(item for item in ids if item is not None))
