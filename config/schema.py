"""drf-spectacular post-processing hook for the marketplace API.

Operations are grouped by URL prefix so Swagger UI shows one section per
area of the marketplace instead of the default per-viewset tags.
"""

from __future__ import annotations

from typing import Any

_OPERATION_KEYS = frozenset({"get", "post", "put", "patch", "delete", "options", "head"})

# First match wins, so narrower prefixes go before broader ones.
PATTERN_TAGS: list[tuple[str, str]] = [
    ("/api/v1/admin/", "Moderation"),
    ("/api/v1/auth/jwt", "Authentication"),
    ("/api/v1/users", "Users"),
    ("/api/v1/billboards", "Billboards"),
    ("/api/v1/conversations", "Messaging"),
    ("/api/v1/notifications", "Notifications"),
    ("/api/v1/push", "Push"),
    ("/api/v1/presence", "Realtime"),
]

TAG_DESCRIPTIONS = {
    "Moderation": "Admin-only billboard review, account suspension and audit trail.",
    "Authentication": "JWT issue, refresh and verification.",
    "Realtime": "Presence lookups for the Socket.IO channel.",
}


def tag_for_path(path: str) -> str | None:
    return next((tag for prefix, tag in PATTERN_TAGS if path.startswith(prefix)), None)


def group_tags(result: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
    """Give every operation exactly one tag derived from its path."""

    used: list[str] = []
    for path, path_item in result.get("paths", {}).items():
        tag = tag_for_path(path)
        if tag is None:
            continue
        operations = [
            op
            for method, op in path_item.items()
            if method.lower() in _OPERATION_KEYS and isinstance(op, dict)
        ]
        for op in operations:
            op["tags"] = [tag]
        if operations and tag not in used:
            used.append(tag)

    declared = result.setdefault("tags", [])
    known = {entry.get("name") for entry in declared}
    for tag in used:
        if tag in known:
            continue
        entry = {"name": tag}
        if tag in TAG_DESCRIPTIONS:
            entry["description"] = TAG_DESCRIPTIONS[tag]
        declared.append(entry)
    return result
