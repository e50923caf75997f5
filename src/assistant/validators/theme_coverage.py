"""
Theme Coverage Validator for clustering results.

Every input item must land in exactly one theme: nothing lost, nothing
duplicated, nothing invented. Items are re-hydrated from the caller's input by
id, so the model's copy of the annotation text is never returned.

Theme count is advisory only. The band from theme_count_guidance() is what the
prompt asks for; results outside it are logged, not rejected or reshaped.
"""

from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from ...shared.logger import get_logger
from ..errors import InvariantViolationError
from ..schemas.clusters import ClusterItem, ClusterResult, Theme

logger = get_logger("assistant", __name__)

_MEMBER_KEYS = ("items", "concerns", "comments")


def theme_count_guidance(item_count: int) -> Optional[Tuple[int, int]]:
    """Advised (min, max) number of themes for item_count items, or None below 3 items."""
    if item_count < 3:
        return None
    if item_count <= 9:
        return 3, 5
    if item_count <= 20:
        return 5, 8
    return 8, 15


def _member_id(member: Any) -> Optional[str]:
    if isinstance(member, dict):
        value = member.get("id")
    else:
        value = member
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float, str)):
        return str(value)
    return None


def _theme_members(theme: Dict[str, Any]) -> List[Any]:
    for key in _MEMBER_KEYS:
        members = theme.get(key)
        if isinstance(members, list):
            return members
    return []


def validate_cluster_result(items: List[ClusterItem], raw: Dict[str, Any]) -> ClusterResult:
    """Check coverage of a model clustering and build the ClusterResult.

    Args:
        items: The request's items.
        raw: JSON object extracted from the model output.

    Returns:
        ClusterResult whose themes hold the caller's original items.

    Raises:
        InvariantViolationError: when the themes list is missing, a theme has no
            name, or the union of theme item ids differs from the input ids.
    """
    themes_raw = raw.get("themes") if isinstance(raw, dict) else None
    if not isinstance(themes_raw, list):
        raise InvariantViolationError("Model output has no themes list", {"schema": ["missing 'themes' array"]})

    by_id = {item.id: item for item in items}
    seen: Counter = Counter()
    unknown: List[str] = []
    malformed: List[str] = []
    unnamed: List[str] = []
    themes: List[Theme] = []

    for index, theme_raw in enumerate(themes_raw):
        if not isinstance(theme_raw, dict):
            malformed.append(f"theme[{index}]")
            continue
        name = str(theme_raw.get("name") or "").strip()

        members: List[ClusterItem] = []
        for position, member in enumerate(_theme_members(theme_raw)):
            member_id = _member_id(member)
            if member_id is None:
                malformed.append(f"theme[{index}].items[{position}]")
                continue
            seen[member_id] += 1
            if member_id not in by_id:
                unknown.append(member_id)
                continue
            members.append(by_id[member_id])

        if not members:
            logger.info("Dropping empty theme from model output", extra={"payload": {"theme": name}})
            continue
        if not name:
            unnamed.append(f"theme[{index}]")
            continue
        themes.append(Theme(name=name, items=members))

    missing = sorted(item_id for item_id in by_id if seen[item_id] == 0)
    duplicated = sorted(item_id for item_id, count in seen.items() if count > 1 and item_id in by_id)
    violations = {
        "missing": missing,
        "duplicated": duplicated,
        "unknown": sorted(set(unknown)),
        "malformed": malformed,
        "unnamed_themes": unnamed,
    }
    if any(violations.values()):
        raise InvariantViolationError("Theme assignment does not cover the input exactly once", violations)

    guidance = theme_count_guidance(len(items))
    if guidance and not guidance[0] <= len(themes) <= guidance[1]:
        logger.warning(
            "Theme count outside advised range",
            extra={"payload": {"item_count": len(items), "theme_count": len(themes), "advised": list(guidance)}},
        )

    return ClusterResult(themes=themes)
