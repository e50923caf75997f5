"""
Unit tests for clustering coverage checks (src/assistant/validators/theme_coverage.py).
"""

from unittest.mock import patch

import pytest

from src.assistant.errors import InvariantViolationError
from src.assistant.schemas.clusters import ClusterRequest
from src.assistant.validators import theme_coverage
from src.assistant.validators.theme_coverage import theme_count_guidance, validate_cluster_result


@pytest.fixture
def items(comments):
    return ClusterRequest.from_wire(comments).items


@pytest.mark.parametrize("count,expected", [
    (1, None),
    (2, None),
    (3, (3, 5)),
    (9, (3, 5)),
    (10, (5, 8)),
    (20, (5, 8)),
    (21, (8, 15)),
    (500, (8, 15)),
])
def test_theme_count_guidance_bands(count, expected):
    assert theme_count_guidance(count) == expected


def test_exact_partition_is_accepted(items):
    raw = {"themes": [
        {"name": "SAMPLE SELECTION", "items": [{"id": "c1"}, {"id": "c3"}]},
        {"name": "BLINDING", "items": [{"id": "c2"}]},
        {"name": "CONFOUNDING", "items": [{"id": "c4"}]},
        {"name": "MEASUREMENT", "items": [{"id": "c5"}]},
    ]}

    result = validate_cluster_result(items, raw)

    assert [t.name for t in result.themes] == ["SAMPLE SELECTION", "BLINDING", "CONFOUNDING", "MEASUREMENT"]
    assert sorted(result.item_ids()) == ["c1", "c2", "c3", "c4", "c5"]


def test_items_are_rehydrated_from_input(items, comments):
    raw = {"themes": [
        {"name": "ALL", "items": [{"id": "c1", "text": "model rewrote this"}, "c2", "c3", "c4", "c5"]},
    ]}

    result = validate_cluster_result(items, raw)

    assert result.to_wire()["themes"][0]["items"][0] == comments[0]


def test_alternate_member_keys_accepted(items):
    raw = {"themes": [
        {"name": "A", "concerns": [{"id": "c1"}, {"id": "c2"}]},
        {"name": "B", "comments": [{"id": "c3"}, {"id": "c4"}]},
        {"name": "C", "items": [{"id": "c5"}]},
    ]}

    assert len(validate_cluster_result(items, raw).themes) == 3


def test_missing_item_rejected(items):
    raw = {"themes": [{"name": "A", "items": [{"id": "c1"}, {"id": "c2"}, {"id": "c3"}, {"id": "c4"}]}]}

    with pytest.raises(InvariantViolationError) as exc_info:
        validate_cluster_result(items, raw)
    assert exc_info.value.violations == {"missing": ["c5"]}


def test_duplicated_item_rejected(items):
    raw = {"themes": [
        {"name": "A", "items": [{"id": "c1"}, {"id": "c2"}, {"id": "c3"}]},
        {"name": "B", "items": [{"id": "c3"}, {"id": "c4"}, {"id": "c5"}]},
    ]}

    with pytest.raises(InvariantViolationError) as exc_info:
        validate_cluster_result(items, raw)
    assert exc_info.value.violations == {"duplicated": ["c3"]}


def test_invented_item_rejected(items):
    raw = {"themes": [
        {"name": "A", "items": [{"id": "c1"}, {"id": "c2"}, {"id": "c3"}, {"id": "c4"}, {"id": "c5"}, {"id": "c99"}]},
    ]}

    with pytest.raises(InvariantViolationError) as exc_info:
        validate_cluster_result(items, raw)
    assert exc_info.value.violations == {"unknown": ["c99"]}
    assert "unknown: c99" in exc_info.value.details


def test_unnamed_theme_rejected(items):
    raw = {"themes": [
        {"name": "", "items": [{"id": "c1"}, {"id": "c2"}, {"id": "c3"}]},
        {"name": "B", "items": [{"id": "c4"}, {"id": "c5"}]},
    ]}

    with pytest.raises(InvariantViolationError) as exc_info:
        validate_cluster_result(items, raw)
    assert exc_info.value.violations == {"unnamed_themes": ["theme[0]"]}


def test_missing_themes_list_rejected(items):
    with pytest.raises(InvariantViolationError):
        validate_cluster_result(items, {"categories": []})


def test_empty_themes_are_dropped(items):
    raw = {"themes": [
        {"name": "A", "items": [{"id": "c1"}, {"id": "c2"}]},
        {"name": "EMPTY", "items": []},
        {"name": "B", "items": [{"id": "c3"}, {"id": "c4"}]},
        {"name": "C", "items": [{"id": "c5"}]},
    ]}

    result = validate_cluster_result(items, raw)

    assert [t.name for t in result.themes] == ["A", "B", "C"]


def test_theme_count_outside_band_is_only_logged(items):
    raw = {"themes": [{"name": "EVERYTHING", "items": [{"id": c} for c in ["c1", "c2", "c3", "c4", "c5"]]}]}

    with patch.object(theme_coverage.logger, "warning") as warn:
        result = validate_cluster_result(items, raw)

    assert len(result.themes) == 1
    warn.assert_called_once()
    assert warn.call_args[0][0] == "Theme count outside advised range"


def test_empty_unnamed_theme_is_dropped_not_rejected(items):
    raw = {"themes": [
        {"name": "A", "items": [{"id": "c1"}, {"id": "c2"}]},
        {"name": "", "items": []},
        {"name": "B", "items": [{"id": "c3"}, {"id": "c4"}]},
        {"name": "C", "items": [{"id": "c5"}]},
    ]}

    result = validate_cluster_result(items, raw)

    assert [t.name for t in result.themes] == ["A", "B", "C"]
