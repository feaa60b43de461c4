from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pagenine.core.matcher import find_thread
from pagenine.core.models import CatalogPage, CatalogThread, ThreadObservation

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _catalog() -> list[CatalogPage]:
    return [
        CatalogPage(
            page_number=1,
            threads=[
                CatalogThread(thread_id=1, title="/agdg/ - Amateur Game Dev General"),
                CatalogThread(thread_id=2, title="Minecraft"),
            ],
        ),
        CatalogPage(
            page_number=2,
            threads=[
                CatalogThread(thread_id=3, title="/vr/ general"),
                CatalogThread(thread_id=4, title="/ptg/ - Private Tracker General", bump_limit_reached=True),
                CatalogThread(thread_id=5, title="/ptg/ - Private Tracker General #2"),
            ],
        ),
    ]


def test_find_thread_reports_page_position_and_length() -> None:
    observation = find_thread(_catalog(), "/ptg/", NOW)
    assert observation == ThreadObservation(
        page=2,
        thread_id=4,
        title="/ptg/ - Private Tracker General",
        observed_at=NOW,
        position=2,
        page_length=3,
        bump_limit_reached=True,
    )


def test_find_thread_returns_first_match_in_catalog_order() -> None:
    observation = find_thread(_catalog(), "General", NOW)
    assert observation is not None
    assert observation.thread_id == 1
    assert observation.position == 1
    assert observation.page_length == 2


def test_find_thread_is_case_sensitive() -> None:
    assert find_thread(_catalog(), "minecraft", NOW) is None
    assert find_thread(_catalog(), "Minecraft", NOW) is not None


def test_find_thread_no_match() -> None:
    assert find_thread(_catalog(), "/tg/", NOW) is None
    assert find_thread([], "/ptg/", NOW) is None


def test_observation_rejects_position_outside_page() -> None:
    with pytest.raises(ValueError):
        ThreadObservation(
            page=1,
            thread_id=1,
            title="x",
            observed_at=NOW,
            position=11,
            page_length=10,
        )
