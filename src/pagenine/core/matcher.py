"""Catalog matching logic (core domain)."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from pagenine.core.models import CatalogPage, ThreadObservation


def find_thread(
    catalog: Iterable[CatalogPage], title_fragment: str, now: datetime
) -> Optional[ThreadObservation]:
    """Return the first thread whose title contains ``title_fragment``.

    Pages and threads are walked in catalog order, which is bump order, so
    position 1 is the most recently bumped thread of a page. Matching is a
    plain case-sensitive substring test.
    """

    for page in catalog:
        page_length = len(page.threads)
        for index, thread in enumerate(page.threads, start=1):
            if title_fragment in thread.title:
                return ThreadObservation(
                    page=page.page_number,
                    thread_id=thread.thread_id,
                    title=thread.title,
                    observed_at=now,
                    position=index,
                    page_length=page_length,
                    bump_limit_reached=thread.bump_limit_reached,
                )
    return None
