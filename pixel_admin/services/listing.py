"""
pixel_admin/services/listing.py

Authoritative in-memory pixel set, derived views and the multi-select set.

The listing never calls the backend itself: `load` receives a fetch
callable, and the deletion flows tell it which ids to drop once a remote
deletion has succeeded.
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from pixel_admin.errors import FetchError
from pixel_admin.logging_utils import log_event
from pixel_admin.schemas.pixels import PixelRecord

logger = logging.getLogger(__name__)

ALL_INDUSTRIES = "all"
SORT_KEYS: tuple[str, ...] = ("date", "name", "events")


def _name_key(record: PixelRecord) -> str:
    return unicodedata.normalize("NFKD", record.client_name).casefold()


def apply_view(
    records: Sequence[PixelRecord],
    search_term: str = "",
    industry_filter: str = ALL_INDUSTRIES,
    sort_key: str = "date",
) -> list[PixelRecord]:
    """
    Return the filtered and sorted view of *records* without mutating it.

    - search matches client name or website, case-insensitively
    - industry filter is an exact match; ``"all"`` disables it
    - ``date`` and ``events`` sort descending, ``name`` ascending
    Ties keep their input order.
    """

    if sort_key not in SORT_KEYS:
        raise ValueError(f"Unsupported sort key '{sort_key}'. Allowed keys: {', '.join(SORT_KEYS)}.")

    filtered = list(records)

    term = search_term.lower()
    if term:
        filtered = [
            record
            for record in filtered
            if term in record.client_name.lower() or term in record.website.lower()
        ]

    if industry_filter != ALL_INDUSTRIES:
        filtered = [record for record in filtered if record.industry == industry_filter]

    if sort_key == "date":
        return sorted(filtered, key=lambda record: record.created_at, reverse=True)
    if sort_key == "name":
        return sorted(filtered, key=_name_key)
    return sorted(filtered, key=lambda record: record.event_count, reverse=True)


@dataclass(frozen=True)
class ListingSummary:
    """
    Headline numbers shown above the pixel table.
    """

    total_pixels: int
    total_events: int
    total_visitors: int
    industry_count: int


class PixelListing:
    """
    Holds the pixel set the admin surface renders, plus the selection.
    """

    def __init__(self, records: Iterable[PixelRecord] = ()) -> None:
        self._records: list[PixelRecord] = []
        self._selected: set[str] = set()
        self.last_error: str | None = None
        self._replace(list(records))

    @property
    def records(self) -> list[PixelRecord]:
        return list(self._records)

    @property
    def ids(self) -> set[str]:
        return {record.id for record in self._records}

    @property
    def selected_ids(self) -> frozenset[str]:
        return frozenset(self._selected)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, pixel_id: object) -> bool:
        return any(record.id == pixel_id for record in self._records)

    def get(self, pixel_id: str) -> PixelRecord | None:
        for record in self._records:
            if record.id == pixel_id:
                return record
        return None

    def load(self, fetch: Callable[[], Iterable[PixelRecord]]) -> list[PixelRecord]:
        """
        Replace the pixel set with the result of *fetch*.

        All-or-nothing: if fetching or validating fails, the current set is
        kept, `last_error` is set for the banner and FetchError is raised.
        """

        try:
            fetched = list(fetch())
            self._check_unique(fetched)
        except Exception as exc:
            self.last_error = f"Failed to fetch pixels: {exc}"
            log_event(
                logger,
                logging.ERROR,
                "pixel_listing_load_failed",
                error=str(exc),
                retained=len(self._records),
            )
            raise FetchError(self.last_error) from exc

        self._replace(fetched)
        self.last_error = None
        log_event(logger, logging.INFO, "pixel_listing_loaded", count=len(fetched))
        return self.records

    def view(
        self,
        search_term: str = "",
        industry_filter: str = ALL_INDUSTRIES,
        sort_key: str = "date",
    ) -> list[PixelRecord]:
        return apply_view(self._records, search_term, industry_filter, sort_key)

    def toggle_selection(self, pixel_id: str) -> None:
        if pixel_id in self._selected:
            self._selected.discard(pixel_id)
        elif pixel_id in self:
            self._selected.add(pixel_id)

    def select_all(self, view: Sequence[PixelRecord]) -> None:
        """
        Toggle selection of the current filtered view.

        If every id in *view* and nothing else is selected, the selection is
        cleared; otherwise it becomes exactly the ids in *view*.
        """

        view_ids = {record.id for record in view} & self.ids
        if self._selected == view_ids:
            self._selected = set()
        else:
            self._selected = view_ids

    def clear_selection(self) -> None:
        self._selected = set()

    def remove_by_ids(self, pixel_ids: Iterable[str]) -> None:
        """
        Drop pixels whose remote deletion has been confirmed.
        """

        doomed = set(pixel_ids)
        if not doomed:
            return
        self._records = [record for record in self._records if record.id not in doomed]
        self._selected -= doomed

    def industries(self) -> list[str]:
        seen: dict[str, None] = {}
        for record in self._records:
            if record.industry:
                seen.setdefault(record.industry, None)
        return [ALL_INDUSTRIES, *seen]

    def summary(self) -> ListingSummary:
        return ListingSummary(
            total_pixels=len(self._records),
            total_events=sum(record.event_count for record in self._records),
            total_visitors=sum(record.visitor_count for record in self._records),
            industry_count=len(self.industries()) - 1,
        )

    def _replace(self, records: list[PixelRecord]) -> None:
        self._check_unique(records)
        self._records = records
        self._selected &= {record.id for record in records}

    @staticmethod
    def _check_unique(records: Sequence[PixelRecord]) -> None:
        seen: set[str] = set()
        for record in records:
            if record.id in seen:
                raise ValueError(f"Duplicate pixel id '{record.id}' in listing.")
            seen.add(record.id)
