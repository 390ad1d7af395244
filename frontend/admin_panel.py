"""Streamlit admin panel for browsing and retiring pixels.

Replaceable UI layer — listing, selection and deletion rules live in
pixel_admin.services; this file only renders them.
"""

from __future__ import annotations

import time
from typing import Any

import pandas as pd
import streamlit as st

from pixel_admin.config import get_backend_settings
from pixel_admin.connectors.pixel_backend import PixelBackendClient
from pixel_admin.domain.deletion import Complete, Confirm, DeletionAttempt, DeletionMode
from pixel_admin.errors import BulkDeletionError, FetchError
from pixel_admin.logging_utils import configure_logging
from pixel_admin.services.bulk_deletion import BulkDeletionService
from pixel_admin.services.deletion_workflow import build_deletion_controller
from pixel_admin.services.export import render_export
from pixel_admin.services.listing import PixelListing

st.set_page_config(page_title="Admin Panel", layout="wide")


class SessionDownloadExporter:
    """Keeps the export in session state so the page can offer a download."""

    def save(self, filename: str, payload: dict[str, Any]) -> str:
        st.session_state.pending_download = (filename, render_export(payload))
        return filename


@st.cache_resource(show_spinner=False)
def _backend() -> PixelBackendClient:
    configure_logging()
    return PixelBackendClient(settings=get_backend_settings())


# ── Session state defaults ─────────────────────────────────────────────────
if "listing" not in st.session_state:
    st.session_state.listing = PixelListing()
    st.session_state.loaded = False
    st.session_state.error = None
    st.session_state.pending_download = None
    st.session_state.show_bulk_confirm = False
    st.session_state.controller = build_deletion_controller(
        st.session_state.listing,
        backend=_backend(),
        exporter=SessionDownloadExporter(),
    )

listing: PixelListing = st.session_state.listing
controller = st.session_state.controller


def _load() -> None:
    try:
        listing.load(_backend().list_pixels)
        st.session_state.error = None
    except FetchError as exc:
        st.session_state.error = str(exc)
    st.session_state.loaded = True


def _sync_checkboxes(pixel_ids: list[str]) -> None:
    selected = listing.selected_ids
    for pixel_id in pixel_ids:
        st.session_state[f"select-{pixel_id}"] = pixel_id in selected


def _toggle(pixel_id: str) -> None:
    listing.toggle_selection(pixel_id)


def _select_all(view_ids: list[str]) -> None:
    listing.select_all([record for record in listing.records if record.id in set(view_ids)])
    _sync_checkboxes(view_ids)


if not st.session_state.loaded:
    with st.spinner("Loading pixels..."):
        _load()


# ── Header and stats ───────────────────────────────────────────────────────
st.title("Admin Panel")
st.caption("Manage all active pixels and their data")

if st.session_state.error:
    st.error(st.session_state.error)

summary = listing.summary()
stats = st.columns(4)
stats[0].metric("Total Pixels", summary.total_pixels)
stats[1].metric("Total Events", f"{summary.total_events:,}")
stats[2].metric("Total Visitors", f"{summary.total_visitors:,}")
stats[3].metric("Industries", summary.industry_count)


# ── Filters ────────────────────────────────────────────────────────────────
filters = st.columns([3, 1, 1, 1])
search_term = filters[0].text_input("Search", placeholder="Search by client name or website...")
industry = filters[1].selectbox(
    "Industry",
    listing.industries(),
    format_func=lambda value: "All Industries" if value == "all" else value,
)
sort_key = filters[2].selectbox(
    "Sort",
    ["date", "name", "events"],
    format_func=lambda value: f"Sort by {value.title()}",
)
if filters[3].button("Refresh", use_container_width=True):
    _load()
    st.rerun()

view = listing.view(search_term, industry, sort_key)
view_ids = [record.id for record in view]


# ── Bulk delete ────────────────────────────────────────────────────────────
selected_count = len(listing.selected_ids)
if selected_count and st.button(f"Delete ({selected_count})", type="primary"):
    st.session_state.show_bulk_confirm = True

if st.session_state.show_bulk_confirm and selected_count:
    plural = "s" if selected_count > 1 else ""
    st.warning(
        f"Are you sure you want to delete {selected_count} pixel{plural}? "
        "This will schedule the data for deletion after 30 days."
    )
    confirm_cols = st.columns(2)
    if confirm_cols[0].button("Cancel", key="bulk-cancel"):
        st.session_state.show_bulk_confirm = False
        st.rerun()
    if confirm_cols[1].button("Delete", key="bulk-confirm", type="primary"):
        try:
            BulkDeletionService(backend=_backend(), listing=listing).delete_selected()
        except BulkDeletionError as exc:
            st.session_state.error = str(exc)
        st.session_state.show_bulk_confirm = False
        st.rerun()


# ── Pixel table ────────────────────────────────────────────────────────────
all_selected = bool(view_ids) and set(view_ids) == set(listing.selected_ids)
st.checkbox(
    "Select all",
    value=all_selected,
    key=f"select-all-{all_selected}",
    on_change=_select_all,
    args=(view_ids,),
    disabled=not view_ids,
)

if not view:
    st.info("No pixels found")

for record in view:
    row = st.columns([0.5, 2, 3, 1.5, 1.5, 1, 1, 1])
    row[0].checkbox(
        "select",
        value=record.id in listing.selected_ids,
        key=f"select-{record.id}",
        on_change=_toggle,
        args=(record.id,),
        label_visibility="collapsed",
    )
    client_label = record.client_name
    if record.deletion_scheduled:
        client_label += " · deletion scheduled"
    row[1].write(client_label)
    row[2].write(record.website)
    row[3].write(record.industry or "Uncategorized")
    row[4].write(record.created_at.date().isoformat())
    row[5].write(f"{record.event_count:,}")
    row[6].write(f"{record.visitor_count:,}")
    if row[7].button("Delete", key=f"delete-{record.id}", disabled=controller.active is not None):
        controller.begin(record.id)
        st.rerun()

with st.expander("Table export"):
    st.dataframe(
        pd.DataFrame([item.model_dump(mode="json", by_alias=True) for item in view]),
        use_container_width=True,
    )


# ── Advanced delete dialog ─────────────────────────────────────────────────
def _render_attempt(attempt: DeletionAttempt) -> None:
    st.subheader("Delete Pixel")
    st.write(f"Pixel `{attempt.pixel_id}`")

    if isinstance(attempt.phase, Confirm):
        if attempt.phase.last_error:
            st.error(attempt.phase.last_error)
        st.write(
            "This will permanently delete the pixel from SimpleAudience and remove "
            "all associated data. Choose an option:"
        )
        choice = st.columns(3)
        mode = None
        if choice[0].button("Save & Delete", type="primary"):
            mode = DeletionMode.SAVE_AND_DELETE
        if choice[1].button("Delete w/o Saving"):
            mode = DeletionMode.DELETE_ONLY
        if choice[2].button("Cancel"):
            controller.cancel()
            st.rerun()
        if mode is not None:
            with st.status("Deleting...", expanded=True) as progress:
                unsubscribe = controller.subscribe(lambda current: progress.write(current.message))
                try:
                    controller.run(mode)
                finally:
                    unsubscribe()
            st.rerun()
        return

    if isinstance(attempt.phase, Complete):
        st.success(attempt.message)
        if st.session_state.pending_download:
            filename, body = st.session_state.pending_download
            st.download_button("Download exported data", body, file_name=filename, mime="application/json")
        time.sleep(controller.dismiss_delay_seconds)
        controller.dismiss()
        st.rerun()
        return

    st.info(attempt.message)


if controller.active is not None:
    st.divider()
    _render_attempt(controller.active)
elif st.session_state.pending_download:
    filename, body = st.session_state.pending_download
    st.download_button("Download last export", body, file_name=filename, mime="application/json")
