"""Parsing of fscache statistics from /proc/fs/fscache/stats."""

from __future__ import annotations

from dataclasses import dataclass

from procfs.util import parse_uint


@dataclass
class Fscacheinfo:
    """Counters reported by the fscache subsystem."""

    index_cookies_allocated: int = 0
    data_storage_cookies_allocated: int = 0
    special_cookies_allocated: int = 0
    objects_allocated: int = 0
    object_allocations_failure: int = 0
    objects_available: int = 0
    objects_dead: int = 0
    objects_without_coherency_check: int = 0
    objects_with_coherency_check: int = 0
    objects_need_coherency_check_update: int = 0
    objects_declared_obsolete: int = 0
    pages_marked_as_being_cached: int = 0
    uncache_pages_request_seen: int = 0
    acquire_cookies_request_seen: int = 0
    acquire_requests_with_null_parent: int = 0
    acquire_requests_rejected_no_cache_available: int = 0
    acquire_requests_succeeded: int = 0
    acquire_requests_rejected_due_to_error: int = 0
    acquire_requests_failed_due_to_enomem: int = 0
    lookups_number: int = 0
    lookups_negative: int = 0
    lookups_positive: int = 0
    objects_created_by_lookup: int = 0
    lookups_timed_out_and_requeued: int = 0
    invalidations_number: int = 0
    invalidations_running: int = 0
    update_cookie_request_seen: int = 0
    update_requests_with_null_parent: int = 0
    update_requests_running: int = 0
    relinquish_cookies_request_seen: int = 0
    relinquish_cookies_with_null_parent: int = 0
    relinquish_requests_waiting_complete_creation: int = 0
    relinquish_retries: int = 0
    attribute_changed_requests_seen: int = 0
    attribute_changed_requests_queued: int = 0
    attribute_changed_reject_due_to_enobufs: int = 0
    attribute_changed_failed_due_to_enomem: int = 0
    attribute_changed_ops: int = 0
    allocation_requests_seen: int = 0
    allocation_ok_requests: int = 0
    allocation_waiting_on_lookup: int = 0
    allocations_rejected_due_to_enobufs: int = 0
    allocations_aborted_due_to_erestartsys: int = 0
    allocation_operations_submitted: int = 0
    allocations_waited_for_cpu: int = 0
    allocations_aborted_due_to_object_death: int = 0
    retrievals_read_requests: int = 0
    retrievals_ok: int = 0
    retrievals_waiting_lookup_completion: int = 0
    retrievals_returned_enodata: int = 0
    retrievals_rejected_due_to_enobufs: int = 0
    retrievals_aborted_due_to_erestartsys: int = 0
    retrievals_failed_due_to_enomem: int = 0
    retrievals_requests: int = 0
    retrievals_waiting_cpu: int = 0
    retrievals_aborted_due_to_object_death: int = 0
    store_write_requests: int = 0
    store_successful_requests: int = 0
    store_requests_on_pending_storage: int = 0
    store_requests_rejected_due_to_enobufs: int = 0
    store_requests_failed_due_to_enomem: int = 0
    store_requests_submitted: int = 0
    store_requests_running: int = 0
    store_pages_with_requests_processing: int = 0
    store_requests_deleted: int = 0
    store_requests_over_store_limit: int = 0
    release_requests_against_pages_with_no_pending_storage: int = 0
    release_requests_against_pages_stored_by_time_lock_granted: int = 0
    release_requests_ignored_due_to_in_progress_store: int = 0
    page_stores_cancelled_by_release_requests: int = 0
    vmscan_waiting: int = 0
    ops_pending: int = 0
    ops_running: int = 0
    ops_enqueued: int = 0
    ops_cancelled: int = 0
    ops_rejected: int = 0
    ops_initialised: int = 0
    ops_deferred: int = 0
    ops_released: int = 0
    ops_garbage_collected: int = 0
    cacheop_allocations_in_progress: int = 0
    cacheop_lookup_object_in_progress: int = 0
    cacheop_lookup_complete_in_progress: int = 0
    cacheop_grab_object_in_progress: int = 0
    cacheop_invalidations: int = 0
    cacheop_update_object_in_progress: int = 0
    cacheop_drop_object_in_progress: int = 0
    cacheop_put_object_in_progress: int = 0
    cacheop_attribute_change_in_progress: int = 0
    cacheop_sync_cache_in_progress: int = 0
    cacheop_read_or_alloc_page_in_progress: int = 0
    cacheop_read_or_alloc_pages_in_progress: int = 0
    cacheop_allocate_page_in_progress: int = 0
    cacheop_allocate_pages_in_progress: int = 0
    cacheop_write_pages_in_progress: int = 0
    cacheop_uncache_pages_in_progress: int = 0
    cacheop_dissociate_pages_in_progress: int = 0
    cacheev_lookups_and_creations_rejected_lack_space: int = 0
    cacheev_stale_objects_deleted: int = 0
    cacheev_retired_when_relinquished: int = 0
    cacheev_objects_culled: int = 0


# label -> (index of the first value field, ((selector or None, field names), ...))
# A selector is matched against the key of the first value field; None always matches.
_LAYOUT: dict[str, tuple[int, tuple[tuple[str | None, tuple[str, ...]], ...]]] = {
    "Cookies:": (1, ((None, (
        "index_cookies_allocated",
        "data_storage_cookies_allocated",
        "special_cookies_allocated",
    )),)),
    "Objects:": (1, ((None, (
        "objects_allocated",
        "object_allocations_failure",
        "objects_available",
        "objects_dead",
    )),)),
    "ChkAux": (2, ((None, (
        "objects_without_coherency_check",
        "objects_with_coherency_check",
        "objects_need_coherency_check_update",
        "objects_declared_obsolete",
    )),)),
    "Pages": (2, ((None, (
        "pages_marked_as_being_cached",
        "uncache_pages_request_seen",
    )),)),
    "Acquire:": (1, ((None, (
        "acquire_cookies_request_seen",
        "acquire_requests_with_null_parent",
        "acquire_requests_rejected_no_cache_available",
        "acquire_requests_succeeded",
        "acquire_requests_rejected_due_to_error",
        "acquire_requests_failed_due_to_enomem",
    )),)),
    "Lookups:": (1, ((None, (
        "lookups_number",
        "lookups_negative",
        "lookups_positive",
        "objects_created_by_lookup",
        "lookups_timed_out_and_requeued",
    )),)),
    "Invals": (2, ((None, (
        "invalidations_number",
        "invalidations_running",
    )),)),
    "Updates:": (1, ((None, (
        "update_cookie_request_seen",
        "update_requests_with_null_parent",
        "update_requests_running",
    )),)),
    "Relinqs:": (1, ((None, (
        "relinquish_cookies_request_seen",
        "relinquish_cookies_with_null_parent",
        "relinquish_requests_waiting_complete_creation",
        "relinquish_retries",
    )),)),
    "AttrChg:": (1, ((None, (
        "attribute_changed_requests_seen",
        "attribute_changed_requests_queued",
        "attribute_changed_reject_due_to_enobufs",
        "attribute_changed_failed_due_to_enomem",
        "attribute_changed_ops",
    )),)),
    "Allocs": (2, (
        ("n", (
            "allocation_requests_seen",
            "allocation_ok_requests",
            "allocation_waiting_on_lookup",
            "allocations_rejected_due_to_enobufs",
            "allocations_aborted_due_to_erestartsys",
        )),
        (None, (
            "allocation_operations_submitted",
            "allocations_waited_for_cpu",
            "allocations_aborted_due_to_object_death",
        )),
    )),
    "Retrvls:": (1, (
        ("n", (
            "retrievals_read_requests",
            "retrievals_ok",
            "retrievals_waiting_lookup_completion",
            "retrievals_returned_enodata",
            "retrievals_rejected_due_to_enobufs",
            "retrievals_aborted_due_to_erestartsys",
            "retrievals_failed_due_to_enomem",
        )),
        (None, (
            "retrievals_requests",
            "retrievals_waiting_cpu",
            "retrievals_aborted_due_to_object_death",
        )),
    )),
    "Stores": (2, (
        ("n", (
            "store_write_requests",
            "store_successful_requests",
            "store_requests_on_pending_storage",
            "store_requests_rejected_due_to_enobufs",
            "store_requests_failed_due_to_enomem",
        )),
        (None, (
            "store_requests_submitted",
            "store_requests_running",
            "store_pages_with_requests_processing",
            "store_requests_deleted",
            "store_requests_over_store_limit",
        )),
    )),
    "VmScan": (2, ((None, (
        "release_requests_against_pages_with_no_pending_storage",
        "release_requests_against_pages_stored_by_time_lock_granted",
        "release_requests_ignored_due_to_in_progress_store",
        "page_stores_cancelled_by_release_requests",
        "vmscan_waiting",
    )),)),
    "Ops": (2, (
        ("pend", (
            "ops_pending",
            "ops_running",
            "ops_enqueued",
            "ops_cancelled",
            "ops_rejected",
        )),
        (None, (
            "ops_initialised",
            "ops_deferred",
            "ops_released",
            "ops_garbage_collected",
        )),
    )),
    "CacheOp:": (1, (
        ("alo", (
            "cacheop_allocations_in_progress",
            "cacheop_lookup_object_in_progress",
            "cacheop_lookup_complete_in_progress",
            "cacheop_grab_object_in_progress",
        )),
        ("inv", (
            "cacheop_invalidations",
            "cacheop_update_object_in_progress",
            "cacheop_drop_object_in_progress",
            "cacheop_put_object_in_progress",
            "cacheop_attribute_change_in_progress",
            "cacheop_sync_cache_in_progress",
        )),
        (None, (
            "cacheop_read_or_alloc_page_in_progress",
            "cacheop_read_or_alloc_pages_in_progress",
            "cacheop_allocate_page_in_progress",
            "cacheop_allocate_pages_in_progress",
            "cacheop_write_pages_in_progress",
            "cacheop_uncache_pages_in_progress",
            "cacheop_dissociate_pages_in_progress",
        )),
    )),
    "CacheEv:": (1, ((None, (
        "cacheev_lookups_and_creations_rejected_lack_space",
        "cacheev_stale_objects_deleted",
        "cacheev_retired_when_relinquished",
        "cacheev_objects_culled",
    )),)),
}


def _field_value(item: str) -> str:
    parts = item.split("=")
    if len(parts) < 2:
        raise ValueError(f"malformed Fscacheinfo field: {item!r}")
    return parts[1]


def _choose(
    values: list[str], choices: tuple[tuple[str | None, tuple[str, ...]], ...], line: str
) -> tuple[str, ...]:
    for selector, names in choices:
        if selector is None:
            return names
        if not values:
            raise ValueError(f"malformed Fscacheinfo line: {line!r}")
        if values[0].split("=")[0] == selector:
            return names
    raise ValueError(f"malformed Fscacheinfo line: {line!r}")


def _fill(info: Fscacheinfo, values: list[str], names: tuple[str, ...]) -> None:
    if len(values) < len(names):
        raise ValueError(
            f"insufficient number of fields, expected {len(names)}, got {len(values)}"
        )
    for name, item in zip(names, values):
        setattr(info, name, parse_uint(_field_value(item), 0, 64))


def parse_fscacheinfo(text: str | bytes) -> Fscacheinfo:
    """Parse the contents of /proc/fs/fscache/stats."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    info = Fscacheinfo()
    for line in text.splitlines():
        fields = line.split()
        if len(fields) < 2:
            raise ValueError(f"malformed Fscacheinfo line: {line!r}")
        layout = _LAYOUT.get(fields[0])
        if layout is None:
            continue
        offset, choices = layout
        values = fields[offset:]
        _fill(info, values, _choose(values, choices, line))
    return info