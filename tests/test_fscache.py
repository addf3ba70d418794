import pytest

from procfs.fscache import Fscacheinfo, parse_fscacheinfo

STATS = """FS-Cache statistics
Cookies: idx=3 dat=67877 spc=0
Objects: alc=67473 nal=0 avl=67473 ded=388
ChkAux : non=12 ok=33 upd=44 obs=55
Pages  : mrk=547164 unc=364577
Acquire: n=67880 nul=98 noc=25 ok=67780 nbf=39 oom=26
Lookups: n=67473 neg=67470 pos=58 crt=67473 tmo=85
Invals : n=14 run=13
Updates: n=7 nul=3 run=8
Relinqs: n=394 nul=1 wcr=2 rtr=3
AttrChg: n=6 ok=5 nbf=4 oom=3 run=2
Allocs : n=20 ok=19 wt=18 nbf=17 int=16
Allocs : ops=15 owt=14 abt=13
Retrvls: n=151959 ok=82823 wt=23467 nod=69136 nbf=15 int=69 oom=43
Retrvls: ops=151959 owt=42747 abt=44
Stores : n=225565 ok=225565 agn=12 nbf=13 oom=14
Stores : ops=69156 run=294721 pgs=225565 rxd=225565 olm=43
VmScan : nos=364512 gon=2 bsy=43 can=12 wt=66
Ops    : pend=42753 run=221129 enq=628798 can=11 rej=88
Ops    : ini=377538 dfr=27 rel=377538 gc=37
CacheOp: alo=1 luo=2 luc=3 gro=4
CacheOp: inv=5 upo=6 dro=7 pto=8 atc=9 syn=10
CacheOp: rap=11 ras=12 alp=13 als=14 wrp=15 ucp=16 dsp=17
CacheEv: nsp=18 stl=19 rtr=20 cul=21
"""

EXPECTED = Fscacheinfo(
    index_cookies_allocated=3,
    data_storage_cookies_allocated=67877,
    special_cookies_allocated=0,
    objects_allocated=67473,
    object_allocations_failure=0,
    objects_available=67473,
    objects_dead=388,
    objects_without_coherency_check=12,
    objects_with_coherency_check=33,
    objects_need_coherency_check_update=44,
    objects_declared_obsolete=55,
    pages_marked_as_being_cached=547164,
    uncache_pages_request_seen=364577,
    acquire_cookies_request_seen=67880,
    acquire_requests_with_null_parent=98,
    acquire_requests_rejected_no_cache_available=25,
    acquire_requests_succeeded=67780,
    acquire_requests_rejected_due_to_error=39,
    acquire_requests_failed_due_to_enomem=26,
    lookups_number=67473,
    lookups_negative=67470,
    lookups_positive=58,
    objects_created_by_lookup=67473,
    lookups_timed_out_and_requeued=85,
    invalidations_number=14,
    invalidations_running=13,
    update_cookie_request_seen=7,
    update_requests_with_null_parent=3,
    update_requests_running=8,
    relinquish_cookies_request_seen=394,
    relinquish_cookies_with_null_parent=1,
    relinquish_requests_waiting_complete_creation=2,
    relinquish_retries=3,
    attribute_changed_requests_seen=6,
    attribute_changed_requests_queued=5,
    attribute_changed_reject_due_to_enobufs=4,
    attribute_changed_failed_due_to_enomem=3,
    attribute_changed_ops=2,
    allocation_requests_seen=20,
    allocation_ok_requests=19,
    allocation_waiting_on_lookup=18,
    allocations_rejected_due_to_enobufs=17,
    allocations_aborted_due_to_erestartsys=16,
    allocation_operations_submitted=15,
    allocations_waited_for_cpu=14,
    allocations_aborted_due_to_object_death=13,
    retrievals_read_requests=151959,
    retrievals_ok=82823,
    retrievals_waiting_lookup_completion=23467,
    retrievals_returned_enodata=69136,
    retrievals_rejected_due_to_enobufs=15,
    retrievals_aborted_due_to_erestartsys=69,
    retrievals_failed_due_to_enomem=43,
    retrievals_requests=151959,
    retrievals_waiting_cpu=42747,
    retrievals_aborted_due_to_object_death=44,
    store_write_requests=225565,
    store_successful_requests=225565,
    store_requests_on_pending_storage=12,
    store_requests_rejected_due_to_enobufs=13,
    store_requests_failed_due_to_enomem=14,
    store_requests_submitted=69156,
    store_requests_running=294721,
    store_pages_with_requests_processing=225565,
    store_requests_deleted=225565,
    store_requests_over_store_limit=43,
    release_requests_against_pages_with_no_pending_storage=364512,
    release_requests_against_pages_stored_by_time_lock_granted=2,
    release_requests_ignored_due_to_in_progress_store=43,
    page_stores_cancelled_by_release_requests=12,
    vmscan_waiting=66,
    ops_pending=42753,
    ops_running=221129,
    ops_enqueued=628798,
    ops_cancelled=11,
    ops_rejected=88,
    ops_initialised=377538,
    ops_deferred=27,
    ops_released=377538,
    ops_garbage_collected=37,
    cacheop_allocations_in_progress=1,
    cacheop_lookup_object_in_progress=2,
    cacheop_lookup_complete_in_progress=3,
    cacheop_grab_object_in_progress=4,
    cacheop_invalidations=5,
    cacheop_update_object_in_progress=6,
    cacheop_drop_object_in_progress=7,
    cacheop_put_object_in_progress=8,
    cacheop_attribute_change_in_progress=9,
    cacheop_sync_cache_in_progress=10,
    cacheop_read_or_alloc_page_in_progress=11,
    cacheop_read_or_alloc_pages_in_progress=12,
    cacheop_allocate_page_in_progress=13,
    cacheop_allocate_pages_in_progress=14,
    cacheop_write_pages_in_progress=15,
    cacheop_uncache_pages_in_progress=16,
    cacheop_dissociate_pages_in_progress=17,
    cacheev_lookups_and_creations_rejected_lack_space=18,
    cacheev_stale_objects_deleted=19,
    cacheev_retired_when_relinquished=20,
    cacheev_objects_culled=21,
)


def test_parse_full_stats():
    assert parse_fscacheinfo(STATS) == EXPECTED


def test_parse_bytes_input():
    assert parse_fscacheinfo(STATS.encode()) == EXPECTED


def test_variant_lines_choose_fields_by_key():
    info = parse_fscacheinfo("Ops    : ini=5 dfr=6 rel=7 gc=8\n")
    assert (info.ops_initialised, info.ops_deferred, info.ops_released) == (5, 6, 7)
    assert info.ops_garbage_collected == 8
    assert info.ops_pending == 0


def test_hex_values_are_accepted():
    info = parse_fscacheinfo("Invals : n=0x10 run=0\n")
    assert info.invalidations_number == 16


def test_unknown_labels_are_ignored():
    assert parse_fscacheinfo("Something: a=1 b=2\n") == Fscacheinfo()


def test_short_line_is_rejected():
    with pytest.raises(ValueError, match="malformed Fscacheinfo line"):
        parse_fscacheinfo("Cookies:\n")


def test_empty_line_is_rejected():
    with pytest.raises(ValueError, match="malformed Fscacheinfo line"):
        parse_fscacheinfo("Cookies: idx=3 dat=1 spc=0\n\n")


def test_insufficient_fields_are_rejected():
    with pytest.raises(ValueError, match="insufficient number of fields"):
        parse_fscacheinfo("Cookies: idx=3 dat=1\n")


def test_bad_number_is_rejected():
    with pytest.raises(ValueError):
        parse_fscacheinfo("Pages  : mrk=abc unc=1\n")


def test_field_without_value_is_rejected():
    with pytest.raises(ValueError, match="malformed Fscacheinfo field"):
        parse_fscacheinfo("Updates: n=7 nul run=8\n")