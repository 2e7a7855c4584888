from __future__ import annotations

import itertools
from collections import Counter

from conftest import make_record

from dr_reporting.aggregator import classify_records, group_records, summarize_records
from dr_reporting.models import BackupStatus


def _all_grouped(classified) -> list:
    out = []
    for bucket in classified.buckets.values():
        for group in bucket.groups:
            out.extend(group.records)
    return out + list(classified.unclassified)


def test_summary_counts_and_total(five_records) -> None:
    summary = summarize_records(five_records)
    assert (summary.success, summary.warning, summary.failed, summary.unclassified) == (2, 1, 2, 0)
    assert summary.total == len(five_records)


def test_unrecognized_status_is_counted_not_dropped(five_records) -> None:
    records = five_records + [make_record(asset_name="PLC-X", status="Skipped")]
    classified = classify_records(records)

    assert classified.summary.unclassified == 1
    assert classified.summary.total == len(records)
    assert [r.asset_name for r in classified.unclassified] == ["PLC-X"]


def test_grouping_is_a_partition(five_records) -> None:
    records = five_records + [make_record(asset_name="Odd", status="")]
    classified = classify_records(records)

    grouped = _all_grouped(classified)
    assert Counter(id(r) for r in grouped) == Counter(id(r) for r in records)


def test_buckets_hold_only_their_status(five_records) -> None:
    buckets = group_records(five_records)
    assert set(buckets) == {BackupStatus.SUCCESS, BackupStatus.WARNING, BackupStatus.FAILED}
    for status, bucket in buckets.items():
        assert all(r.status_kind is status for r in bucket.records())


def test_folder_and_asset_ordering_is_ordinal() -> None:
    records = [
        make_record(folder_path="b", asset_name="z", status="Failed"),
        make_record(folder_path="B", asset_name="a", status="Failed"),
        make_record(folder_path="b", asset_name="Y", status="Failed"),
        make_record(folder_path="", asset_name="root-asset", status="Failed"),
        make_record(folder_path="a/b", asset_name="m", status="Failed"),
    ]
    bucket = classify_records(records).bucket(BackupStatus.FAILED)

    assert [g.folder_path for g in bucket.groups] == ["", "B", "a/b", "b"]
    assert bucket.groups[0].label == "Root"
    assert [r.asset_name for r in bucket.groups[-1].records] == ["Y", "z"]


def test_folder_equality_is_case_sensitive() -> None:
    records = [
        make_record(folder_path="Plant", asset_name="a", status="Warning"),
        make_record(folder_path="plant", asset_name="b", status="Warning"),
    ]
    bucket = classify_records(records).bucket(BackupStatus.WARNING)
    assert len(bucket.groups) == 2


def test_result_is_independent_of_input_order(five_records) -> None:
    expected = classify_records(five_records)
    for permutation in itertools.permutations(five_records):
        assert classify_records(list(permutation)) == expected


def test_empty_input() -> None:
    classified = classify_records([])
    assert classified.summary.total == 0
    assert all(bucket.count == 0 for bucket in classified.buckets.values())
