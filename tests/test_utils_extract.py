"""Tests for utils/extract.py — dotted lookup and first-present rules."""
from catalog_proxy.utils.extract import MISSING, first_present, join_paths, lookup


def test_lookup_nested():
    assert lookup({"a": {"b": {"c": 1}}}, "a.b.c") == 1


def test_lookup_missing_segment():
    assert lookup({"a": {}}, "a.b") is MISSING


def test_lookup_through_non_dict():
    assert lookup({"a": [1, 2]}, "a.b") is MISSING


def test_lookup_empty_path_is_root():
    data = {"x": 1}
    assert lookup(data, "") is data


def test_first_present_order():
    assert first_present({"b": 2, "a": 1}, ["a", "b"]) == 1


def test_first_present_skips_none():
    assert first_present({"a": None, "b": 2}, ["a", "b"]) == 2


def test_first_present_keeps_falsy_values():
    assert first_present({"a": 0, "b": 2}, ["a", "b"]) == 0
    assert first_present({"a": False, "b": True}, ["a", "b"]) is False


def test_first_present_default():
    assert first_present({}, ["a"], default="d") == "d"


def test_first_present_accept_filter():
    data = {"data": {"id": 1}, "items": [1]}
    assert first_present(data, ["data", "items"], accept=lambda v: isinstance(v, list)) == [1]


def test_first_present_on_non_dict():
    assert first_present(None, ["a"], default=[]) == []


def test_join_paths():
    assert join_paths(["pagination", ""], ["page", "currentPage"]) == [
        "pagination.page", "pagination.currentPage", "page", "currentPage",
    ]
