from __future__ import annotations

import pytest

from shipyard.core.structured import as_obj_list, as_str_dict, get_str, get_str_list, get_table


def test_as_str_dict() -> None:
    assert as_str_dict({"a": 1}) == {"a": 1}
    assert as_str_dict({1: "a"}) is None
    assert as_str_dict([]) is None


def test_as_obj_list() -> None:
    assert as_obj_list([1, "x"]) == [1, "x"]
    assert as_obj_list("x") is None


def test_get_str_strips_and_rejects_blank() -> None:
    assert get_str({"k": "  main "}, "k") == "main"
    assert get_str({"k": "   "}, "k") is None
    assert get_str({"k": 3}, "k") is None


def test_get_table() -> None:
    assert get_table({"image": {"repository": "x"}}, "image") == {"repository": "x"}
    assert get_table({"image": "x"}, "image") is None


def test_get_str_list() -> None:
    assert get_str_list({}, "platforms") is None
    assert get_str_list({"platforms": [" linux/amd64 "]}, "platforms") == ["linux/amd64"]
    with pytest.raises(ValueError):
        get_str_list({"platforms": "linux/amd64"}, "platforms")
    with pytest.raises(ValueError):
        get_str_list({"platforms": [""]}, "platforms")
