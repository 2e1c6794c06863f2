from __future__ import annotations

import pytest

from maestro.core.aliases import parse_aliases
from maestro.core.closure import dedupe_ids, search_closure
from maestro.core.exceptions import CycleDetectedError, MissingAliasError, ProfileMismatchError
from maestro.core.profiles import ProfileStack


def _closure(raw, seeds, profiles=()):
    return search_closure(seeds, parse_aliases(raw), ProfileStack.coerce(profiles))


def test_dependencies_precede_dependents() -> None:
    raw = {"A": {"require": ["B"]}, "B": {}}
    assert _closure(raw, ["A"]) == ("B", "A")


def test_require_order_is_preserved() -> None:
    raw = {
        "app": {"require": ["x", "y"]},
        "x": {"require": ["base"]},
        "y": {"require": ["base"]},
        "base": {},
    }
    assert _closure(raw, ["app"]) == ("base", "x", "y", "app")


def test_multiple_seeds_share_visited_nodes() -> None:
    raw = {"a": {"require": ["c"]}, "b": {"require": ["c"]}, "c": {}}
    assert _closure(raw, ["a", "b", "a"]) == ("c", "a", "b")


def test_profile_reference_selects_variant() -> None:
    raw = {
        "app": {"require": [{"default": "lib", "release": "lib/release"}]},
        "lib": {},
        "lib/release": {},
    }
    assert _closure(raw, ["app"]) == ("lib", "app")
    assert _closure(raw, ["app"], ["release"]) == ("lib/release", "app")


def test_profile_mismatch_aborts_resolution() -> None:
    raw = {"app": {"require": [{"release": "lib"}]}, "lib": {}}
    with pytest.raises(ProfileMismatchError):
        _closure(raw, ["app"], ["dev"])


def test_missing_seed_raises() -> None:
    with pytest.raises(MissingAliasError) as exc:
        _closure({"a": {}}, ["nope"])
    assert exc.value.alias == "nope"
    assert exc.value.referenced_by is None


def test_missing_requirement_names_referrer() -> None:
    with pytest.raises(MissingAliasError) as exc:
        _closure({"a": {"require": ["ghost"]}}, ["a"])
    assert exc.value.alias == "ghost"
    assert exc.value.referenced_by == "a"


def test_cycle_reports_path() -> None:
    raw = {"a": {"require": ["b"]}, "b": {"require": ["c"]}, "c": {"require": ["b"]}}
    with pytest.raises(CycleDetectedError) as exc:
        _closure(raw, ["a"])
    assert exc.value.path == ("b", "c", "b")


def test_self_reference_is_a_cycle() -> None:
    with pytest.raises(CycleDetectedError) as exc:
        _closure({"a": {"require": ["a"]}}, ["a"])
    assert exc.value.path == ("a", "a")


def test_closure_is_complete_and_duplicate_free() -> None:
    raw = {
        "a": {"require": ["b", "c"]},
        "b": {"require": ["d"]},
        "c": {"require": ["d", "b"]},
        "d": {},
    }
    order = _closure(raw, ["a"])
    assert sorted(order) == ["a", "b", "c", "d"]
    assert len(order) == len(set(order))
    for alias_id in order:
        for dep in raw[alias_id].get("require", []):
            assert order.index(dep) < order.index(alias_id)


def test_closure_of_closure_is_identity() -> None:
    raw = {"a": {"require": ["b"]}, "b": {"require": ["c"]}, "c": {}}
    first = _closure(raw, ["a"])
    assert _closure(raw, first) == first


def test_dedupe_ids_keeps_first_occurrence() -> None:
    assert dedupe_ids(["b", "a", "b", "c", "a"]) == ("b", "a", "c")


def test_deep_chain_does_not_hit_recursion_limit() -> None:
    depth = 5000
    raw = {f"a{i}": {"require": [f"a{i + 1}"]} for i in range(depth)}
    raw[f"a{depth}"] = {}
    order = _closure(raw, ["a0"])
    assert len(order) == depth + 1
    assert order[0] == f"a{depth}"
    assert order[-1] == "a0"


def test_deep_cycle_reports_full_path() -> None:
    depth = 3000
    raw = {f"a{i}": {"require": [f"a{i + 1}"]} for i in range(depth)}
    raw[f"a{depth}"] = {"require": ["a0"]}
    with pytest.raises(CycleDetectedError) as exc:
        _closure(raw, ["a0"])
    assert exc.value.path[0] == exc.value.path[-1] == "a0"
    assert len(exc.value.path) == depth + 2
