from __future__ import annotations

from maestro.core.profiles import ProfileStack


def test_of_dedupes_and_strips_blanks() -> None:
    stack = ProfileStack.of("dev", " ", "release", "dev")
    assert stack.names == ("dev", "release")


def test_append_keeps_existing_position() -> None:
    stack = ProfileStack.of("dev", "release").append("test", "dev")
    assert stack.names == ("dev", "release", "test")


def test_prepend_moves_existing_name_to_front() -> None:
    stack = ProfileStack.of("dev", "release").prepend("release")
    assert stack.names == ("release", "dev")


def test_operations_return_new_stacks() -> None:
    base = ProfileStack.of("release")
    base.append("dev")
    base.prepend("test")
    assert base.names == ("release",)


def test_first_match_follows_stack_order_not_candidate_order() -> None:
    stack = ProfileStack.of("test", "release")
    assert stack.first_match(["release", "test"]) == "test"
    assert stack.first_match(["other"]) is None


def test_coerce_accepts_strings_iterables_and_stacks() -> None:
    stack = ProfileStack.of("a")
    assert ProfileStack.coerce(stack) is stack
    assert ProfileStack.coerce("a").names == ("a",)
    assert ProfileStack.coerce(["a", "b"]).names == ("a", "b")
    assert ProfileStack.coerce(None).names == ()


def test_container_protocol() -> None:
    stack = ProfileStack.of("a", "b")
    assert list(stack) == ["a", "b"]
    assert len(stack) == 2
    assert "b" in stack
    assert "c" not in stack
