"""Tests for upload hook dispatch and hook loading."""

from __future__ import annotations

import logging

import pytest

from sideload.hooks import HookDispatcher, load_hook


@pytest.mark.unit
def test_hooks_run_in_registration_order() -> None:
    seen: list[tuple[str, int]] = []
    dispatcher = HookDispatcher()
    dispatcher.register(lambda media_id, meta: seen.append(("first", media_id)))
    dispatcher.register(lambda media_id, meta: seen.append(("second", media_id)))

    errors = dispatcher.dispatch(7, {"alt": "x"})

    assert seen == [("first", 7), ("second", 7)]
    assert errors == ()


@pytest.mark.unit
def test_each_hook_gets_its_own_metadata_copy() -> None:
    received: list[dict[str, str]] = []

    def mutating(media_id: int, meta: dict[str, str]) -> None:
        meta["category"] = "changed"
        received.append(meta)

    def observing(media_id: int, meta: dict[str, str]) -> None:
        received.append(meta)

    original = {"category": "nature"}
    dispatcher = HookDispatcher([mutating, observing])
    dispatcher.dispatch(1, original)

    assert received[1] == {"category": "nature"}
    assert original == {"category": "nature"}


@pytest.mark.unit
def test_failing_hook_does_not_stop_later_hooks(caplog: pytest.LogCaptureFixture) -> None:
    seen: list[int] = []

    def assign_term(media_id: int, meta: dict[str, str]) -> None:
        raise LookupError("term not found")

    dispatcher = HookDispatcher([assign_term, lambda media_id, meta: seen.append(media_id)])

    with caplog.at_level(logging.ERROR, logger="sideload.hooks"):
        errors = dispatcher.dispatch(3, {})

    assert seen == [3]
    assert len(errors) == 1
    assert "assign_term" in errors[0]
    assert "term not found" in errors[0]
    assert "Upload hook" in caplog.text


@pytest.mark.unit
def test_register_rejects_non_callables() -> None:
    with pytest.raises(TypeError):
        HookDispatcher().register("not a function")  # type: ignore[arg-type]


@pytest.mark.unit
def test_len_counts_registered_hooks() -> None:
    dispatcher = HookDispatcher()
    assert len(dispatcher) == 0
    dispatcher.register(print)
    assert len(dispatcher) == 1


class TestLoadHook:
    @pytest.mark.unit
    def test_resolves_module_attribute(self) -> None:
        assert load_hook("os.path:join") is __import__("os").path.join

    @pytest.mark.unit
    def test_resolves_nested_attribute(self) -> None:
        assert load_hook("sideload.hooks:HookDispatcher.register") is HookDispatcher.register

    @pytest.mark.unit
    @pytest.mark.parametrize("reference", ["os.path.join", ":join", "os.path:", ""])
    def test_rejects_malformed_reference(self, reference: str) -> None:
        with pytest.raises(ValueError, match="package.module:function"):
            load_hook(reference)

    @pytest.mark.unit
    def test_rejects_missing_attribute(self) -> None:
        with pytest.raises(ValueError, match="no attribute"):
            load_hook("os.path:does_not_exist")

    @pytest.mark.unit
    def test_rejects_non_callable(self) -> None:
        with pytest.raises(ValueError, match="not callable"):
            load_hook("os:sep")

    @pytest.mark.unit
    def test_missing_module_raises_import_error(self) -> None:
        with pytest.raises(ImportError):
            load_hook("sideload_no_such_module:hook")
