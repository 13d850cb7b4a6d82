from __future__ import annotations

import pytest

from taskrelay.core.runtime.loader import RuntimeUnavailableError, UnconfiguredRuntime, is_configured, load_runtime


class _Runtime:
    def create_run(self, llms, agents, on_message, on_confirm):
        raise NotImplementedError


def make_runtime() -> _Runtime:
    return _Runtime()


RUNTIME_INSTANCE = _Runtime()


def test_unset_target_gives_unconfigured_runtime() -> None:
    runtime = load_runtime("")
    assert isinstance(runtime, UnconfiguredRuntime)
    assert is_configured(runtime) is False
    with pytest.raises(RuntimeUnavailableError):
        runtime.create_run({}, [], None, None)


@pytest.mark.parametrize("attr", ["make_runtime", "_Runtime", "RUNTIME_INSTANCE"])
def test_target_may_name_factory_class_or_instance(attr) -> None:
    runtime = load_runtime(f"{__name__}:{attr}")
    assert isinstance(runtime, _Runtime)
    assert is_configured(runtime)


@pytest.mark.parametrize("target", ["no_colon", "taskrelay_missing_module:factory", f"{__name__}:missing"])
def test_bad_targets_raise(target) -> None:
    with pytest.raises(RuntimeUnavailableError):
        load_runtime(target)


def test_target_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("TASKRELAY_RUNTIME", f"{__name__}:make_runtime")
    assert isinstance(load_runtime(), _Runtime)
