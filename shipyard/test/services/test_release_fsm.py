from __future__ import annotations

from dataclasses import dataclass, replace

from shipyard.core.result import Err, Ok, Result
from shipyard.services.release.errors import ReleaseError
from shipyard.services.release.fsm import FINISH, StepOutcome, advance, run_state_machine


@dataclass(frozen=True, slots=True)
class _State:
    step: str
    counter: int


def test_run_state_machine_advances_and_notifies() -> None:
    seen: list[_State] = []

    def step_a(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
        return Ok(advance(replace(s, step="b", counter=s.counter + 1)))

    def step_b(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
        return Ok(FINISH)

    result = run_state_machine(
        initial_state=_State(step="a", counter=0),
        get_step=lambda s: s.step,
        handlers={"a": step_a, "b": step_b},
        on_transition=seen.append,
    )

    assert result == Ok(_State(step="b", counter=1))
    assert seen == [_State(step="b", counter=1)]


def test_run_state_machine_unknown_step_fails() -> None:
    result = run_state_machine(
        initial_state=_State(step="missing", counter=0),
        get_step=lambda s: s.step,
        handlers={},
        on_transition=lambda s: None,
    )

    assert isinstance(result, Err)
    state, error = result.error
    assert state.step == "missing"
    assert "unknown build step" in error.message


def test_run_state_machine_stops_at_first_error() -> None:
    calls: list[str] = []

    def bad_step(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
        calls.append(s.step)
        return Err(ReleaseError(kind="build_failed", message="boom"))

    def never(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
        calls.append("never")
        return Ok(FINISH)

    result = run_state_machine(
        initial_state=_State(step="a", counter=0),
        get_step=lambda s: s.step,
        handlers={"a": bad_step, "b": never},
        on_transition=lambda s: None,
    )

    assert isinstance(result, Err)
    assert result.error[1].message == "boom"
    assert calls == ["a"]
