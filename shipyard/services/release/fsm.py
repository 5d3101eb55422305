from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from shipyard.core.result import Err, Ok, Result
from shipyard.services.release.errors import ReleaseError


@dataclass(frozen=True, slots=True)
class StepAdvance[S]:
    session: S


@dataclass(frozen=True, slots=True)
class StepFinish:
    pass


type StepOutcome[S] = StepAdvance[S] | StepFinish
type StepHandler[S] = Callable[[S], Result[StepOutcome[S], ReleaseError]]
type OnTransition[S] = Callable[[S], None]
type GetStep[S] = Callable[[S], str]


FINISH = StepFinish()


def advance[S](session: S) -> StepAdvance[S]:
    return StepAdvance(session=session)


def run_state_machine[S](
    *,
    initial_state: S,
    get_step: GetStep[S],
    handlers: Mapping[str, StepHandler[S]],
    on_transition: OnTransition[S],
) -> Result[S, tuple[S, ReleaseError]]:
    """Drive handlers until one finishes.

    Returns the final session, or the session that was current when a
    handler failed together with its error. No step is retried.
    """
    current = initial_state

    while True:
        step = get_step(current)
        handler = handlers.get(step)
        if handler is None:
            return Err(
                (
                    current,
                    ReleaseError(
                        kind="build_failed",
                        message=f"unknown build step: {step}",
                    ),
                )
            )

        outcome = handler(current)
        if isinstance(outcome, Err):
            return Err((current, outcome.error))

        if isinstance(outcome.value, StepFinish):
            return Ok(current)

        current = outcome.value.session
        on_transition(current)
