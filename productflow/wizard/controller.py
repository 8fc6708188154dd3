"""
Wizard Controller

Owns the step order, the active step, the completed steps and the shared
form data for one wizard run. Every transition is a pure function of
(steps, state) so the flow can be driven and tested without a terminal.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class WizardState:
    """Immutable snapshot of a wizard run."""
    active_step_id: str
    completed_step_ids: FrozenSet[str] = frozenset()
    shared_data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Detach from the caller's dict; only transitions produce new data.
        object.__setattr__(self, "shared_data", MappingProxyType(dict(self.shared_data)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active_step_id": self.active_step_id,
            "completed_step_ids": sorted(self.completed_step_ids),
            "shared_data": dict(self.shared_data),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WizardState":
        return cls(
            active_step_id=data["active_step_id"],
            completed_step_ids=frozenset(data.get("completed_step_ids", [])),
            shared_data=dict(data.get("shared_data", {})),
        )


# ============================================================
# Pure transitions
# ============================================================

def initial_state(steps: Tuple[str, ...]) -> WizardState:
    """State at the start of a run: first step active, nothing completed."""
    return WizardState(active_step_id=steps[0])


def is_reachable(steps: Tuple[str, ...], state: WizardState, step_id: str) -> bool:
    """
    Check whether a step may become active.

    The first step is always reachable. Any later step is reachable only
    when the step immediately before it has been completed.
    """
    if step_id not in steps:
        return False
    index = steps.index(step_id)
    if index == 0:
        return True
    return steps[index - 1] in state.completed_step_ids


def activate(steps: Tuple[str, ...], state: WizardState, step_id: str) -> WizardState:
    """Make a step active; unreachable steps leave the state unchanged."""
    if not is_reachable(steps, state, step_id):
        return state
    return replace(state, active_step_id=step_id)


def merge_shared_data(state: WizardState, partial: Mapping[str, Any]) -> WizardState:
    """Shallow-merge ``partial`` into the shared data, last write wins."""
    merged = dict(state.shared_data)
    merged.update(partial)
    return replace(state, shared_data=merged)


def complete_step(steps: Tuple[str, ...], state: WizardState, step_id: str) -> WizardState:
    """Mark a step completed. Repeats and unknown ids are no-ops."""
    if step_id not in steps or step_id in state.completed_step_ids:
        return state
    return replace(state, completed_step_ids=state.completed_step_ids | {step_id})


def advance(steps: Tuple[str, ...], state: WizardState) -> WizardState:
    """Move to the next step in order; stays put on the last step."""
    index = steps.index(state.active_step_id)
    if index >= len(steps) - 1:
        return state
    return replace(state, active_step_id=steps[index + 1])


# ============================================================
# Step contract
# ============================================================

class StepContext:
    """
    What a step receives from the controller.

    ``on_complete`` fires at most once; later calls are ignored.
    """

    def __init__(
        self,
        step_id: str,
        shared_data: Mapping[str, Any],
        merge: Callable[[Mapping[str, Any]], None],
        complete: Callable[[str], None],
    ):
        self.step_id = step_id
        self.shared_data = MappingProxyType(dict(shared_data))
        self._merge = merge
        self._complete = complete
        self._completed = False

    @property
    def completed(self) -> bool:
        return self._completed

    def merge_shared_data(self, partial: Mapping[str, Any]) -> None:
        self._merge(partial)

    def on_complete(self) -> None:
        if self._completed:
            logger.debug(f"Ignoring repeated completion of step '{self.step_id}'")
            return
        self._completed = True
        self._complete(self.step_id)


class WizardController:
    """
    Linear wizard state machine for one actor.

    Holds the current :class:`WizardState` and applies the pure transitions
    above. None of the operations raise; blocked navigation is ignored.
    """

    def __init__(self, steps: Iterable[str], state: Optional[WizardState] = None):
        """
        Initialize the controller.

        Args:
            steps: Step ids in their fixed order
            state: Optional state to restore (e.g. from a checkpoint)

        Raises:
            ValueError: If the step list is empty or contains duplicates
        """
        self.steps: Tuple[str, ...] = tuple(steps)
        if not self.steps:
            raise ValueError("A wizard needs at least one step")
        if len(set(self.steps)) != len(self.steps):
            raise ValueError(f"Duplicate step ids in {list(self.steps)}")

        if state is not None and state.active_step_id not in self.steps:
            logger.warning(f"Discarding state with unknown active step '{state.active_step_id}'")
            state = None
        elif state is not None:
            known = state.completed_step_ids & set(self.steps)
            if known != state.completed_step_ids:
                logger.warning(f"Dropping unknown completed steps {sorted(state.completed_step_ids - known)}")
                state = replace(state, completed_step_ids=known)
        self._state = state or initial_state(self.steps)

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def active_step_id(self) -> str:
        return self._state.active_step_id

    @property
    def completed_step_ids(self) -> FrozenSet[str]:
        return self._state.completed_step_ids

    @property
    def shared_data(self) -> Mapping[str, Any]:
        return MappingProxyType(dict(self._state.shared_data))

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def current_index(self) -> int:
        return self.steps.index(self._state.active_step_id)

    @property
    def progress_fraction(self) -> float:
        return (self.current_index + 1) / self.total_steps

    @property
    def is_last_step(self) -> bool:
        return self.current_index == self.total_steps - 1

    def is_reachable(self, step_id: str) -> bool:
        return is_reachable(self.steps, self._state, step_id)

    def is_completed(self, step_id: str) -> bool:
        return step_id in self._state.completed_step_ids

    def activate(self, step_id: str) -> None:
        new_state = activate(self.steps, self._state, step_id)
        if new_state is self._state and step_id != self._state.active_step_id:
            logger.debug(f"Step '{step_id}' is not reachable yet")
        self._state = new_state

    def merge_shared_data(self, partial: Mapping[str, Any]) -> None:
        self._state = merge_shared_data(self._state, partial)

    def complete_step(self, step_id: str) -> None:
        self._state = complete_step(self.steps, self._state, step_id)

    def advance(self) -> None:
        self._state = advance(self.steps, self._state)

    def reset(self) -> None:
        logger.debug("Resetting wizard to its initial state")
        self._state = initial_state(self.steps)

    def finish_step(self, step_id: str) -> None:
        """Complete a step and move on; finishing the last step starts over."""
        self.complete_step(step_id)
        if step_id == self.steps[-1]:
            self.reset()
        else:
            self.advance()
        logger.debug(f"Step '{step_id}' finished, active step is now '{self.active_step_id}'")

    def context_for(self, step_id: str) -> StepContext:
        """Build the contract handed to a step collaborator."""
        return StepContext(
            step_id=step_id,
            shared_data=self._state.shared_data,
            merge=self.merge_shared_data,
            complete=self.finish_step,
        )
