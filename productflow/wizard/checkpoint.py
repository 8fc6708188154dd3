"""
Wizard Checkpoint

Persists the controller state between sessions so an interrupted product
entry can be resumed from the step it stopped at.
"""

import json
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..utils.logger import get_logger
from .controller import WizardController, WizardState

logger = get_logger(__name__)


@dataclass
class StepResult:
    """Result of executing a wizard step."""
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    message: str = ""
    errors: List[str] = field(default_factory=list)


class Checkpoint:
    """
    Saved wizard session.

    State is saved to ~/.productflow/wizard_state.json for resume capability.
    """

    DEFAULT_STATE_DIR = Path.home() / ".productflow"
    STATE_FILENAME = "wizard_state.json"

    def __init__(self, state_dir: Optional[Path] = None, flow: str = "standard"):
        """
        Initialize the checkpoint.

        Args:
            state_dir: Directory for state files. Defaults to ~/.productflow/
            flow: Name of the flow being run
        """
        self.state_dir = Path(state_dir) if state_dir else self._get_state_dir()
        self.state_file = self.state_dir / self.STATE_FILENAME
        self.flow = flow
        self.wizard_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.started_at = datetime.now().isoformat()

    @classmethod
    def _get_state_dir(cls) -> Path:
        """Get state directory from environment or default."""
        env_dir = os.environ.get("PRODUCTFLOW_STATE_DIR")
        if env_dir:
            return Path(env_dir)
        return cls.DEFAULT_STATE_DIR

    def save(self, controller: WizardController) -> None:
        """Save the controller state to disk."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        data = {
            "wizard_id": self.wizard_id,
            "flow": self.flow,
            "started_at": self.started_at,
            "last_updated": datetime.now().isoformat(),
            "steps": list(controller.steps),
            "state": controller.state.to_dict(),
        }
        with open(self.state_file, "w") as f:
            json.dump(data, f, indent=2)
        logger.debug(f"Checkpoint saved at step '{controller.active_step_id}'")

    def _read(self) -> Optional[Dict[str, Any]]:
        if not self.state_file.exists():
            return None
        try:
            with open(self.state_file, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable checkpoint {self.state_file}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def load(self, steps: Optional[List[str]] = None) -> Optional[WizardState]:
        """
        Load the saved state.

        Args:
            steps: Step ids of the flow being resumed; a checkpoint saved for
                a different step list is not loaded

        Returns:
            The saved state, or None when there is nothing usable
        """
        data = self._read()
        if data is None:
            return None

        if steps is not None and data.get("steps") != list(steps):
            logger.warning("Checkpoint was saved for a different flow, not resuming")
            return None

        try:
            state = WizardState.from_dict(data["state"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed checkpoint: {e}")
            return None

        self.wizard_id = data.get("wizard_id", self.wizard_id)
        self.flow = data.get("flow", self.flow)
        self.started_at = data.get("started_at", self.started_at)
        return state

    def clear(self) -> None:
        """Clear the saved state file."""
        if self.state_file.exists():
            self.state_file.unlink()

    def has_checkpoint(self) -> bool:
        """Check if there's a saved checkpoint."""
        return self.state_file.exists()

    def get_info(self) -> Optional[Dict[str, Any]]:
        """Get summary info about saved checkpoint."""
        data = self._read()
        if data is None:
            return None

        state = data.get("state")
        steps = data.get("steps")
        if not isinstance(state, dict) or not isinstance(steps, list):
            logger.warning("Ignoring malformed checkpoint")
            return None

        active = state.get("active_step_id", "")
        return {
            "wizard_id": data.get("wizard_id", ""),
            "flow": data.get("flow", "standard"),
            "active_step_id": active,
            "current_step": steps.index(active) if active in steps else 0,
            "total_steps": len(steps),
            "completed_step_ids": state.get("completed_step_ids", []),
            "started_at": data.get("started_at", ""),
            "last_updated": data.get("last_updated", ""),
        }
