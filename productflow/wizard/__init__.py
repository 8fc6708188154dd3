"""
ProductFlow Wizard

Step-by-step entry of a product into the catalog: brand and product line,
variants, options, ingredients and retail sources.
"""

from .controller import StepContext, WizardController, WizardState
from .checkpoint import Checkpoint, StepResult
from .navigator import NavigationAction, Navigator
from .runner import WizardRunner

__all__ = [
    "WizardController",
    "WizardState",
    "StepContext",
    "Checkpoint",
    "StepResult",
    "NavigationAction",
    "Navigator",
    "WizardRunner",
]
