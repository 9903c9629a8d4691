"""Edit orchestrator package for pagecraft.

Commands are immutable values dispatched through a registry of handlers:

    from pagecraft.edits import EditOrchestrator, Rotate

    orchestrator = EditOrchestrator(store)
    orchestrator.apply_edit(1, Rotate(90))
"""

from pagecraft.edits.base import EditContext, EditHandler
from pagecraft.edits.commands import (
    COMMAND_TYPES,
    Crop,
    EditCommand,
    Reset,
    Rotate,
    Scale,
    SetRotation,
    Translate,
)
from pagecraft.edits.orchestrator import EditOrchestrator
from pagecraft.edits.registry import CommandRegistry

__all__ = [
    # Commands
    "EditCommand",
    "COMMAND_TYPES",
    "Crop",
    "Rotate",
    "SetRotation",
    "Scale",
    "Translate",
    "Reset",
    # Dispatch
    "CommandRegistry",
    "EditContext",
    "EditHandler",
    "EditOrchestrator",
]
