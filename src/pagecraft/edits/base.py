"""Base classes for edit command handlers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pagecraft.constants import MIN_CROP_FRACTION

if TYPE_CHECKING:
    from pagecraft.store import MetadataStore


@dataclass
class EditContext:
    """Settings shared by every handler.

    Kept separate from the commands so that a command value means the same
    thing no matter which document it is applied to.
    """

    # Smallest crop edge accepted by Crop commands
    min_crop_fraction: float = MIN_CROP_FRACTION


class EditHandler(ABC):
    """Applies one kind of edit command to the metadata store.

    Handlers are stateless: everything they need arrives through the store,
    the page number, the command and the context.
    """

    # Short name used in logs and session files (e.g. "crop", "rotate")
    name: str = ""

    # The command class this handler accepts
    command_type: type

    @abstractmethod
    def apply(
        self,
        store: "MetadataStore",
        page_number: int,
        command: Any,
        context: EditContext,
    ) -> None:
        """Apply the command to one page of the store.

        Unknown pages must be left alone; the store already ignores them.
        """
        pass

    @abstractmethod
    def describe(self, command: Any) -> str:
        """Return a one-line description for logs and summaries."""
        pass
