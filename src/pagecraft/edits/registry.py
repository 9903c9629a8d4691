"""Command registry for edit dispatch."""

from typing import TYPE_CHECKING

from pagecraft.edits.commands import COMMAND_TYPES
from pagecraft.exceptions import CommandError

if TYPE_CHECKING:
    from pagecraft.edits.base import EditHandler


class CommandRegistry:
    """Registry mapping each command class to its handler.

    Usage:
        # Register a handler (typically via decorator)
        @CommandRegistry.register
        class RotateHandler(EditHandler):
            name = "rotate"
            command_type = Rotate
            ...

        # Get handler for a command
        handler = CommandRegistry.get_instance(Rotate)

        # Check every command kind is covered
        assert not CommandRegistry.missing()
    """

    _handlers: dict[type, type["EditHandler"]] = {}

    @classmethod
    def register(cls, handler_class: type["EditHandler"]) -> type["EditHandler"]:
        """Register a handler class under its ``command_type``.

        Args:
            handler_class: EditHandler subclass to register

        Returns:
            The handler class (for decorator use)

        Raises:
            CommandError: If the handler does not declare a command class
        """
        command_type = getattr(handler_class, "command_type", None)
        if not isinstance(command_type, type):
            raise CommandError(
                f"Handler '{handler_class.__name__}' does not declare a command_type",
                context={"handler": handler_class.__name__},
            )
        cls._handlers[command_type] = handler_class
        return handler_class

    @classmethod
    def get(cls, command_type: type) -> type["EditHandler"]:
        """Get the handler class for a command class.

        Raises:
            CommandError: If no handler is registered for the command class
        """
        if command_type not in cls._handlers:
            available = ", ".join(cls.all_names())
            raise CommandError(
                f"No handler for command '{command_type.__name__}'. Available: {available}",
                context={"command": command_type.__name__},
            )
        return cls._handlers[command_type]

    @classmethod
    def get_instance(cls, command_type: type) -> "EditHandler":
        return cls.get(command_type)()

    @classmethod
    def get_by_name(cls, name: str) -> type["EditHandler"]:
        """Get a handler class by its short name (e.g. 'crop').

        Raises:
            CommandError: If no handler has that name
        """
        for handler_class in cls._handlers.values():
            if handler_class.name == name:
                return handler_class
        available = ", ".join(cls.all_names())
        raise CommandError(
            f"Unknown edit type: '{name}'. Available: {available}",
            context={"edit_type": name},
        )

    @classmethod
    def all_names(cls) -> list[str]:
        """Sorted short names of all registered handlers."""
        return sorted(h.name for h in cls._handlers.values())

    @classmethod
    def is_registered(cls, command_type: type) -> bool:
        return command_type in cls._handlers

    @classmethod
    def missing(cls) -> list[type]:
        """Command classes that have no registered handler."""
        return [t for t in COMMAND_TYPES if t not in cls._handlers]

    @classmethod
    def clear(cls) -> None:
        """Clear all registered handlers (for testing)."""
        cls._handlers.clear()
