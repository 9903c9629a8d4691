"""Concrete edit handler implementations."""

from pagecraft.edits.base import EditContext, EditHandler
from pagecraft.edits.commands import Crop, Reset, Rotate, Scale, SetRotation, Translate
from pagecraft.edits.registry import CommandRegistry
from pagecraft.geometry.crop import clamp_box
from pagecraft.store import MetadataStore


@CommandRegistry.register
class CropHandler(EditHandler):
    """Handler for crop commands.

    Malformed boxes are clamped into the unit square rather than rejected.
    """

    name = "crop"
    command_type = Crop

    def apply(
        self,
        store: MetadataStore,
        page_number: int,
        command: Crop,
        context: EditContext,
    ) -> None:
        store.set_crop(page_number, clamp_box(command.box, context.min_crop_fraction))

    def describe(self, command: Crop) -> str:
        box = command.box
        return f"Crop to ({box.x:.3f}, {box.y:.3f}) {box.width:.3f} x {box.height:.3f}"


@CommandRegistry.register
class RotateHandler(EditHandler):
    """Handler for relative rotation."""

    name = "rotate"
    command_type = Rotate

    def apply(
        self,
        store: MetadataStore,
        page_number: int,
        command: Rotate,
        context: EditContext,
    ) -> None:
        store.add_rotation(page_number, command.delta)

    def describe(self, command: Rotate) -> str:
        return f"Rotate by {command.delta:+g}"


@CommandRegistry.register
class SetRotationHandler(EditHandler):
    """Handler for absolute rotation."""

    name = "set_rotation"
    command_type = SetRotation

    def apply(
        self,
        store: MetadataStore,
        page_number: int,
        command: SetRotation,
        context: EditContext,
    ) -> None:
        store.set_rotation(page_number, command.value)

    def describe(self, command: SetRotation) -> str:
        return f"Set rotation to {command.value}"


@CommandRegistry.register
class ScaleHandler(EditHandler):
    """Handler for scale commands. The store clamps the percentage."""

    name = "scale"
    command_type = Scale

    def apply(
        self,
        store: MetadataStore,
        page_number: int,
        command: Scale,
        context: EditContext,
    ) -> None:
        store.set_scale(page_number, command.percent)

    def describe(self, command: Scale) -> str:
        return f"Scale to {command.percent:g}%"


@CommandRegistry.register
class TranslateHandler(EditHandler):
    """Handler for translate commands (relative to the current offset)."""

    name = "translate"
    command_type = Translate

    def apply(
        self,
        store: MetadataStore,
        page_number: int,
        command: Translate,
        context: EditContext,
    ) -> None:
        store.add_offset(page_number, command.dx, command.dy)

    def describe(self, command: Translate) -> str:
        return f"Translate by ({command.dx:g}, {command.dy:g})"


@CommandRegistry.register
class ResetHandler(EditHandler):
    """Handler for reset commands."""

    name = "reset"
    command_type = Reset

    def apply(
        self,
        store: MetadataStore,
        page_number: int,
        command: Reset,
        context: EditContext,
    ) -> None:
        store.reset_page(page_number)

    def describe(self, command: Reset) -> str:
        return "Reset"
