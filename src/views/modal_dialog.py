from typing import Dict, List, Literal, Optional, Tuple

from typing_extensions import override

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.events import Resize
from textual.screen import ModalScreen
from textual.widgets import Button, Label, OptionList

from utils.messages import QuitRequestedMessage


class DialogModal(ModalScreen[bool]):
    """
    Confirmation box; dismisses with True for the primary button.
    """

    VARIANT_MAP: Dict[
        str, Tuple[Literal["primary", "default", "success", "warning", "error"], ...]
    ] = {
        "default": ("primary", "default"),
        "positive": ("success", "default"),
        "warning": ("warning", "default"),
        "error": ("error", "primary"),
    }

    def __init__(
        self,
        caption: str,
        primary_text: str = "OK",
        secondary_text: str = "",
        tone: Literal["default", "positive", "warning", "error"] = "default",
    ):
        super().__init__()
        self.caption = caption
        self.primary_text = primary_text
        self.secondary_text = secondary_text
        self.tone = tone

    def compose(self) -> ComposeResult:
        primary, secondary = DialogModal.VARIANT_MAP[self.tone]
        with Container(id="div-dialog"):
            yield Label(self.caption, id="caption")
            with Horizontal(id="dialog"):
                if self.secondary_text:
                    yield Button(self.secondary_text, variant=secondary, id="btn-secondary")
                yield Button(self.primary_text, variant=primary, id="btn-primary")

    def on_mount(self):
        # destructive prompts focus the safe choice
        if self.secondary_text and self.tone == "error":
            self.query_one("#btn-secondary").focus()
        else:
            self.query_one("#btn-primary").focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "btn-primary")


class QuitDialogModal(DialogModal):
    def __init__(self):
        super().__init__("Are you sure you want to quit?", "Yes", "No", "error")

    @override
    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-primary":
            self.post_message(QuitRequestedMessage())
            self.dismiss(True)
        else:
            self.dismiss(False)


class StatusPickerModal(ModalScreen[Optional[str]]):
    """
    Pick a new order status; dismisses with None when cancelled.
    """

    def __init__(self, current: str, statuses: List[str]) -> None:
        super().__init__()
        self.current = current
        self.statuses = [s for s in statuses if s != current]

    def compose(self) -> ComposeResult:
        with Container(id="div-dialog"):
            yield Label(f"Current status: {self.current}", id="caption")
            yield OptionList(*self.statuses, id="optlist-status")
            with Horizontal(id="dialog"):
                yield Button("Cancel", id="btn-secondary")

    def on_mount(self) -> None:
        self.query_one("#optlist-status", OptionList).focus()

    def on_option_list_option_selected(self, message: OptionList.OptionSelected):
        self.dismiss(self.statuses[message.option_index])

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(None)


class ResizeScreenPromptModal(ModalScreen[bool]):
    """
    Shown while the terminal is smaller than the layout needs.
    """

    def __init__(self, min_width: int = 60, min_height: int = 20) -> None:
        super().__init__()
        self.min_width = min_width
        self.min_height = min_height

    def compose(self) -> ComposeResult:
        with Container(id="div-resize"):
            yield Label(
                f"Resize to at least {self.min_width}x{self.min_height}", id="prompt"
            )

    def on_resize(self, event: Resize) -> None:
        if not (
            event.size.width < self.min_width or event.size.height < self.min_height
        ):
            self.dismiss()
