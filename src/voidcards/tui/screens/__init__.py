"""TUI screens for voidcards."""

from .file_picker import FilePickerScreen
from .review import ReviewScreen

__all__ = ["FilePickerScreen", "ReviewScreen"]
