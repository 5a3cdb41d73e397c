"""File selection state for the file picker.

Entry 0 is a pseudo-entry that selects or clears every file at once; the
remaining entries are the source files in the order given.
"""

from __future__ import annotations

from typing import Iterable

ALL_FILES_LABEL = "All Files"


class FileSelection:
    """Checkbox state over a list of source files."""

    def __init__(self, files: Iterable[str]) -> None:
        self.files: list[str] = list(dict.fromkeys(files))
        self._selected: set[str] = set()

    @property
    def entries(self) -> list[str]:
        """Labels in display order, starting with the all-files entry."""
        return [ALL_FILES_LABEL, *self.files]

    def __len__(self) -> int:
        return len(self.files) + 1

    @property
    def all_selected(self) -> bool:
        return bool(self.files) and len(self._selected) == len(self.files)

    def is_selected(self, index: int) -> bool:
        if index == 0:
            return self.all_selected
        if 0 < index <= len(self.files):
            return self.files[index - 1] in self._selected
        return False

    def toggle(self, index: int) -> None:
        """Toggle an entry; out-of-range indices are ignored."""
        if index == 0:
            if self.all_selected:
                self._selected.clear()
            else:
                self._selected = set(self.files)
        elif 0 < index <= len(self.files):
            name = self.files[index - 1]
            if name in self._selected:
                self._selected.remove(name)
            else:
                self._selected.add(name)

    @property
    def selected_files(self) -> list[str]:
        """Selected files in their original order."""
        return [name for name in self.files if name in self._selected]
