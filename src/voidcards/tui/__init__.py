"""Textual user interface for voidcards."""

from .app import AppState, VoidcardsApp, run_file_picker, run_review

__all__ = ["AppState", "VoidcardsApp", "run_file_picker", "run_review"]
