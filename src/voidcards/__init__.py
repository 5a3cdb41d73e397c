"""voidcards - timed terminal flashcard reviews with spaced repetition."""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
