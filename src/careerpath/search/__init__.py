"""Player search for the guess input."""

from .autocomplete import DEFAULT_DEBOUNCE_SECONDS, MIN_QUERY_LENGTH, AutocompletePipeline

__all__ = ["AutocompletePipeline", "DEFAULT_DEBOUNCE_SECONDS", "MIN_QUERY_LENGTH"]
