"""
Suggestion parser port interface.
"""

from abc import ABC, abstractmethod

from mcedit.entities.edit import EditInstruction


class SuggestionParserPort(ABC):
    """Turns free text into a structured edit instruction."""

    @abstractmethod
    def parse(self, text: str) -> EditInstruction:
        """
        Parse a suggestion.

        Args:
            text: Suggestion as JSON or natural language

        Returns:
            The edit instruction described by the text

        Raises:
            SuggestionParseError: If the text cannot be interpreted
        """
        pass
