"""Interface for presenting cache contents to the user.

Defines the contract for displaying values, tag listings, errors and
informational messages, allowing different UI implementations.
"""

import abc
from typing import Any, Mapping


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: Any, **kwargs: Any) -> None:
        """Displays a cached value to the user.

        Args:
            output: The value to display.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_mapping(self, title: str, data: Mapping[str, Any]) -> None:
        """Displays key/value pairs, e.g. the entries of a tag.

        Args:
            title: Heading for the listing.
            data: The pairs to display.
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass
