"""Interface for presenting results to the user.

Defines the contract for displaying information, errors, warnings, tables
and raw documents, allowing different UI implementations.
"""

import abc
from typing import Any, Dict, List, Optional, Sequence


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: str, **kwargs: Any) -> None:
        """Displays standard output to the user.

        Args:
            output: The text to display.
            **kwargs: Additional arguments for formatting (e.g., style).
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

    @abc.abstractmethod
    def display_table(
        self,
        rows: List[Dict[str, Any]],
        columns: Sequence[str],
        title: Optional[str] = None,
    ) -> None:
        """Displays a list of records as a table.

        Args:
            rows: Records to display, one per row.
            columns: Keys of each record to show, in order.
            title: Optional table caption.
        """
        pass

    @abc.abstractmethod
    def display_json(self, data: Any) -> None:
        """Displays a raw document (e.g., a service response) as JSON."""
        pass
