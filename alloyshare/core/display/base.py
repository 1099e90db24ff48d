"""
Interfaces of the UI collaborators driven by the execution controller.

The controller never renders anything itself: it pushes instances to a
Renderer, source ranges to a TextSurface and log lines to a FeedbackSink.
"""

from abc import ABC, abstractmethod

from alloyshare.models.instance import Instance
from alloyshare.models.navigation import Feedback


class Renderer(ABC):
    """
    Graphical instance visualizer.

    Lifecycle per displayed instance:
    reset_positions() -> show_instance(instance) -> new_instance_setup()
    """

    @abstractmethod
    def reset_positions(self) -> None:
        """Clear layout state left by the previous instance."""
        pass

    @abstractmethod
    def show_instance(self, instance: Instance) -> None:
        """
        Display one instance.

        Args:
            instance: Satisfiable instance payload
        """
        pass

    @abstractmethod
    def new_instance_setup(self) -> None:
        """Finish setting up the newly displayed instance."""
        pass


class TextSurface(ABC):
    """Source editor. Ranges are 0-based line/column pairs."""

    @abstractmethod
    def get_value(self) -> str:
        """Current editor text."""
        pass

    @abstractmethod
    def mark_error(self, line: int, column: int, line2: int, column2: int) -> None:
        """Highlight an error range."""
        pass

    @abstractmethod
    def mark_warning(self, line: int, column: int, line2: int, column2: int) -> None:
        """Highlight a warning range."""
        pass

    @abstractmethod
    def clear_marks(self) -> None:
        """Remove error and warning highlights."""
        pass


class FeedbackSink(ABC):
    """Receiver of user-facing log lines."""

    @abstractmethod
    def publish(self, feedback: Feedback) -> None:
        """
        Show feedback, replacing what was shown before.

        Args:
            feedback: Messages with their styling classes
        """
        pass
