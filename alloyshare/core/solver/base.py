"""
Abstract base class for solver clients.
The solver runs Alloy commands remotely and returns batches of instances.
"""

from abc import ABC, abstractmethod

from alloyshare.models.instance import SolverRequest, SolverResponse


class SolverClient(ABC):
    """
    Abstract base for solver RPC clients.

    Exactly one response per request. Model errors arrive inside a successful
    response (`alloy_error`); only transport failures raise.
    """

    @abstractmethod
    async def get_instances(self, request: SolverRequest) -> SolverResponse:
        """
        Execute a command from scratch.

        Args:
            request: Source text, command index, privacy flag and last model id

        Returns:
            Normalized solver response

        Raises:
            TransportError: If the solver cannot be reached or replies garbage
        """
        pass

    @abstractmethod
    async def next_instances(self, request: SolverRequest) -> SolverResponse:
        """
        Fetch the next batch of instances of the command last executed for
        `request.last_model_id`.

        Args:
            request: Same derivation id as the execution being iterated

        Returns:
            Normalized solver response

        Raises:
            TransportError: If the solver cannot be reached or replies garbage
        """
        pass

    @abstractmethod
    async def close(self):
        """
        Close any open connections.
        """
