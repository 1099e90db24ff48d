"""
Instance Cache - Client-side cache of solver instances for one execution.

Lets the user step back and forth through already computed instances without
calling the solver again, and signals exactly once per unseen position when
a new batch must be fetched.

States:
- EMPTY: nothing appended yet
- LOADED: instances cached, no fetch outstanding
- EXHAUSTED_PENDING: cursor on the last known instance, fetch requested
- TERMINAL: solver confirmed there are no further instances
"""

from alloyshare.models.instance import Instance
from alloyshare.models.navigation import CacheState, NavigationResult, NavOutcome
from alloyshare.utils.logger import get_logger

logger = get_logger(__name__)


class InstanceCache:
    """
    Ordered satisfiable instances plus a cursor.

    The unsatisfiable marker that ends an enumeration is never stored; it only
    flips the cache to TERMINAL. Invariant: 0 <= cursor < max_known whenever
    max_known > 0.
    """

    def __init__(self):
        self._instances: list[Instance] = []
        self._cursor = 0
        self._terminal = False
        self._fetch_pending = False

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def max_known(self) -> int:
        return len(self._instances)

    @property
    def terminal(self) -> bool:
        return self._terminal

    @property
    def fetch_pending(self) -> bool:
        return self._fetch_pending

    @property
    def current(self) -> Instance | None:
        """Instance under the cursor, or None before the first append."""
        if not self._instances:
            return None
        return self._instances[self._cursor]

    @property
    def state(self) -> CacheState:
        if self._terminal:
            return CacheState.TERMINAL
        if not self._instances:
            return CacheState.EMPTY
        if self._fetch_pending:
            return CacheState.EXHAUSTED_PENDING
        return CacheState.LOADED

    def append(self, batch: list[Instance]) -> int:
        """
        Add a batch returned by the solver.

        Args:
            batch: Instances in solver order; an unsat marker ends the batch

        Returns:
            Number of satisfiable instances stored
        """
        self._fetch_pending = False

        if self._terminal:
            logger.warning("Ignoring batch appended to a terminal cache")
            return 0

        stored = 0
        for instance in batch:
            if instance.unsat:
                self._terminal = True
                break
            self._instances.append(instance)
            stored += 1

        logger.debug(
            f"Appended {stored} instance(s), max_known={self.max_known}, state={self.state.value}"
        )
        return stored

    def advance(self) -> NavigationResult:
        """
        Move to the next instance, or report why the cursor cannot move.

        Returns:
            MOVED with the new current instance, NEEDS_FETCH the first time the
            last known instance is passed, FETCH_PENDING while that fetch is
            outstanding, NO_MORE once terminal, EMPTY before any append
        """
        if not self._instances:
            outcome = NavOutcome.NO_MORE if self._terminal else NavOutcome.EMPTY
            return NavigationResult(outcome=outcome, cursor=self._cursor)

        if self._cursor < self.max_known - 1:
            self._cursor += 1
            return NavigationResult(
                outcome=NavOutcome.MOVED, cursor=self._cursor, instance=self.current
            )

        if self._terminal:
            return NavigationResult(outcome=NavOutcome.NO_MORE, cursor=self._cursor)

        if self._fetch_pending:
            return NavigationResult(outcome=NavOutcome.FETCH_PENDING, cursor=self._cursor)

        self._fetch_pending = True
        return NavigationResult(outcome=NavOutcome.NEEDS_FETCH, cursor=self._cursor)

    def retreat(self) -> NavigationResult:
        """Move to the previous instance. Always served from the cache."""
        if self._cursor > 0:
            self._cursor -= 1
            return NavigationResult(
                outcome=NavOutcome.MOVED, cursor=self._cursor, instance=self.current
            )
        return NavigationResult(outcome=NavOutcome.NO_PREVIOUS, cursor=self._cursor)

    def abandon_fetch(self) -> None:
        """Forget an outstanding fetch that failed so a later advance may request again."""
        self._fetch_pending = False
