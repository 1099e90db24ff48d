"""
Execution Controller - Runs commands against the solver and drives navigation.

Handles:
- Command execution with a fresh session per run
- Classification of solver replies (model error, warning, sat, unsat)
- Next/previous navigation through the instance cache
- Dropping of replies that belong to an outdated session

The controller never touches persistence: the solver service records the
executed model and returns its id, which is kept for the next derivation.
"""

from alloyshare.core.commands import get_command
from alloyshare.core.display.base import FeedbackSink, Renderer, TextSurface
from alloyshare.core.solver.base import SolverClient
from alloyshare.models.instance import Instance, SolverRequest, SolverResponse
from alloyshare.models.navigation import (
    Feedback,
    LogClass,
    NavigationResult,
    NavOutcome,
)
from alloyshare.services.instance_cache import InstanceCache
from alloyshare.services.session import ExecutionSession
from alloyshare.utils.exceptions import (
    AlloyShareError,
    NoCommandSelected,
    SessionBusyError,
    SolverModelError,
    TransportError,
)
from alloyshare.utils.logger import get_logger

logger = get_logger(__name__)

NO_COMMAND_MESSAGE = "There are no commands to execute"
NO_MORE_INSTANCES_MESSAGE = "No more satisfying instances!"
NO_PREVIOUS_INSTANCE_MESSAGE = "No previous instance."

# (is_check, satisfiable) -> (message template, styling class)
RESULT_MESSAGES: dict[tuple[bool, bool], tuple[str, LogClass]] = {
    (False, True): ("Instance found. {cmd} is consistent.", LogClass.COMPLETE),
    (False, False): ("No instance found. {cmd} may be inconsistent.", LogClass.WRONG),
    (True, True): ("Counter-example found. {cmd} is invalid.", LogClass.WRONG),
    (True, False): ("No counter-examples. {cmd} may be valid.", LogClass.COMPLETE),
}


def result_message(is_check: bool, satisfiable: bool, command_label: str) -> tuple[str, LogClass]:
    """Feedback line announcing the outcome of a command."""
    template, log_class = RESULT_MESSAGES[(is_check, satisfiable)]
    return template.format(cmd=command_label), log_class


class ExecutionController:
    """
    Owns the current execution session and its instance cache.

    At most one solver request is outstanding per session. Every request
    captures the session epoch; a reply whose epoch is no longer current is
    discarded without touching the display.
    """

    def __init__(
        self,
        solver: SolverClient,
        renderer: Renderer,
        text_surface: TextSurface,
        feedback_sink: FeedbackSink,
        is_private: bool = False,
    ):
        """
        Initialize execution controller.

        Args:
            solver: Solver RPC client
            renderer: Instance visualizer
            text_surface: Source editor, for error/warning highlights
            feedback_sink: Receiver of user-facing log lines
            is_private: Editor was opened from a private link
        """
        self.solver = solver
        self.renderer = renderer
        self.text_surface = text_surface
        self.feedback_sink = feedback_sink
        self.is_private = is_private

        self._epoch = 0
        self.session = ExecutionSession(epoch=self._epoch)
        # Failure of the latest reply, cleared on every run
        self.last_error: AlloyShareError | None = None

    @property
    def cache(self) -> InstanceCache:
        return self.session.cache

    @property
    def last_model_id(self) -> str | None:
        return self.session.last_model_id

    # ═══════════════════════════════════════════════════════════
    # EXECUTION
    # ═══════════════════════════════════════════════════════════

    async def run(
        self,
        source_text: str,
        command_index: int,
        command_label: str | None = None,
        is_check: bool | None = None,
    ) -> Feedback | None:
        """
        Execute a command of the model from scratch.

        Args:
            source_text: Current editor text
            command_index: Selected command, negative if none
            command_label: Name shown in feedback (derived from the text if omitted)
            is_check: Whether the command is a `check` (derived from the text if omitted)

        Returns:
            Feedback published for the reply, or None if the reply was stale

        Raises:
            NoCommandSelected: If no command is selected
            SessionBusyError: If a request is already outstanding
        """
        if command_index < 0:
            self.feedback_sink.publish(Feedback.error(NO_COMMAND_MESSAGE))
            raise NoCommandSelected(NO_COMMAND_MESSAGE)

        if self.session.busy:
            raise SessionBusyError(
                "A solver request is already running",
                {"epoch": self.session.epoch, "command_index": self.session.command_index},
            )

        command = get_command(source_text, command_index)
        if command_label is None:
            command_label = command.label if command else f"command {command_index + 1}"
        if is_check is None:
            is_check = command.is_check if command else False

        self.last_error = None
        self._new_session(
            command_index=command_index,
            command_label=command_label,
            is_check=is_check,
            busy=True,
        )
        self.text_surface.clear_marks()

        epoch = self.session.epoch
        request = SolverRequest(
            source_text=source_text,
            command_index=command_index,
            is_private=self.is_private,
            last_model_id=self.session.last_model_id,
        )

        logger.bind(epoch=epoch, last_model_id=request.last_model_id).info(
            f"Executing {command_label} (command {command_index})"
        )

        try:
            response = await self.solver.get_instances(request)
        except TransportError as e:
            feedback, _ = self._complete(e, None, epoch, fetch=False)
            return feedback
        except Exception:
            self._release(epoch)
            raise

        feedback, _ = self._complete(None, response, epoch, fetch=False)
        return feedback

    def on_result(
        self,
        error: AlloyShareError | None,
        response: SolverResponse | None,
        epoch: int | None = None,
        fetch: bool = False,
    ) -> Feedback | None:
        """
        Apply a solver reply to the session.

        Args:
            error: Transport failure, if the request failed
            response: Solver reply, if it succeeded
            epoch: Session epoch captured when the request was sent
                (default: current session)
            fetch: Reply to a next-instances request rather than an execution

        Returns:
            Feedback published, or None if the reply was stale or changed nothing
        """
        feedback, _ = self._complete(error, response, epoch, fetch)
        return feedback

    # ═══════════════════════════════════════════════════════════
    # NAVIGATION
    # ═══════════════════════════════════════════════════════════

    async def next_instance(self) -> NavigationResult:
        """
        Show the next instance, fetching a new batch only when the cache is exhausted.

        Returns:
            Navigation outcome
        """
        nav = self.cache.advance()
        logger.debug(f"Next instance: {nav.outcome.value} at {nav.cursor}")

        if nav.outcome == NavOutcome.MOVED:
            self._render(nav.instance)
            return nav

        if nav.outcome == NavOutcome.NO_MORE:
            self.feedback_sink.publish(Feedback.info(NO_MORE_INSTANCES_MESSAGE))
            return nav

        if nav.outcome != NavOutcome.NEEDS_FETCH:
            return nav

        self.session.busy = True
        epoch = self.session.epoch
        request = SolverRequest(
            source_text=self.text_surface.get_value(),
            command_index=self.session.command_index,
            is_private=self.is_private,
            last_model_id=self.session.last_model_id,
        )

        try:
            response = await self.solver.next_instances(request)
        except TransportError as e:
            self._complete(e, None, epoch, fetch=True)
            return nav
        except Exception:
            self._release(epoch)
            raise

        _, fetched = self._complete(None, response, epoch, fetch=True)
        return fetched or nav

    def prev_instance(self) -> NavigationResult:
        """
        Show the previous instance. Never calls the solver.

        Blocked while a fetch is outstanding: the fetched batch is shown
        after the instance the fetch was requested from.

        Returns:
            Navigation outcome
        """
        if self.cache.fetch_pending:
            return NavigationResult(outcome=NavOutcome.FETCH_PENDING, cursor=self.cache.cursor)

        nav = self.cache.retreat()

        if nav.outcome == NavOutcome.MOVED:
            self._render(nav.instance)
        elif self.cache.max_known > 0:
            self.feedback_sink.publish(Feedback.info(NO_PREVIOUS_INSTANCE_MESSAGE))

        return nav

    # ═══════════════════════════════════════════════════════════
    # SESSION LIFECYCLE
    # ═══════════════════════════════════════════════════════════

    def discard(self) -> None:
        """Drop the session after the document was edited."""
        logger.debug(f"Discarding session {self.session.epoch}")
        self._new_session()

    def cancel(self) -> None:
        """
        Give up on the outstanding request.

        Cached instances stay browsable; the late reply is dropped.
        """
        if not self.session.busy:
            return
        self._epoch += 1
        logger.bind(epoch=self.session.epoch).info("Cancelled outstanding request")
        self.session.epoch = self._epoch
        self.session.busy = False
        self.session.cache.abandon_fetch()

    # ═══════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════

    def _new_session(
        self,
        command_index: int = -1,
        command_label: str = "",
        is_check: bool = False,
        busy: bool = False,
    ) -> None:
        """Replace the session, keeping the derivation chain."""
        self._epoch += 1
        self.session = ExecutionSession(
            epoch=self._epoch,
            command_index=command_index,
            command_label=command_label,
            is_check=is_check,
            last_model_id=self.session.last_model_id,
            busy=busy,
        )

    def _release(self, epoch: int) -> None:
        """Mark the session idle after an unexpected failure of its request."""
        if epoch == self.session.epoch:
            self.session.busy = False
            self.session.cache.abandon_fetch()

    def _render(self, instance: Instance) -> None:
        self.renderer.reset_positions()
        self.renderer.show_instance(instance)
        self.renderer.new_instance_setup()

    def _complete(
        self,
        error: AlloyShareError | None,
        response: SolverResponse | None,
        epoch: int | None,
        fetch: bool,
    ) -> tuple[Feedback | None, NavigationResult | None]:
        """Apply a reply; returns the published feedback and, for fetches, the navigation step."""
        if epoch is not None and epoch != self.session.epoch:
            logger.bind(epoch=epoch, current_epoch=self.session.epoch).warning(
                "Dropping stale solver reply"
            )
            return None, None

        self.session.busy = False

        if error is None and (response is None or not response.instances):
            error = TransportError("Solver returned no instances")

        if error is not None:
            self.cache.abandon_fetch()
            logger.bind(epoch=self.session.epoch, error_type=type(error).__name__).error(
                f"Solver request failed: {error}"
            )
            self.last_error = error
            feedback = Feedback.error(str(error))
            self.feedback_sink.publish(feedback)
            return feedback, None

        if response.new_model_id is not None:
            self.session.last_model_id = response.new_model_id

        first = response.instances[0]

        if first.alloy_error is not None:
            self.cache.abandon_fetch()
            self.last_error = SolverModelError(
                "There was a problem running the model!\n"
                f"{first.alloy_error.describe()}\nPlease validate your model.",
                error=first.alloy_error,
                context={"epoch": self.session.epoch},
            )
            marks = first.alloy_error.zero_based_range()
            if marks:
                self.text_surface.mark_error(*marks)
            logger.info(f"Solver rejected model: {first.alloy_error.msg}")
            feedback = Feedback.error(self.last_error.message)
            self.feedback_sink.publish(feedback)
            return feedback, None

        feedback = Feedback()
        if first.warning_error is not None:
            feedback.add(
                "There is a possible problem with the model!\n"
                f"{first.warning_error.describe()}\n",
                LogClass.WARNING,
            )
            marks = first.warning_error.zero_based_range()
            if marks:
                self.text_surface.mark_warning(*marks)

        if fetch:
            self.cache.append(response.instances)
            nav = self.cache.advance()
            if nav.outcome == NavOutcome.MOVED:
                self._render(nav.instance)
            elif nav.outcome == NavOutcome.NO_MORE:
                feedback.add(NO_MORE_INSTANCES_MESSAGE, LogClass.INFO)

            if feedback.messages:
                self.feedback_sink.publish(feedback)
                return feedback, nav
            return None, nav

        is_check = self.session.is_check or first.check
        message, log_class = result_message(
            is_check, not first.unsat, self.session.command_label
        )
        feedback.add(message, log_class)

        self.cache.append(response.instances)
        if self.cache.current is not None:
            self._render(self.cache.current)

        logger.bind(
            epoch=self.session.epoch,
            model_id=self.session.last_model_id or "-",
            max_known=self.cache.max_known,
            state=self.cache.state.value,
        ).debug(message)
        self.feedback_sink.publish(feedback)
        return feedback, None
