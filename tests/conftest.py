"""Shared fixtures for AlloyShare tests.

Fixtures use function scope to avoid event loop issues.
SQLite stores live under tmp_path; UI collaborators and the solver are
in-memory fakes that record every call.
"""

import asyncio
from collections.abc import AsyncGenerator
from typing import Any

import pytest

from alloyshare.core.display.base import FeedbackSink, Renderer, TextSurface
from alloyshare.core.model_store.sqlite_store import SQLiteModelStore
from alloyshare.core.solver.base import SolverClient
from alloyshare.models.instance import Instance, SolverRequest, SolverResponse
from alloyshare.models.navigation import Feedback

# Sample models

RUN_MODEL = """sig Person {}
pred show {}
run show for 3
"""

CHECK_MODEL = """sig Person { friend: set Person }
assert Symmetric { all p, q: Person | q in p.friend implies p in q.friend }
check Symmetric for 3
"""

SECRET_MODEL = """sig A {}
//START_SECRET
pred hidden { some A }
//END_SECRET
run {} for 3
"""


def sat(label: str = "state") -> dict[str, Any]:
    """Wire form of a satisfiable instance."""
    return {"unsat": False, "check": False, "instance": [{"label": label}]}


def unsat(check: bool = False) -> dict[str, Any]:
    """Wire form of the unsatisfiable marker."""
    return {"unsat": True, "check": check}


def response(*instances: dict[str, Any], new_model_id: str | None = "model_solved") -> SolverResponse:
    """Solver reply with a batch of wire instances."""
    return SolverResponse.model_validate({"newModelId": new_model_id, "instances": list(instances)})


# Fakes


class FakeSolver(SolverClient):
    """
    Scripted solver.

    Replies are popped in order from `get_replies` / `next_replies`; an
    exception in the script is raised instead of returned. When `gate` is
    set, requests wait on it before replying.
    """

    def __init__(self):
        self.get_replies: list[SolverResponse | Exception] = []
        self.next_replies: list[SolverResponse | Exception] = []
        self.get_requests: list[SolverRequest] = []
        self.next_requests: list[SolverRequest] = []
        self.gate: asyncio.Event | None = None
        self.closed = False

    async def get_instances(self, request: SolverRequest) -> SolverResponse:
        self.get_requests.append(request)
        return await self._reply(self.get_replies)

    async def next_instances(self, request: SolverRequest) -> SolverResponse:
        self.next_requests.append(request)
        return await self._reply(self.next_replies)

    async def close(self):
        self.closed = True

    async def _reply(self, script: list[SolverResponse | Exception]) -> SolverResponse:
        if self.gate is not None:
            await self.gate.wait()
        reply = script.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeRenderer(Renderer):
    """Records the lifecycle calls of the visualizer."""

    def __init__(self):
        self.calls: list[str] = []
        self.shown: list[Instance] = []

    def reset_positions(self) -> None:
        self.calls.append("reset_positions")

    def show_instance(self, instance: Instance) -> None:
        self.calls.append("show_instance")
        self.shown.append(instance)

    def new_instance_setup(self) -> None:
        self.calls.append("new_instance_setup")


class FakeTextSurface(TextSurface):
    """Editor holding a fixed text and recording highlights."""

    def __init__(self, text: str = ""):
        self.text = text
        self.errors: list[tuple[int, int, int, int]] = []
        self.warnings: list[tuple[int, int, int, int]] = []
        self.clears = 0

    def get_value(self) -> str:
        return self.text

    def mark_error(self, line: int, column: int, line2: int, column2: int) -> None:
        self.errors.append((line, column, line2, column2))

    def mark_warning(self, line: int, column: int, line2: int, column2: int) -> None:
        self.warnings.append((line, column, line2, column2))

    def clear_marks(self) -> None:
        self.clears += 1
        self.errors.clear()
        self.warnings.clear()


class FakeFeedbackSink(FeedbackSink):
    """Keeps every published feedback."""

    def __init__(self):
        self.published: list[Feedback] = []

    def publish(self, feedback: Feedback) -> None:
        self.published.append(feedback)

    @property
    def last(self) -> Feedback | None:
        return self.published[-1] if self.published else None


# Fixtures


@pytest.fixture
def fake_solver() -> FakeSolver:
    return FakeSolver()


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def fake_text_surface() -> FakeTextSurface:
    return FakeTextSurface(RUN_MODEL)


@pytest.fixture
def fake_feedback() -> FakeFeedbackSink:
    return FakeFeedbackSink()


@pytest.fixture
async def sqlite_store(tmp_path) -> AsyncGenerator[SQLiteModelStore, None]:
    """Initialized SQLite store in a temporary directory."""
    store = SQLiteModelStore(db_path=str(tmp_path / "test_alloyshare.db"))
    await store.initialize()
    yield store
    await store.close()
