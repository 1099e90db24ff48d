"""
Command discovery in Alloy source text.

Lists the `run`/`check` commands of a model in declaration order, which is
the order the solver indexes them by. Comments are blanked out first so that
commented-out commands are ignored while character offsets stay valid.
"""

import re

from alloyshare.models.command import Command, CommandKind

_COMMENT_RE = re.compile(r"//[^\n]*|--[^\n]*|/\*.*?\*/", re.DOTALL)
_COMMAND_RE = re.compile(
    r"(?:\b(?P<label>[A-Za-z_][\w']*)\s*:\s*)?"
    r"\b(?P<kind>run|check)\b"
    r"(?:\s+(?P<target>[A-Za-z_][\w']*))?"
)
_NOT_TARGETS = {"for", "expect", "but"}


def _blank_comments(text: str) -> str:
    """Replace comments with spaces, keeping newlines and offsets."""
    return _COMMENT_RE.sub(lambda m: re.sub(r"[^\n]", " ", m.group(0)), text)


def find_commands(source_text: str) -> list[Command]:
    """
    List commands declared in a model.

    Args:
        source_text: Alloy source text

    Returns:
        Commands in declaration order. Unnamed commands are labelled
        `run$N` / `check$N` with N their 1-based position.
    """
    code = _blank_comments(source_text)
    commands = []
    for match in _COMMAND_RE.finditer(code):
        kind = CommandKind(match.group("kind"))
        target = match.group("target")
        if target in _NOT_TARGETS:
            target = None
        index = len(commands)
        label = match.group("label") or target or f"{kind.value}${index + 1}"
        commands.append(
            Command(index=index, kind=kind, label=label, offset=match.start("kind"))
        )
    return commands


def get_command(source_text: str, command_index: int) -> Command | None:
    """Command at `command_index`, or None if the model declares fewer commands."""
    if command_index < 0:
        return None
    commands = find_commands(source_text)
    if command_index >= len(commands):
        return None
    return commands[command_index]
