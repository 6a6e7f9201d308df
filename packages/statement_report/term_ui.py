"""Terminal prompts (prompt_toolkit-based) for reviewing column roles.

These helpers stay separate from the classifier so they can be tested in
isolation with a pipe input; they only return the user's choice and never
touch classifier state themselves.
"""

from __future__ import annotations

from collections.abc import Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.validation import ValidationError, Validator

from .models import ColumnRole, RawColumn, RoleKind

SKIP_CHOICE = "skip"

ROLE_CHOICES: dict[str, RoleKind | None] = {
    RoleKind.PAYMENT_RECIPIENT.value: RoleKind.PAYMENT_RECIPIENT,
    RoleKind.PAYMENT_DATE.value: RoleKind.PAYMENT_DATE,
    RoleKind.PAYMENT_AMOUNT.value: RoleKind.PAYMENT_AMOUNT,
    RoleKind.COMMON_INFO.value: RoleKind.COMMON_INFO,
    SKIP_CHOICE: None,
}


def _session(session: PromptSession | None) -> PromptSession:
    if session is None:
        return PromptSession()
    return PromptSession(
        input=getattr(session, "input", None),
        output=getattr(session, "output", None),
    )


def describe_column(column: RawColumn, *, samples: int = 3) -> str:
    """One-line summary: display name followed by a few sample cells."""

    shown = ", ".join(repr(c) for c in column.cells[:samples])
    more = " ..." if len(column.cells) > samples else ""
    return f"[{column.index}] {column.display_name}: {shown}{more}"


class _ChoiceValidator(Validator):
    def __init__(self, allowed: Sequence[str]) -> None:
        self._allowed = {a.lower() for a in allowed}

    def validate(self, document) -> None:
        if document.text.strip().lower() not in self._allowed:
            raise ValidationError(
                message="Choose one of: " + ", ".join(sorted(self._allowed))
            )


def select_column_role(
    column: RawColumn,
    *,
    default: ColumnRole | None = None,
    session: PromptSession | None = None,
    message: str | None = None,
) -> ColumnRole | None:
    """Ask for one column's role; ``None`` means leave the column unset.

    Choosing ``info`` opens a second prompt for the label, pre-filled with the
    default label or the column's display name.
    """

    words = list(ROLE_CHOICES)
    default_word = default.kind.value if default is not None else SKIP_CHOICE
    sess = _session(session)

    answer = sess.prompt(
        message or f"{describe_column(column)}\n  role ({'/'.join(words)}): ",
        default=default_word,
        completer=WordCompleter(words, ignore_case=True, sentence=False),
        validator=_ChoiceValidator(words),
        validate_while_typing=False,
    )
    kind = ROLE_CHOICES[answer.strip().lower()]
    if kind is None:
        return None
    if kind is not RoleKind.COMMON_INFO:
        return ColumnRole(kind)

    initial = default.label if default is not None and default.label else column.display_name
    label = prompt_common_info_label(initial=initial, session=session)
    return ColumnRole.common_info(label)


def prompt_common_info_label(
    *,
    initial: str = "",
    session: PromptSession | None = None,
    message: str = "  label (Enter to keep): ",
) -> str:
    """Collect a CommonInfo label; an empty answer keeps ``initial``."""

    sess = _session(session)
    value = sess.prompt(message, default=initial).strip()
    return value or initial


__all__ = [
    "ROLE_CHOICES",
    "SKIP_CHOICE",
    "describe_column",
    "prompt_common_info_label",
    "select_column_role",
]
