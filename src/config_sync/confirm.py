"""Confirmation collaborators for the mutate path.

The core never prompts.  Operations that overwrite, create or delete
documents take a ``Confirm`` callable that receives a yes/no question and
returns the operator's decision.
"""

from collections.abc import Callable

Confirm = Callable[[str], bool]


def always_confirm(question: str) -> bool:
    """Approve every question (non-interactive ``--yes`` mode)."""
    return True


def never_confirm(question: str) -> bool:
    """Decline every question (non-interactive ``--no`` mode)."""
    return False
