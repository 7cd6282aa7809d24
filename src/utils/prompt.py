"""
Interactive confirmation gate.
"""

import logging
from typing import Callable

from ..core.errors import UserAbortedError


class ConfirmationGate:
    """Asks the operator a yes/no question, or answers it from configuration."""

    def __init__(self, assume_yes: bool = False, input_fn: Callable[[str], str] = input):
        """
        Initialize the gate.

        Args:
            assume_yes: Skip the prompt and continue
            input_fn: Function used to read the answer
        """
        self.logger = logging.getLogger(__name__)
        self.assume_yes = assume_yes
        self.input_fn = input_fn

    def confirm_or_abort(self, reason: str) -> None:
        """Continue only if the operator answers exactly 'y'."""
        if self.assume_yes:
            self.logger.info(f"Continuing without prompt (assume-yes): {reason}")
            return

        try:
            answer = self.input_fn("Continue anyway? (y/n): ")
        except EOFError:
            answer = ""

        if answer.strip() != "y":
            raise UserAbortedError(f"Aborted by operator: {reason}")
