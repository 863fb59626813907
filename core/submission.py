"""
Submission lifecycle shared by every create/edit popup.

    Idle -> Validating -> Rejected(errors) -> Idle
                       -> Submitting -> Succeeded -> Closed
                                     -> Failed(message) -> Idle

Rejected and Failed are recoverable; Closed is only reached after the
backend confirmed success. While a request is in flight a second submit
is refused, and once the popup is unmounted any late response is dropped.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from api.exceptions import ApiError
from core.validation import FormValidator

logger = logging.getLogger(__name__)


class PopupState:
    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CLOSED = "closed"


class PopupSubmission:
    """
    Drives one popup form from first edit to close.

    `send` is the network call; it only runs after validation passed and
    its ApiError is turned into a recoverable Failed state.
    """

    def __init__(self, name: str, validator: FormValidator,
                 on_close: Optional[Callable[[], None]] = None):
        self.name = name
        self.validator = validator
        self.on_close = on_close
        self.state = PopupState.IDLE
        self.errors: Dict[str, str] = {}
        self.message: Optional[str] = None
        self.result: Any = None
        self.mounted = True

    @property
    def submit_disabled(self) -> bool:
        return self.state in (PopupState.SUBMITTING, PopupState.CLOSED)

    @property
    def is_closed(self) -> bool:
        return self.state == PopupState.CLOSED

    def visible_errors(self) -> Dict[str, str]:
        return self.validator.visible_errors(self.errors)

    def touch(self, field: str, values: Mapping[str, Any]) -> Optional[str]:
        """Mark a field touched after the user left it and refresh its error."""
        self.validator.touch(field)
        self.errors = self.validator.validate(values)
        return self.visible_errors().get(field)

    def submit(self, values: Mapping[str, Any], send: Callable[[], Any]) -> Dict[str, Any]:
        """
        Validate and, if valid, send the form.

        Args:
            values: Current form values
            send: Zero-argument callable issuing the request

        Returns:
            Dictionary with the resulting 'state', 'errors' and 'message'
        """
        if self.submit_disabled:
            logger.warning(f"[{self.name}] submit ignored while {self.state}")
            return self._outcome()

        self.state = PopupState.VALIDATING
        self.message = None
        self.errors = self.validator.submit(values)
        if self.errors:
            self.state = PopupState.REJECTED
            outcome = self._outcome()
            self.state = PopupState.IDLE
            return outcome

        self.state = PopupState.SUBMITTING
        try:
            result = send()
        except ApiError as e:
            if not self.mounted:
                logger.info(f"[{self.name}] dropped failure after unmount: {e.message}")
                return self._outcome()
            logger.error(f"[{self.name}] submission failed: {e.message}")
            self.state = PopupState.FAILED
            self.message = e.message
            outcome = self._outcome()
            self.state = PopupState.IDLE
            return outcome

        if not self.mounted:
            logger.info(f"[{self.name}] dropped response after unmount")
            return self._outcome()

        self.result = result
        self.state = PopupState.SUCCEEDED
        outcome = self._outcome()
        self.close()
        return outcome

    def close(self) -> None:
        """Close the popup and notify the owner exactly once."""
        if self.state == PopupState.CLOSED:
            return
        self.state = PopupState.CLOSED
        if self.on_close is not None:
            self.on_close()

    def unmount(self) -> None:
        """The owning screen went away; later responses are discarded."""
        self.mounted = False

    def _outcome(self) -> Dict[str, Any]:
        return {
            'state': self.state,
            'errors': dict(self.errors),
            'message': self.message,
        }
