import logging
from typing import Any, Mapping, Union

from techtalk.core.notifications import NotificationDispatcher
from techtalk.core.validation import validate
from techtalk.models.contact import (
    NOTIFICATION_FAILED_WARNING,
    Failed,
    Invalid,
    SubmissionInput,
    SubmissionResult,
)

logger = logging.getLogger(__name__)


class SubmissionController:
    """
    Runs one contact submission through validate -> notify -> respond.

    A rejected form never reaches the dispatcher. An accepted form is
    reported as received even when the notification could not be delivered;
    that case is logged for operators and returned as a warning.
    """

    def __init__(self, dispatcher: NotificationDispatcher):
        self._dispatcher = dispatcher

    async def submit(self, raw: Union[SubmissionInput, Mapping[str, Any]]) -> SubmissionResult:
        result = validate(raw)

        if isinstance(result, Invalid):
            logger.info(f"Contact submission rejected: {sorted(result.errors)}")
            return SubmissionResult.rejected(result.errors)

        submission = result.submission
        try:
            outcome = await self._dispatcher.dispatch(submission)
        except Exception as e:
            logger.exception(f"Unexpected error while dispatching contact notification: {e}")
            outcome = Failed(reason=type(e).__name__)

        if isinstance(outcome, Failed):
            logger.warning(f"⚠️ Contact submission accepted but notification failed: {outcome.reason}")
            return SubmissionResult.accepted(warning=NOTIFICATION_FAILED_WARNING)

        logger.info(f"📨 Contact submission accepted (locale={submission.locale or 'n/a'})")
        return SubmissionResult.accepted()
