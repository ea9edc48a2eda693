# cart_api/utils/retry.py
from sqlalchemy.exc import OperationalError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from cart_api.utils.settings import DB_RETRY_ATTEMPTS
from cart_api.utils.logging import get_logger

logger = get_logger(__name__)


def db_retry(rollback=None):
    """
    Retry a whole unit of work on OperationalError (dropped connection,
    deadlock, serialization failure, statement timeout).

    `rollback` is called before every new attempt so the session is usable
    again; it receives the tenacity retry state.
    """

    def _before_sleep(retry_state):
        exc = retry_state.outcome.exception()
        logger.warning(
            f"Store call failed (attempt {retry_state.attempt_number}), retrying: {exc}"
        )
        if rollback is not None:
            rollback(retry_state)

    return retry(
        reraise=True,
        stop=stop_after_attempt(DB_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OperationalError),
        before_sleep=_before_sleep,
    )
