"""Delivery of plan results from background searches.

A ResultPromise either already holds its path (trivial goals are answered
immediately) or wraps a one-shot ``concurrent.futures.Future`` that a search
worker fills exactly once with a PlanSolution.
"""

import threading
import time
from concurrent import futures
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from jax_motionplan.core.config import PlannerConfig
from jax_motionplan.core.exceptions import PlanCancelledError, PlanTimeoutError
from jax_motionplan.core.logging import get_logger
from jax_motionplan.motionplan.utils import Node

logger = get_logger(__name__)


@dataclass(frozen=True)
class PlanSolution:
    """What a search worker writes into the promise's slot: nodes, or the error it hit."""

    steps: Tuple[Node, ...] = ()
    error: Optional[BaseException] = None


class ResultPromise:
    """Handle on the outcome of a plan.

    Args:
        steps: Precomputed path; ``result`` returns it without waiting.
        future: One-shot slot a search worker resolves with a PlanSolution.
        config: Supplies the poll interval and default timeout.
    """

    def __init__(
        self,
        steps: Optional[Sequence[Node]] = None,
        future: Optional["futures.Future[PlanSolution]"] = None,
        config: Optional[PlannerConfig] = None,
    ):
        if not steps and future is None:
            raise ValueError("ResultPromise needs precomputed steps or a future")
        self.steps = list(steps) if steps else None
        self.future = future
        self.config = config or PlannerConfig()
        self._solution: Optional[PlanSolution] = None

    def result(
        self,
        cancel: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> List[Node]:
        """Return the planned path, waiting for the search if needed.

        Once a solution has arrived every later call returns (or raises) the
        same outcome without waiting.

        Args:
            cancel: Set this event to stop waiting.
            timeout: Seconds to wait; defaults to ``config.result_timeout``
                     (None waits forever).

        Raises:
            PlanCancelledError: ``cancel`` was set before the solution arrived.
            PlanTimeoutError: ``timeout`` expired before the solution arrived.
            Exception: whatever error the search reported, unchanged.
        """
        if self.steps:
            return list(self.steps)

        if self._solution is None:
            self._solution = self._wait(cancel, self.config.result_timeout if timeout is None else timeout)

        if self._solution.error is not None:
            raise self._solution.error
        return list(self._solution.steps)

    def _wait(self, cancel: Optional[threading.Event], timeout: Optional[float]) -> PlanSolution:
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self.future.done():
            if cancel is not None and cancel.is_set():
                logger.info("result_promise_cancelled")
                raise PlanCancelledError("plan cancelled before a result arrived")

            wait_for = self.config.result_poll_interval
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise PlanTimeoutError("plan result did not arrive in time", details={"timeout": timeout})
                wait_for = min(wait_for, remaining)
            futures.wait([self.future], timeout=wait_for)

        try:
            solution = self.future.result()
        except futures.CancelledError:
            raise PlanCancelledError("plan search was cancelled") from None
        except Exception as e:
            solution = PlanSolution(error=e)

        logger.debug(
            "result_promise_resolved",
            nodes=len(solution.steps),
            failed=solution.error is not None,
        )
        return solution


def submit_search(
    executor: futures.Executor,
    search: Callable[..., Sequence[Node]],
    *args,
    config: Optional[PlannerConfig] = None,
) -> ResultPromise:
    """Run ``search(*args)`` on ``executor`` and return a promise for its path.

    The worker writes exactly one PlanSolution: the nodes the search returned,
    or the exception it raised. A search that returns something other than a
    sequence of nodes fails with the resulting TypeError.
    """
    slot: "futures.Future[PlanSolution]" = futures.Future()

    def run() -> None:
        try:
            solution = PlanSolution(steps=tuple(search(*args)))
        except BaseException as e:
            logger.warning("search_failed", error=str(e), error_type=type(e).__name__)
            slot.set_result(PlanSolution(error=e))
            if not isinstance(e, Exception):
                raise
        else:
            slot.set_result(solution)

    executor.submit(run)
    return ResultPromise(future=slot, config=config)
