# application/executor/collection_sequencer.py
from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Sequence

from application.ports.logger import LoggerPort
from application.ports.request_runner import RequestRunnerPort
from domain.exceptions import JumpLimitExceeded
from domain.request import RequestRecord
from domain.results import RunStepResult
from domain.run import RunContext

MAX_JUMPS = 10_000

StepListener = Callable[[RunStepResult], None]


@dataclass(frozen=True)
class SequenceResult:
    results: List[RunStepResult] = field(default_factory=list)
    # end | stop | bail
    stopped_by: str = "end"


class CollectionSequencer:
    """
    Walks an ordered request list one request at a time.

    The next index is the following one unless the finished request asked for
    a named jump or for the run to stop. Every named jump spends one unit of a
    run-wide budget; going over it raises ``JumpLimitExceeded``.
    """

    def __init__(
        self,
        runner: RequestRunnerPort,
        logger: LoggerPort,
        bail: bool = False,
        max_jumps: int = MAX_JUMPS,
    ):
        self._runner = runner
        self._logger = logger
        self._bail = bail
        self._max_jumps = max_jumps

    def run(
        self,
        requests: Sequence[RequestRecord],
        ctx: RunContext,
        on_step: Optional[StepListener] = None,
    ) -> SequenceResult:
        if not ctx.run_id:
            ctx.run_id = uuid.uuid4().hex
        logger = self._logger.bind(run_id=ctx.run_id)

        results: List[RunStepResult] = []
        index = 0
        jumps = 0

        while index < len(requests):
            request = requests[index]
            result = self._execute(request, ctx, logger)
            results.append(result)
            if on_step is not None:
                on_step(result)

            if self._bail and result.has_failure:
                logger.info("run.bail", location=request.location)
                return SequenceResult(results=results, stopped_by="bail")

            if result.stop_run:
                logger.info("run.stop_requested", location=request.location)
                return SequenceResult(results=results, stopped_by="stop")

            target = result.next_request_name
            if target is None:
                index += 1
                continue

            jumps += 1
            if jumps > self._max_jumps:
                logger.error("jump.limit_exceeded", max_jumps=self._max_jumps)
                raise JumpLimitExceeded(self._max_jumps)

            target_index = _index_of(requests, target)
            if target_index is None:
                logger.warning(
                    "jump.target_not_found",
                    message=f"Could not find request with name '{target}'",
                    from_request=request.name,
                    target=target,
                )
                index += 1
                continue

            logger.debug("jump.jumping", from_request=request.name, to_request=target, jumps=jumps)
            index = target_index

        return SequenceResult(results=results, stopped_by="end")

    def _execute(self, request: RequestRecord, ctx: RunContext, logger: LoggerPort) -> RunStepResult:
        logger.info("request.start", location=request.location, name=request.name)
        t0 = time.perf_counter()

        result = self._runner.run(request, ctx)

        runtime = time.perf_counter() - t0
        if result is None:
            raise RuntimeError(
                f"Request runner returned None: runner={type(self._runner).__name__}, request={request.location}"
            )

        logger.info(
            "request.end",
            location=request.location,
            elapsed_ms=int(runtime * 1000),
            error=result.error,
        )
        return replace(result, runtime=runtime, suitename=request.suitename)


def _index_of(requests: Sequence[RequestRecord], name: str) -> Optional[int]:
    for i, request in enumerate(requests):
        if request.name == name:
            return i
    return None
