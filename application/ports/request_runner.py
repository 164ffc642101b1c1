# application/ports/request_runner.py
from __future__ import annotations

from abc import ABC, abstractmethod

from domain.request import RequestRecord
from domain.results import RunStepResult
from domain.run import RunContext


class RequestRunnerPort(ABC):
    """Executes a single request of a collection."""

    @abstractmethod
    def run(self, request: RequestRecord, ctx: RunContext) -> RunStepResult:
        """
        Execute ``request`` and return its outcome.

        May write into ``ctx.collection_vars``; must not touch anything else on
        the context. Transport failures are reported through
        ``RunStepResult.error`` instead of being raised.
        """
        ...
