# application/handlers/http_request_runner.py
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Optional, Tuple

from application.ports.http_client import HttpClientError, HttpClientPort, HttpResponse
from application.ports.logger import LoggerPort
from application.ports.request_runner import RequestRunnerPort
from application.services.assertion_evaluator import AssertionEvaluator, parse_literal
from application.services.redactor import mask_headers
from application.services.request_preparer import PreparedHttpRequest, RequestPreparer
from application.services.response_query import (
    UNDEFINED,
    ResponseQueryError,
    ResponseView,
    is_response_expr,
    parse_body,
    query,
)
from application.services.template_renderer import RenderSources, TemplateRenderer
from domain.request import KeyValue, RequestRecord
from domain.results import RequestSnapshot, ResponseSnapshot, RunStepResult
from domain.run import RunContext

_SET_NEXT_REQUEST = re.compile(
    r"""^[ \t]*bru\.setNextRequest\(\s*(?:(['"])(?P<name>.*?)\1|(?P<null>null))\s*\)\s*;?[ \t]*$""",
    re.MULTILINE,
)


def find_next_request(script: str) -> Tuple[Optional[str], bool]:
    """
    Look for a top-level ``bru.setNextRequest(...)`` statement.

    Returns ``(name, stop)``; the last statement in the script wins, like
    repeated calls at runtime would.
    """
    name: Optional[str] = None
    stop = False
    for match in _SET_NEXT_REQUEST.finditer(script or ""):
        if match.group("null"):
            name, stop = None, True
        else:
            name, stop = match.group("name"), False
    return name, stop


def _var_value(value: Any) -> Any:
    if value is UNDEFINED:
        return None
    return value


class HttpRequestRunner(RequestRunnerPort):
    """
    Runs one request over HTTP.

    Order of work: pre-request vars, interpolation, send, post-response vars,
    assertions. Pre-request and post-response vars are written into the run's
    collection variables so later requests can read them.
    """

    def __init__(
        self,
        http_client: HttpClientPort,
        logger: LoggerPort,
        renderer: Optional[TemplateRenderer] = None,
    ):
        self._http = http_client
        self._logger = logger
        self._renderer = renderer or TemplateRenderer()
        self._preparer = RequestPreparer(self._renderer)
        self._assertions = AssertionEvaluator(self._renderer)

    def run(self, request: RequestRecord, ctx: RunContext) -> RunStepResult:
        logger = self._logger.bind(request=request.name, location=request.location)
        src = RenderSources(
            collection_vars=ctx.collection_vars,
            env_vars=ctx.env_vars,
            process_env=ctx.process_env,
        )

        self._apply_pre_request_vars(ctx.root.vars_pre_request, ctx, src)
        self._apply_pre_request_vars(request.vars_pre_request, ctx, src)
        self._log_skipped_scripts(request, ctx, logger)

        try:
            prepared = self._preparer.prepare(request, ctx.root, src)
        except ValueError as e:
            logger.error("request.prepare_failed", error=str(e))
            return RunStepResult(location=request.location, error=str(e))

        snapshot = RequestSnapshot(
            method=prepared.method,
            url=prepared.url,
            headers=dict(prepared.headers),
            data=prepared.display_data,
        )
        logger.debug("http.request", method=prepared.method, url=prepared.url, headers=mask_headers(prepared.headers))

        try:
            resp = self._send(prepared)
        except HttpClientError as e:
            logger.error("http.request_failed", url=prepared.url, error=str(e))
            return RunStepResult(location=request.location, request=snapshot, error=str(e))

        res = ResponseView(
            status=resp.status,
            status_text=resp.reason,
            headers=resp.headers,
            body=parse_body(resp.text),
            response_time=resp.elapsed_ms,
        )
        logger.debug("http.response", status=resp.status, elapsed_ms=resp.elapsed_ms)

        self._apply_post_response_vars(ctx.root.vars_post_response, res, ctx, src, logger)
        self._apply_post_response_vars(request.vars_post_response, res, ctx, src, logger)

        assertion_results = self._assertions.evaluate_all(request.assertions, res, src)
        next_name, stop = find_next_request(request.script_post_response)

        return RunStepResult(
            location=request.location,
            request=snapshot,
            response=ResponseSnapshot(
                status=res.status,
                status_text=res.status_text,
                headers=dict(res.headers),
                data=res.body,
                response_time=res.response_time,
            ),
            assertion_results=tuple(assertion_results),
            next_request_name=next_name,
            stop_run=stop,
        )

    def _send(self, prepared: PreparedHttpRequest) -> HttpResponse:
        return self._http.request(
            method=prepared.method,
            url=prepared.url,
            headers=prepared.headers,
            data=prepared.data,
            files=prepared.files,
            auth=prepared.auth,
        )

    def _apply_pre_request_vars(self, pairs: Iterable[KeyValue], ctx: RunContext, src: RenderSources) -> None:
        for var in pairs:
            if not var.enabled:
                continue
            ctx.collection_vars[var.name] = self._renderer.render(var.value, src)

    def _apply_post_response_vars(
        self,
        pairs: Iterable[KeyValue],
        res: ResponseView,
        ctx: RunContext,
        src: RenderSources,
        logger: LoggerPort,
    ) -> None:
        for var in pairs:
            if not var.enabled:
                continue
            try:
                if is_response_expr(var.value):
                    value = query(res, var.value)
                else:
                    value = parse_literal(self._renderer.render(var.value, src))
            except ResponseQueryError as e:
                logger.warning("vars.post_response_failed", name=var.name, error=str(e))
                continue
            ctx.collection_vars[var.name] = _var_value(value)

    def _log_skipped_scripts(self, request: RequestRecord, ctx: RunContext, logger: LoggerPort) -> None:
        blocks: Dict[str, str] = {
            "collection.script:pre-request": ctx.root.script_pre_request,
            "collection.script:post-response": ctx.root.script_post_response,
            "collection.tests": ctx.root.tests,
            "script:pre-request": request.script_pre_request,
            "script:post-response": request.script_post_response,
            "tests": request.tests,
        }
        for block, text in blocks.items():
            if text.strip():
                logger.debug("script.skipped", block=block)
