#!/usr/bin/env python3
"""
Collection runner

Usage:
  bru-run run [PATH] [-r] [--env <name>] [--env-var name=value ...]
              [--output <file>] [--format json|junit]
              [--cacert <file>] [--insecure] [--bail] [--log-level <level>]

Run from the root of a collection (the directory holding bruno.json).

Examples:
  bru-run run
  bru-run run users/create.bru --env local
  bru-run run users -r --env-var token=secret --output results.xml --format junit
"""
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

from application.executor.collection_sequencer import CollectionSequencer
from application.handlers.http_request_runner import HttpRequestRunner
from application.ports.http_client import HttpClientPort
from application.ports.requests_client import RequestsSessionHttpClient
from application.services.environment_resolver import EnvironmentResolver
from application.services.run_summarizer import summarize
from domain.exceptions import CollectionRunnerError, ConfigurationError
from domain.run import RunContext
from infrastructure.collection import BruParser, CollectionConfigLoader, RequestLoader
from infrastructure.environment import FileEnvironmentSource, ProcessEnvProvider
from infrastructure.logging.log_setup import setup_console_logging
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.reporting import ConsoleReporter, ReportWriterRegistry

DEFAULT_FORMAT = "json"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class RunOptions:
    path: Optional[str] = None
    recursive: bool = False
    cacert: Optional[str] = None
    env: Optional[str] = None
    env_vars: Tuple[str, ...] = ()
    output: Optional[str] = None
    format: str = DEFAULT_FORMAT
    insecure: bool = False
    bail: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RunOptions":
        return cls(
            path=args.path,
            recursive=args.recursive,
            cacert=args.cacert,
            env=args.env,
            env_vars=tuple(args.env_var or ()),
            output=args.output,
            format=args.format,
            insecure=args.insecure,
            bail=args.bail,
            log_level=args.log_level,
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bru-run", description="Run the requests of a collection")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run a request, a folder or the whole collection")
    run_parser.add_argument("path", nargs="?", help="request file or folder, defaults to the whole collection")
    run_parser.add_argument("-r", dest="recursive", action="store_true", help="indicates a recursive run")
    run_parser.add_argument("--cacert", type=str, help="CA certificate to verify peer against")
    run_parser.add_argument("--env", type=str, help="environment name, from <collection>/environments")
    run_parser.add_argument(
        "--env-var",
        action="append",
        metavar="NAME=VALUE",
        help="overwrite a single environment variable, may be repeated",
    )
    run_parser.add_argument("-o", "--output", type=str, help="path to write the results to")
    run_parser.add_argument("-f", "--format", type=str, default=DEFAULT_FORMAT, help='"json" or "junit"')
    run_parser.add_argument("--insecure", action="store_true", help="allow insecure server connections")
    run_parser.add_argument("--bail", action="store_true", help="stop at the first failing request, test or assertion")
    run_parser.add_argument("--log-level", type=str, default=DEFAULT_LOG_LEVEL)

    return parser


def _target(options: RunOptions) -> Tuple[Path, bool, str]:
    """Path to run, recursion flag and the banner shown before the run."""
    if not options.path:
        return Path("."), True, "Running Folder Recursively"

    target = Path(options.path)
    if not target.exists():
        raise ConfigurationError(f"File or directory {options.path} does not exist")
    if target.is_file():
        return target, False, "Running Request"
    if options.recursive:
        return target, True, "Running Folder Recursively"
    return target, False, "Running Folder"


def _http_client(options: RunOptions, reporter: ConsoleReporter) -> RequestsSessionHttpClient:
    cacert = None
    if options.cacert:
        if options.insecure:
            reporter.notice("Ignoring the cacert option since insecure connections are enabled")
        elif Path(options.cacert).is_file():
            cacert = options.cacert
        else:
            reporter.notice(f"Cacert File {options.cacert} does not exist")
    return RequestsSessionHttpClient(cacert=cacert, insecure=options.insecure)


def run_collection(
    options: RunOptions,
    collection_path: Path,
    reporter: ConsoleReporter,
    http_client: Optional[HttpClientPort] = None,
) -> int:
    """Run the selected requests; returns the process exit code."""
    writers = ReportWriterRegistry()
    # reject an unknown format before any request goes out
    writers.get_writer(options.format)

    logger = LoguruLogger()
    parser = BruParser()
    config, root = CollectionConfigLoader(parser).load(collection_path)

    target, recursive, banner = _target(options)
    resolved = EnvironmentResolver(
        FileEnvironmentSource(collection_path),
        ProcessEnvProvider(collection_path),
    ).resolve(options.env, options.env_vars)

    records = RequestLoader(parser, collection_path, config.ignore, logger).load(target, recursive)

    ctx = RunContext(
        collection_path=collection_path,
        env_vars=resolved.env_vars,
        process_env=resolved.process_env,
        config=config,
        root=root,
    )

    client = http_client or _http_client(options, reporter)
    try:
        reporter.run_started(banner)
        sequencer = CollectionSequencer(HttpRequestRunner(client, logger), logger, bail=options.bail)
        outcome = sequencer.run(records, ctx, on_step=reporter.request_finished)
    finally:
        client.close()

    summary = summarize(outcome.results)
    reporter.summary(summary)

    if options.output:
        output = Path(options.output)
        writers.write(options.format, output, summary, outcome.results)
        reporter.wrote_results(str(output))

    return 1 if summary.has_failures else 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))

    if not args.command:
        parser.print_help()
        sys.exit(1)

    options = RunOptions.from_args(args)
    setup_console_logging(level=options.log_level)
    reporter = ConsoleReporter()

    try:
        exit_code = run_collection(options, Path.cwd(), reporter)
    except CollectionRunnerError as exc:
        reporter.error(str(exc))
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
