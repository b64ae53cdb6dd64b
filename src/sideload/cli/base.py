from __future__ import annotations

import logging
import os
import sys
import traceback
from collections.abc import Callable, Generator, Mapping
from contextlib import contextmanager, nullcontext
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, TextIO

import typer

from .. import global_config as g
from ..utils.time import utc_now

_LOGGING_CONFIGURED = False


def _get_sideload_version() -> str:
    try:
        return version("sideload")
    except PackageNotFoundError:
        return "unknown"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging for the CLI; later calls are no-ops."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    _LOGGING_CONFIGURED = True


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)


class RunLog:
    """Timestamped transcript of one CLI run under global_config.LOGS_DIR.

    The file opens with a metadata header (argv, cwd, versions and any
    caller context) followed by every line the command prints.
    """

    def __init__(self, name: str, *, dry_run: bool = False, context: Mapping[str, Any] | None = None):
        stamp = utc_now().strftime("%Y%m%dT%H%M%S")
        suffix = "_dryrun" if dry_run else ""
        self.name = name
        self.path: Path = g.LOGS_DIR / f"{stamp}_{name}{suffix}.log"
        self.context = dict(context or {})
        self.handle: TextIO | None = None

    def __enter__(self) -> RunLog:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.handle = open(self.path, "w", encoding="utf-8")  # noqa: SIM115
        header = {
            "timestamp": utc_now().isoformat(),
            "command": self.name,
            "argv": sys.argv,
            "cwd": os.getcwd(),
            "sideload_version": _get_sideload_version(),
            "python_version": sys.version,
            **self.context,
        }
        self.handle.write("--- metadata ---\n")
        self.handle.writelines(f"{key}: {value}\n" for key, value in header.items())
        self.handle.write("---\n")
        self.handle.flush()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self.handle:
            self.handle.close()
            self.handle = None

    def write(self, text: str) -> None:
        if self.handle:
            self.handle.write(text)
            self.handle.flush()


@contextmanager
def handle_errors(
    operation: str,
    *,
    logger: logging.Logger | None = None,
    run_log: RunLog | None = None,
) -> Generator[None, None, None]:
    """Turn any exception from the wrapped block into a red message and exit 1.

    typer.Exit passes through untouched. When a run log is active, the
    error and its traceback are appended to it.

    Raises:
        typer.Exit: With code 1 on any other exception.
    """
    logger = logger or get_logger(__name__)
    try:
        yield
    except typer.Exit:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error during %s", operation)
        typer.secho(f"✗ {operation} failed: {exc}", fg=typer.colors.RED)
        if run_log:
            run_log.write(
                f"\n✗ {operation} failed: {exc}\n"
                f"exception_type: {type(exc).__name__}\n"
                f"traceback:\n{traceback.format_exc()}"
            )
        raise typer.Exit(1) from exc


def format_result(result: Any, *, operation: str | None = None) -> str:
    """Render an operation's result for the terminal.

    Dicts may carry `success`, `total`/`succeeded`/`failed`, `message`,
    `failures` ({item, reason}) and `items` ({item, status, detail}).
    Anything else is shown with repr.
    """
    label = operation or "Result"
    if result is None:
        return f"✓ {label}"
    if not isinstance(result, dict):
        return f"{label}: {result!r}"

    lines = [f"{'✓' if result.get('success', True) else '✗'} {label}"]

    stats = [
        f"{key}: {result[key]}"
        for key in ("total", "succeeded", "failed")
        if result.get(key) is not None
    ]
    if stats:
        lines.append("  " + " | ".join(stats))
    if result.get("message"):
        lines.append(f"  ℹ {result['message']}")

    if result.get("failures"):
        lines.append("  Failures:")
        lines.extend(
            f"    • {failure.get('item', 'item')}: {failure.get('reason') or 'Unknown error'}"
            for failure in result["failures"]
        )

    if result.get("items"):
        lines.append("  Items:")
        for item in result["items"]:
            detail = f" ({item['detail']})" if item.get("detail") else ""
            lines.append(f"    • {item.get('item', 'item')}: {item.get('status', '')}{detail}")

    return "\n".join(lines)


class BaseCLI:
    """Shared plumbing for command groups: output, error handling, run logs."""

    def __init__(self, domain: str) -> None:
        self.domain = domain
        self.logger = get_logger(f"{__name__}.{domain}")

    def handle_cli_operation(
        self,
        *,
        operation: str,
        op_callable: Callable[[], Any],
        pre_message: str | None = None,
        log_name: str | None = None,
        log_dry_run: bool = False,
        enable_log: bool = True,
        log_context: dict[str, Any] | None = None,
    ) -> Any:
        """Run `op_callable`, print its formatted result and return it.

        Args:
            operation: Name used in the result header and error message.
            op_callable: Zero-argument callable doing the work.
            pre_message: Printed before the operation starts.
            log_name: When set (and enable_log), everything printed is also
                written to a RunLog of this name.
            log_dry_run: Mark the run log file name as a dry run.
            enable_log: Turn the run log off without touching log_name.
            log_context: Extra header lines for the run log.

        Returns:
            Whatever op_callable returned.

        Raises:
            typer.Exit: With code 1 if op_callable raised.
        """
        run_log = (
            RunLog(log_name, dry_run=log_dry_run, context=log_context)
            if enable_log and log_name
            else None
        )

        with run_log or nullcontext():

            def _out(msg: str) -> None:
                typer.echo(msg)
                if run_log:
                    run_log.write(msg + "\n")

            if pre_message:
                _out(pre_message)

            with handle_errors(operation, logger=self.logger, run_log=run_log):
                result = op_callable()

            _out(format_result(result, operation=operation))
            return result
