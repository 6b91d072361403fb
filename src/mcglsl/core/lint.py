import logging
from collections.abc import Mapping
from pathlib import Path

from mcglsl.config import Settings
from mcglsl.core.diagnostics import map_diagnostics
from mcglsl.core.graph import WorkspaceIndex
from mcglsl.core.ports.client import DiagnosticsClient
from mcglsl.core.preprocess import PreprocessResult, preprocess
from mcglsl.core.validator import has_stage, run_validator
from mcglsl.errors import ValidatorLaunchError
from mcglsl.models import LintResult

logger = logging.getLogger(__name__)


def merge_document(
    path: str | Path,
    text: str,
    settings: Settings,
    index: WorkspaceIndex,
    overlay: Mapping[str, str] | None = None,
) -> PreprocessResult:
    """Expand every include of ``path`` without running the validator.

    Includes named in ``overlay`` are read from it instead of from disk.
    """
    return preprocess(path, text, settings.shaderpacks_path, index, overlay)


def lint_document(
    path: str | Path,
    text: str,
    settings: Settings,
    index: WorkspaceIndex,
    client: DiagnosticsClient | None = None,
    validator_output: str | None = None,
    overlay: Mapping[str, str] | None = None,
) -> LintResult:
    """Run one preprocess, validate and remap pass for a top-level document.

    ``validator_output`` skips the subprocess and maps the given text instead,
    for callers that ran the validator themselves.

    Raises ``ValidatorLaunchError`` when the validator cannot be run; the error
    has already been shown through ``client`` and nothing should be published.
    """
    result = merge_document(path, text, settings, index, overlay)
    report_configuration_errors(result, client)

    output = validator_output
    if output is None and has_stage(result.root):
        try:
            output = run_validator(result.root, result.text, settings)
        except ValidatorLaunchError as exc:
            logger.error("%s", exc)
            if client is not None:
                client.show_error(str(exc))
            raise
    elif output is None:
        logger.info("No shader stage for %s; reporting include diagnostics only", result.root)

    return finish_pass(result, output, settings, index)


def finish_pass(
    result: PreprocessResult,
    output: str | None,
    settings: Settings,
    index: WorkspaceIndex,
) -> LintResult:
    previous = index.record_pass(result.root, result.touched_files())
    diagnostics = map_diagnostics(output or "", result, settings.shaderpacks_path, previous)
    return LintResult(
        root=result.root,
        diagnostics=diagnostics,
        buffer=result.text,
        includes=result.table.records(),
        validated=output is not None,
    )


def publish(result: LintResult, client: DiagnosticsClient, version: int | None = None) -> None:
    for path, diagnostics in result.diagnostics.items():
        client.publish_diagnostics(path_to_uri(path), diagnostics, version)


def path_to_uri(path: str) -> str:
    return Path(path).absolute().as_uri()


def report_configuration_errors(result: PreprocessResult, client: DiagnosticsClient | None) -> None:
    if client is None:
        return
    for message in result.config_errors:
        client.show_error(message)
