from pathlib import Path

from anonymize_places.config.settings import Settings
from anonymize_places.database.connection import get_connection
from anonymize_places.logging.logger import Log
from anonymize_places.rewriter.exceptions import RewriteFailedError
from anonymize_places.rewriter.models import RewriteOutcome
from anonymize_places.rewriter.rewriter import Rewriter
from anonymize_places.rewriter.schema import build_specs
from anonymize_places.workspace.output import prepare_output


class AnonymizationRunner:
    """Run one anonymization: copy -> open -> plan -> rewrite."""

    def __init__(self, rewriter: Rewriter, settings: Settings) -> None:
        self._rewriter = rewriter
        self._settings = settings

    def run(self, source: Path, output: Path) -> RewriteOutcome:
        """Anonymize a copy of *source* written to *output*.

        Rewrite failures are reported in the outcome; copy errors propagate.
        """
        prepare_output(source, output, force=self._settings.force_overwrite)
        Log.info(f"Anonymizing {output} in {self._settings.discovery_mode} mode")
        try:
            with get_connection(output) as conn:
                specs = build_specs(
                    conn,
                    self._settings.discovery_mode,
                    self._settings.excluded_tables,
                )
                report = self._rewriter.rewrite(conn, specs)
        except RewriteFailedError as exc:
            cause = exc.__cause__
            message = f"{exc} (caused by {cause!r})" if cause is not None else str(exc)
            Log.error(f"Anonymization of {output} failed: {message}")
            return RewriteOutcome(success=False, error=message)

        Log.info(
            f"Anonymized {output}: {report.substituted_values} values rewritten, "
            f"{report.passthrough_values} non-text values left as-is"
        )
        return RewriteOutcome(success=True, report=report)


def build_runner(settings: Settings) -> AnonymizationRunner:
    """Build a runner with the rewriter configured from settings."""
    return AnonymizationRunner(Rewriter(vacuum=settings.vacuum_after_rewrite), settings)
