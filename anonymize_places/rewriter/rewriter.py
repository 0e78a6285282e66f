"""Apply a substitution table to a SQLite database in one transaction.

Processing flow:
1. Check every spec against the live schema; nothing is written on mismatch.
2. Register ``anonymize(value)`` with the connection, backed by one
   SubstitutionTable for the whole run.
3. Run all updates and deletes between BEGIN IMMEDIATE and COMMIT; any
   storage error rolls the whole run back.
4. VACUUM to drop the pages that still hold deleted or overwritten content.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar

from anonymize_places.logging.logger import Log
from anonymize_places.rewriter.exceptions import SchemaMismatchError, StorageFailureError
from anonymize_places.rewriter.models import ColumnSpec, RewriteReport, Statement
from anonymize_places.rewriter.schema import table_columns
from anonymize_places.rewriter.statements import build_statements
from anonymize_places.substitution import SubstitutionTable


@dataclass
class _CallStats:
    substituted: int = 0
    passthrough: int = 0


class Rewriter:
    """Schema-driven bulk rewrite of a writable SQLite connection."""

    FUNCTION_NAME: ClassVar[str] = "anonymize"

    def __init__(
        self,
        table_factory: Callable[[], SubstitutionTable] = SubstitutionTable,
        vacuum: bool = True,
    ) -> None:
        self._table_factory = table_factory
        self._vacuum = vacuum

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def rewrite(
        self,
        conn: sqlite3.Connection,
        specs: list[ColumnSpec],
        table: SubstitutionTable | None = None,
    ) -> RewriteReport:
        """Anonymize, reset and delete per *specs*, all or nothing.

        Args:
            conn: Writable connection with no open transaction.
            specs: Targets for this run.
            table: Substitution table to use; a fresh one when omitted.

        Returns:
            RewriteReport with counters for the committed run.

        Raises:
            SchemaMismatchError: a required table or column is missing.
            StorageFailureError: the storage layer failed. Data is rolled back
                unless only the trailing VACUUM failed.
        """
        if conn.in_transaction:
            raise StorageFailureError("Connection already has an open transaction")

        active, skipped = self._check_schema(conn, specs)
        statements = build_statements(active, self.FUNCTION_NAME)
        substitution_table = table if table is not None else self._table_factory()
        stats = _CallStats()

        self._register(conn, substitution_table, stats)
        previous_isolation = conn.isolation_level
        conn.isolation_level = None
        try:
            self._execute_atomically(conn, statements)
            if self._vacuum:
                self._compact(conn)
        finally:
            conn.isolation_level = previous_isolation
            conn.create_function(self.FUNCTION_NAME, 1, None)

        report = RewriteReport(
            statements=len(statements),
            substituted_values=stats.substituted,
            passthrough_values=stats.passthrough,
            distinct_values=len(substitution_table),
            skipped_specs=skipped,
        )
        Log.info(
            f"Rewrite committed: {report.statements} statements, "
            f"{report.distinct_values} distinct values substituted"
        )
        return report

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _check_schema(
        self,
        conn: sqlite3.Connection,
        specs: list[ColumnSpec],
    ) -> tuple[list[ColumnSpec], list[str]]:
        """Split *specs* into those to apply and optional ones to skip.

        An optional spec is skipped when its table, or its column, is absent.
        """
        active: list[ColumnSpec] = []
        skipped: list[str] = []
        columns_by_table: dict[str, list[str]] = {}

        try:
            for spec in specs:
                if spec.table not in columns_by_table:
                    columns_by_table[spec.table] = table_columns(conn, spec.table)
                columns = columns_by_table[spec.table]

                if not columns:
                    if spec.optional:
                        Log.info(f"Skipping {spec.target}: table not present")
                        skipped.append(spec.target)
                        continue
                    raise SchemaMismatchError(f"Table '{spec.table}' does not exist")
                if spec.column is not None and spec.column not in columns:
                    if spec.optional:
                        Log.info(f"Skipping {spec.target}: column not present")
                        skipped.append(spec.target)
                        continue
                    raise SchemaMismatchError(
                        f"Column '{spec.column}' does not exist in table '{spec.table}'"
                    )
                active.append(spec)
        except sqlite3.Error as exc:
            raise StorageFailureError(f"Could not read schema: {exc}") from exc

        return active, skipped

    def _register(
        self,
        conn: sqlite3.Connection,
        table: SubstitutionTable,
        stats: _CallStats,
    ) -> None:
        def anonymize(value: object) -> object:
            # Non-text values (NULL, numbers, blobs) are returned as-is.
            if not isinstance(value, str):
                stats.passthrough += 1
                return value
            stats.substituted += 1
            return table.anonymize(value)

        try:
            conn.create_function(self.FUNCTION_NAME, 1, anonymize, deterministic=True)
        except sqlite3.Error as exc:
            raise StorageFailureError(f"Could not register {self.FUNCTION_NAME}(): {exc}") from exc

    def _execute_atomically(
        self,
        conn: sqlite3.Connection,
        statements: list[Statement],
    ) -> None:
        try:
            conn.execute("BEGIN IMMEDIATE")
            for statement in statements:
                Log.debug(f"Executing sql:\n{statement.sql}")
                conn.execute(statement.sql, statement.params)
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise StorageFailureError(f"Rewrite rolled back: {exc}") from exc

    def _compact(self, conn: sqlite3.Connection) -> None:
        Log.debug("Running VACUUM")
        try:
            conn.execute("VACUUM")
        except sqlite3.Error as exc:
            raise StorageFailureError(f"Rewrite committed but VACUUM failed: {exc}") from exc
