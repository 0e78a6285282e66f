from dataclasses import dataclass, field
from enum import Enum


class Treatment(str, Enum):
    """What the rewriter does with a targeted table or column."""

    ANONYMIZE = "anonymize"
    COALESCE_ANONYMIZE = "coalesce_anonymize"  # NULL becomes '' first
    DELETE_ROWS = "delete_rows"
    SET_CONSTANT = "set_constant"


@dataclass(frozen=True)
class ColumnSpec:
    """A table/column slated for one treatment during a rewrite.

    ``column`` is None only for DELETE_ROWS. An ``optional`` spec whose table
    or column is absent from the schema is skipped instead of failing the run.
    """

    table: str
    column: str | None
    treatment: Treatment
    constant: int | str | None = None
    optional: bool = False

    def __post_init__(self) -> None:
        if self.treatment is Treatment.DELETE_ROWS:
            if self.column is not None:
                raise ValueError(f"DELETE_ROWS spec for '{self.table}' must not name a column")
        elif not self.column:
            raise ValueError(f"{self.treatment.value} spec for '{self.table}' needs a column")

    @property
    def target(self) -> str:
        return self.table if self.column is None else f"{self.table}.{self.column}"


@dataclass(frozen=True)
class Statement:
    """One SQL statement of a rewrite plan."""

    sql: str
    params: tuple[object, ...] = ()


@dataclass
class RewriteReport:
    """Counters collected during a committed rewrite."""

    statements: int = 0
    substituted_values: int = 0
    passthrough_values: int = 0
    distinct_values: int = 0
    skipped_specs: list[str] = field(default_factory=list)


@dataclass
class RewriteOutcome:
    """Success or failure of a full run, as reported to the caller."""

    success: bool
    error: str | None = None
    report: RewriteReport | None = None
