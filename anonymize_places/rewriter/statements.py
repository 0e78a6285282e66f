from anonymize_places.rewriter.models import ColumnSpec, Statement, Treatment
from anonymize_places.rewriter.schema import quote_identifier


def _substitution_expr(spec: ColumnSpec, function_name: str) -> str:
    column = quote_identifier(spec.column or "")
    if spec.treatment is Treatment.COALESCE_ANONYMIZE:
        return f"{function_name}(COALESCE({column}, ''))"
    return f"{function_name}({column})"


def build_statements(
    specs: list[ColumnSpec],
    function_name: str = "anonymize",
) -> list[Statement]:
    """Turn column specs into the ordered statements of one rewrite.

    Order: one UPDATE per table for all substituted columns, then constant
    resets, then row deletions.
    """
    substitutions: dict[str, list[str]] = {}
    constants: list[Statement] = []
    deletes: list[Statement] = []

    for spec in specs:
        table = quote_identifier(spec.table)
        if spec.treatment in (Treatment.ANONYMIZE, Treatment.COALESCE_ANONYMIZE):
            column = quote_identifier(spec.column or "")
            substitutions.setdefault(spec.table, []).append(
                f"{column} = {_substitution_expr(spec, function_name)}"
            )
        elif spec.treatment is Treatment.SET_CONSTANT:
            column = quote_identifier(spec.column or "")
            constants.append(Statement(f"UPDATE {table} SET {column} = ?", (spec.constant,)))
        else:
            deletes.append(Statement(f"DELETE FROM {table}"))

    updates = [
        Statement(f"UPDATE {quote_identifier(table)}\nSET " + ",\n    ".join(sets))
        for table, sets in substitutions.items()
    ]
    return updates + constants + deletes
