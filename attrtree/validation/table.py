"""
Table Row Validation

Checks every row of a table against its column declarations: first the row
length, then (only when the length is right) each column's validator on the
matching cell. Rows are independent of each other.
"""

import logging
from typing import Any, Iterator, NamedTuple, Sequence, Tuple, Union

from ..core.path import ReadOnlyPath
from ..exceptions.errors import PathError, VariantMismatch
from .failures import RowLengthMismatch, ValidationFailure
from .validator import Validator


class ColumnRule(NamedTuple):
    """A column label and the validator applied to each of its cells"""

    name: str
    validator: Validator


def _column_rule(column: Any) -> ColumnRule:
    if isinstance(column, ColumnRule):
        return column
    if hasattr(column, "name") and hasattr(column, "validator"):
        return ColumnRule(column.name, column.validator)
    return ColumnRule(*column)


class TableRowValidator(Validator):
    """
    Validates the rows of the table at ``table_path``

    ``table_path`` points at the rows (e.g. ``$.table_value``). Cell
    validators see the cell Attribute as their root; their failures are
    reported at ``table_path[row][column]`` with ``row`` and ``column`` in
    the details.

    With ``report_length=False`` rows of the wrong length are skipped
    silently, for use next to a validator that already reports them.
    """

    def __init__(
        self,
        table_path: ReadOnlyPath,
        columns: Sequence[Union[ColumnRule, Tuple[str, Validator], Any]],
        report_length: bool = True,
    ):
        self.table_path = table_path
        self.report_length = report_length
        self.columns = tuple(_column_rule(column) for column in columns)
        self.logger = logging.getLogger(self.__class__.__name__)

    def failures(self, root: Any) -> Iterator[ValidationFailure]:
        try:
            # One snapshot per run: length and cell checks see the same rows.
            rows = tuple(self.table_path.get(root))
        except VariantMismatch as e:
            yield ValidationFailure(self.table_path, e.message, "variant_mismatch", dict(e.details), e)
            return
        except PathError as e:
            yield ValidationFailure(self.table_path, "Does not exist", "missing", cause=e)
            return
        except TypeError as e:
            yield ValidationFailure(
                self.table_path, f"Not a table: {e}", "variant_mismatch", cause=e
            )
            return

        self.logger.debug("Validating %d rows at %s", len(rows), self.table_path)
        expected = len(self.columns)
        for row_index, row in enumerate(rows):
            row_path = self.table_path[row_index]
            try:
                actual = len(row)
            except TypeError as e:
                yield ValidationFailure(row_path, f"Not a row: {e}", "variant_mismatch", cause=e)
                continue
            if actual != expected:
                if self.report_length:
                    yield RowLengthMismatch(row_path, row_index, expected, actual)
                continue

            for column_index, (column, cell) in enumerate(zip(self.columns, row)):
                cell_path = row_path[column_index]
                for failure in column.validator.failures(cell):
                    prefixed = failure.with_prefix(cell_path)
                    prefixed.details.setdefault("row", row_index)
                    prefixed.details.setdefault("column", column.name)
                    yield prefixed
