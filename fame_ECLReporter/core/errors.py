# fame_ECLReporter/core/errors.py
from __future__ import annotations


class FameError(Exception):
    """
    Base of every error and condition raised or recorded by the pipeline.

    FameError
      StructuralError: the input table cannot be read; aborts the computation
        MissingColumn
        TypeMismatch
      RowCondition: recorded on the output table, never raised by the pipeline
        NoBracketingReference
        NonPositiveTime
        NoReferenceCompound
        EmptyResult
    """

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.context = context or {}


class StructuralError(FameError):
    pass


class MissingColumn(StructuralError):
    def __init__(self, column: str, context: dict | None = None):
        super().__init__(f"input table lacks column {column!r}", {"column": column, **(context or {})})
        self.column = column


class TypeMismatch(StructuralError):
    def __init__(self, column: str, value, expected: str, row: int | None = None):
        where = f" (row {row})" if row is not None else ""
        super().__init__(
            f"column {column!r}{where}: expected {expected}, got {value!r}",
            {"column": column, "value": value, "expected": expected, "row": row},
        )
        self.column = column


class RowCondition(FameError):
    pass


class NoBracketingReference(RowCondition):
    def __init__(self, mode, fatty_acid, side: str):
        super().__init__(
            f"{fatty_acid} in mode {mode.onset_temperature}/{mode.temperature_step}: "
            f"no saturated reference {side} it",
            {"mode": mode, "fatty_acid": fatty_acid, "side": side},
        )


class NonPositiveTime(RowCondition):
    def __init__(self, mode, fatty_acid, times):
        super().__init__(
            f"{fatty_acid} in mode {mode.onset_temperature}/{mode.temperature_step}: "
            f"logarithmic ECL needs positive times, got {list(times)}",
            {"mode": mode, "fatty_acid": fatty_acid, "times": tuple(times)},
        )


class NoReferenceCompound(RowCondition):
    def __init__(self, mode, reference):
        super().__init__(
            f"reference {reference} absent from mode {mode.onset_temperature}/{mode.temperature_step}",
            {"mode": mode, "reference": reference},
        )


class EmptyResult(RowCondition):
    def __init__(self, table: str):
        super().__init__(f"filter left no rows in the {table} table", {"table": table})
