"""
Error taxonomy for the interpretation pipeline.

Domain errors (validation, not found, no match, ambiguity) are expected outcomes
and their messages are shown to callers as-is. StoreError is deliberately
generic: the underlying storage cause is chained and logged, never exposed.
"""


class InterpretationError(Exception):
    """Base class for every failure the pipeline can report to a caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(InterpretationError):
    """Malformed input shape or arity (e.g. a diplotype that is not a pair)."""


class NotFoundError(InterpretationError):
    """Unknown gene symbol or allele name."""


class NoMatchError(InterpretationError):
    """No phenotype rule covers a computed activity score."""


class AmbiguousRuleError(InterpretationError):
    """Overlapping phenotype rules or duplicate guideline rows (strict mode only)."""


STORE_ERROR_MESSAGE = "Reference data store error"


class StoreError(InterpretationError):
    """The reference data lookup itself failed."""

    def __init__(self, message: str = STORE_ERROR_MESSAGE):
        super().__init__(message)
