"""
Error kinds raised by the L* learner.

None of these are retried internally: the termination argument of L* assumes a
deterministic, total target and an exact equivalence oracle, so violations are
reported to the caller instead of being masked.
"""


class LStarError(Exception):
    """Base class for all learner errors."""
    pass


class OracleFailure(LStarError):
    """Raised when a membership or equivalence oracle cannot answer."""
    pass


class InvariantViolation(LStarError):
    """Raised when the table or hypothesis reaches a state L* cannot resolve."""
    pass


class MalformedConfiguration(LStarError, ValueError):
    """Raised for empty alphabets, empty seed sets and invalid settings."""
    pass
