"""Errors raised while turning a feature table into a diagram.

All of them derive from ``ValueError`` so callers that only care about bad
input can catch one type.
"""


class FeatureTableError(ValueError):
    """The feature table cannot be laid out."""


class EmptyInputError(FeatureTableError):
    """The table has no rows, or no CHAIN row to anchor a track."""


class InvalidCoordinateError(FeatureTableError):
    """A begin/end coordinate is missing, negative, non-finite or inverted."""


class UnknownTrackError(FeatureTableError):
    """A feature references an ``order`` that has no CHAIN row."""


class DuplicateTrackError(FeatureTableError):
    """More than one CHAIN row shares the same ``order``."""
