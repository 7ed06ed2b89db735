"""
Error taxonomy for the feedback pipeline.

Every failure aborts the run and reaches the caller; nothing is repaired
or retried locally.
"""


class FeedbackError(Exception):
    """Base class for every pipeline failure."""


class ExtractionError(FeedbackError):
    """The uploaded file could not be opened or read as a spreadsheet."""


class EmptyGenerationError(FeedbackError):
    """The generative service replied without any content."""


class GenerationFailedError(FeedbackError):
    """The call to the generative service raised (network, auth, quota...)."""
