"""Exception taxonomy for the prediction feature.

Only model initialization can fail terminally for a session. Store persist
and remote lookup failures are reported but never stop offline suggestions,
and a context-key miss is not an error at all (it yields an empty list).
"""
from __future__ import annotations


class NextwordError(Exception):
    """Base class for all package errors."""


class ModelUnavailable(NextwordError):
    """The model could not be fetched or validated during initialize()."""


class ModelValidationError(ModelUnavailable):
    """A model payload does not have the expected table shape."""


class StorePersistFailure(NextwordError):
    """Writing the model blob to the key-value store failed (non-fatal)."""


class RemoteLookupFailure(NextwordError):
    """The remote predictor failed; callers degrade to zero remote words."""
