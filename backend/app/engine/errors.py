"""
Engine Errors

Exceptions raised by the session / inquiry engines.  Routes translate
these into HTTP status codes; the engines never import FastAPI.
"""

from __future__ import annotations


class InquiryError(Exception):
    """Base class for all engine errors."""


class NotFoundError(InquiryError):
    """A referenced session or inquiry does not exist."""


class InvalidInputError(InquiryError):
    """A required field is missing or empty."""


class NotReadyError(InquiryError):
    """The operation needs an inquiry that has finished processing."""


class TransformError(InquiryError):
    """Internal failure while shaping table data for a chart.

    Always recovered inside the pipeline; never reaches a client.
    """
