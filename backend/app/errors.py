"""Error taxonomy for the interview pipeline.

GatewayError         — model backend unreachable / non-2xx / empty completion
SchemaError          — model question does not carry exactly two options
InterviewRequestError — client could not get a usable reply from the API
InterviewStateError  — intent not allowed in the session's current phase
ClientParseError     — stored blueprint is missing or unreadable
"""

from __future__ import annotations


class InterviewError(Exception):
    """Base class for all interview pipeline errors."""


class GatewayError(InterviewError):
    pass


class SchemaError(InterviewError):
    pass


class InterviewRequestError(InterviewError):
    pass


class InterviewStateError(InterviewError):
    pass


class ClientParseError(InterviewError):
    pass
