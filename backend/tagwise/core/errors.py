from __future__ import annotations


class TagwiseError(Exception):
    """Base class for errors raised by the tagging core."""


class InvalidArgumentError(TagwiseError, ValueError):
    """A request parameter is out of range; raised before any query runs."""


class UpstreamUnavailableError(TagwiseError):
    """The embedding provider (or another remote dependency) failed."""

