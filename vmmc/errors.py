"""Exception hierarchy for the VMMC engine."""

from __future__ import annotations


class VMMCError(Exception):
    """Base class for all errors raised by vmmc."""


class ConfigurationError(VMMCError, ValueError):
    """
    Invalid geometry, dimension or array sizes.

    Raised eagerly at construction and never retried.
    """


class ModelError(VMMCError, RuntimeError):
    """
    A potential callback returned an out-of-contract result.

    Raised from the step in progress once any partial commit is rolled back.
    """
