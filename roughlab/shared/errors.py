#!/usr/bin/env python3
"""Exceptions raised while building datasets and scoring subsets."""

from __future__ import annotations


class RoughSetError(ValueError):
    """Base class for roughlab errors."""


class InvalidDataError(RoughSetError):
    """Raised when a dataset fails validity or capability checks at build time."""


class InvalidSubsetError(RoughSetError):
    """Raised when an attribute subset cannot be evaluated, e.g. it holds the label index."""
