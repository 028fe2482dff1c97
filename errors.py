"""Exceptions raised by the evaporator model."""


class EvaporatorError(Exception):
    """Base exception for the evaporator health model."""


class ReferenceTableError(EvaporatorError, ValueError):
    """Density reference table is empty or a row is not strictly increasing."""


class InvalidConfigurationError(EvaporatorError, ValueError):
    """Stage configuration cannot be evaluated (e.g. zero design Δt)."""
