"""
Exception types raised by mechanism models.
"""


class MechanismModelError(Exception):
    """Base class for errors raised by mechmodel."""


class UnhandledConfigurationError(MechanismModelError, ValueError):
    """A model was asked to apply a configuration it does not recognize."""
