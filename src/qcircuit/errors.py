"""
Exception hierarchy for qcircuit.

Every error subclasses both :class:`QuantumCircuitError` and the closest
built-in exception, so callers may catch either.
"""

from __future__ import annotations


class QuantumCircuitError(Exception):
    """Base class for all qcircuit errors."""


class DimensionError(QuantumCircuitError, ValueError):
    """Operand shapes are incompatible for the requested operation."""

    def __init__(self, message: str, lhs: tuple = (), rhs: tuple = ()) -> None:
        if lhs and rhs:
            message = f"{message} (got {_shape_str(lhs)} and {_shape_str(rhs)})"
        super().__init__(message)
        self.lhs = lhs
        self.rhs = rhs


class AmplitudeIndexError(QuantumCircuitError, IndexError):
    """Amplitude or matrix element access out of bounds."""


class InvalidArgumentError(QuantumCircuitError, ValueError):
    """An argument has an invalid value (bad length, unknown state name...)."""


class InvalidTargetError(InvalidArgumentError):
    """Qubit indices are out of range, negative or duplicated."""


class AmplitudeCountError(DimensionError, InvalidArgumentError):
    """An amplitude list whose length is not a power of two."""


class ResourceExhaustedError(QuantumCircuitError, MemoryError):
    """The requested qubit count does not fit in dense memory."""


def _shape_str(shape: tuple) -> str:
    return "x".join(str(d) for d in shape)
