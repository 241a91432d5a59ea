"""
Dense gate matrices.

A :class:`GateMatrix` is a complex128 matrix tagged with a :class:`GateKind`.
Gates built for an n-qubit circuit are always 2^n x 2^n; rows and columns
are stored separately so that the same type also serves as a general
matrix during intermediate algebra.

Indexing is 0-based. The textbook element (i, j) with 1-based i, j is
``gate[i - 1, j - 1]``.

Predefined primitives:
    - Single-qubit: PAULI_X, PAULI_Y, PAULI_Z, HADAMARD_2X2, IDENTITY_2X2
    - Two-qubit: CNOT_4X4, SWAP_4X4

The predefined primitives are read-only; ``.copy()`` one to modify it.
"""

from __future__ import annotations

import enum
import numbers
import operator
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np
from numpy import ndarray

from qcircuit.errors import (
    AmplitudeIndexError,
    DimensionError,
    InvalidArgumentError,
    ResourceExhaustedError,
)
from qcircuit.statevector import ROUND_MINIMUM, Statevector, snap_to_zero, zeros_array

_SQRT2_INV = 1.0 / np.sqrt(2.0)


class GateKind(enum.Enum):
    """Which primitive a gate matrix was built from."""

    HADAMARD = "Hadamard"
    SWAP = "Swap"
    CNOT = "CNOT"
    PAULI_X = "PauliX"
    PAULI_Y = "PauliY"
    PAULI_Z = "PauliZ"
    PHASE = "Phase"
    IDENTITY = "Identity"
    CUSTOM = "Custom"

    def __str__(self) -> str:
        return self.value


class GateMatrix:
    """
    Complex matrix representing a (usually unitary) operator.

    Parameters
    ----------
    rows : int
        Number of rows.
    cols : int, optional
        Number of columns. Defaults to ``rows`` (square).
    kind : GateKind
        Tag describing the gate. Algebraic results are always CUSTOM.

    Example
    -------
    >>> (HADAMARD_2X2 @ HADAMARD_2X2).allclose(IDENTITY_2X2)
    True
    """

    __slots__ = ("_kind", "_data")
    __hash__ = None
    __array_ufunc__ = None  # numpy scalars defer to our operators

    def __init__(self, rows: int, cols: Optional[int] = None, kind: GateKind = GateKind.CUSTOM) -> None:
        if cols is None:
            cols = rows
        for d in (rows, cols):
            if isinstance(d, bool) or not isinstance(d, numbers.Integral) or d < 0:
                raise InvalidArgumentError(f"Matrix dimensions must be non-negative integers, got {d!r}")
        self._kind = kind
        self._data = zeros_array((int(rows), int(cols)))

    # -- Alternate constructors ---------------------------------------------

    @classmethod
    def _wrap(cls, data: ndarray, kind: GateKind = GateKind.CUSTOM) -> GateMatrix:
        obj = cls.__new__(cls)
        obj._kind = kind
        obj._data = snap_to_zero(data)
        return obj

    @classmethod
    def from_elements(
        cls, kind: GateKind, size: int, elements: Iterable[complex]
    ) -> GateMatrix:
        """
        Square ``size`` x ``size`` gate filled row-major from ``elements``.

        Raises
        ------
        InvalidArgumentError
            If ``elements`` does not hold exactly ``size**2`` values.
        """
        data = np.array(list(elements), dtype=np.complex128)
        if data.ndim != 1 or data.shape[0] != size * size:
            raise InvalidArgumentError(
                f"A {size}x{size} gate needs {size * size} elements, got {data.size}"
            )
        return cls._wrap(data.reshape(size, size), kind)

    @classmethod
    def from_array(cls, array, kind: GateKind = GateKind.CUSTOM) -> GateMatrix:
        """Gate from any 2-D array-like (copied)."""
        data = np.array(array, dtype=np.complex128)
        if data.ndim != 2:
            raise InvalidArgumentError(f"Expected a 2-D array, got shape {data.shape}")
        return cls._wrap(data, kind)

    @classmethod
    def identity(cls, dim: int) -> GateMatrix:
        gate = cls(dim, kind=GateKind.IDENTITY)
        np.fill_diagonal(gate._data, 1.0)
        return gate

    @classmethod
    def zeros(cls, dim: int) -> GateMatrix:
        return cls(dim)

    # -- Properties -----------------------------------------------------------

    @property
    def kind(self) -> GateKind:
        return self._kind

    @kind.setter
    def kind(self, kind: GateKind) -> None:
        if self.read_only:
            raise TypeError(f"{self._kind} gate is read-only; use .copy() to retag it")
        self._kind = kind

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    @property
    def size(self) -> int:
        """Total number of elements, rows * cols."""
        return self._data.size

    @property
    def array(self) -> ndarray:
        """Copy of the underlying matrix."""
        return self._data.copy()

    @property
    def read_only(self) -> bool:
        return not self._data.flags.writeable

    # -- Element access -------------------------------------------------------

    def _check_index(self, key) -> Tuple[int, int]:
        try:
            row, col = key
            row, col = operator.index(row), operator.index(col)
        except (TypeError, ValueError):
            raise AmplitudeIndexError(
                f"Gate elements are addressed as gate[row, col], got {key!r}"
            ) from None
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise AmplitudeIndexError(
                f"Element ({row}, {col}) out of bounds for {self.rows}x{self.cols} matrix"
            )
        return row, col

    def __getitem__(self, key: Tuple[int, int]) -> complex:
        return complex(self._data[self._check_index(key)])

    def __setitem__(self, key: Tuple[int, int], value: complex) -> None:
        if self.read_only:
            raise TypeError(f"{self.kind} gate is read-only; use .copy() to modify it")
        row, col = self._check_index(key)
        self._data[row, col] = value
        snap_to_zero(self._data[row, col:col + 1])

    # -- Algebra --------------------------------------------------------------

    def _check_same_shape(self, other: GateMatrix, op: str) -> None:
        if self.shape != other.shape:
            raise DimensionError(f"Cannot {op} matrices", self.shape, other.shape)

    def __add__(self, other: GateMatrix) -> GateMatrix:
        if not isinstance(other, GateMatrix):
            return NotImplemented
        self._check_same_shape(other, "add")
        return GateMatrix._wrap(self._data + other._data)

    def __sub__(self, other: GateMatrix) -> GateMatrix:
        if not isinstance(other, GateMatrix):
            return NotImplemented
        self._check_same_shape(other, "subtract")
        return GateMatrix._wrap(self._data - other._data)

    def __iadd__(self, other: GateMatrix) -> GateMatrix:
        if not isinstance(other, GateMatrix):
            return NotImplemented
        if self.read_only:
            return self + other
        self._check_same_shape(other, "add")
        self._data += other._data
        snap_to_zero(self._data)
        self.kind = GateKind.CUSTOM
        return self

    def __neg__(self) -> GateMatrix:
        return GateMatrix._wrap(-self._data)

    def __matmul__(self, other: Union[GateMatrix, Statevector]):
        if isinstance(other, Statevector):
            return apply(self, other)
        if not isinstance(other, GateMatrix):
            return NotImplemented
        if self.cols != other.rows:
            raise DimensionError("Cannot multiply matrices", self.shape, other.shape)
        return GateMatrix._wrap(self._data @ other._data)

    def __mul__(self, other):
        """Matrix product with a gate or state, element-wise scale with a number."""
        if isinstance(other, (GateMatrix, Statevector)):
            return self.__matmul__(other)
        if isinstance(other, numbers.Number):
            return GateMatrix._wrap(self._data * other)
        return NotImplemented

    def __rmul__(self, scalar):
        if isinstance(scalar, numbers.Number):
            return GateMatrix._wrap(self._data * scalar)
        return NotImplemented

    def kronecker(self, other: GateMatrix) -> GateMatrix:
        """
        Tensor product ``self ⊗ other``.

        Element (i*other.rows + k, j*other.cols + l) of the result is
        ``self[i, j] * other[k, l]``.
        """
        if not isinstance(other, GateMatrix):
            raise TypeError(f"kronecker() needs a GateMatrix, got {type(other).__name__}")
        try:
            data = np.kron(self._data, other._data)
        except MemoryError as exc:
            raise ResourceExhaustedError(
                f"Kronecker product of {self.rows}x{self.cols} and "
                f"{other.rows}x{other.cols} matrices does not fit in memory"
            ) from exc
        return GateMatrix._wrap(data)

    def dagger(self) -> GateMatrix:
        """Conjugate transpose."""
        return GateMatrix._wrap(self._data.conj().T.copy())

    def is_unitary(self, tol: float = 1e-9) -> bool:
        """Check U†U = I."""
        if self.rows != self.cols:
            return False
        product = self._data.conj().T @ self._data
        return bool(np.allclose(product, np.eye(self.rows), atol=tol))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GateMatrix):
            return NotImplemented
        return np.array_equal(self._data, other._data)

    def allclose(self, other: GateMatrix, atol: float = ROUND_MINIMUM) -> bool:
        """Element-wise comparison within ``atol``; kinds are ignored."""
        return self.shape == other.shape and bool(
            np.allclose(self._data, other._data, rtol=0.0, atol=atol)
        )

    # -- Utilities ------------------------------------------------------------

    def round(self) -> None:
        """Snap near-zero real/imaginary parts to zero, in place."""
        if not self.read_only:
            snap_to_zero(self._data)

    def copy(self) -> GateMatrix:
        """Writable copy with the same kind."""
        return GateMatrix._wrap(self._data.copy(), self.kind)

    def _freeze(self) -> GateMatrix:
        self._data.setflags(write=False)
        return self

    def __repr__(self) -> str:
        return f"GateMatrix(kind={self.kind}, shape={self.rows}x{self.cols})"


# ---------------------------------------------------------------------------
# Free functions
# ---------------------------------------------------------------------------

def apply(gate: GateMatrix, state: Statevector) -> Statevector:
    """
    Matrix-vector product ``gate |state>``.

    ``result[i] = sum_j gate[i, j] * state[j]``.

    Raises
    ------
    DimensionError
        If ``gate.cols != state.dim`` or the result length is not a
        power of two.
    """
    if gate.cols != state.dim:
        raise DimensionError(
            "Cannot multiply matrix with vector", gate.shape, (state.dim, 1)
        )
    rows = gate.rows
    if rows == 0 or rows & (rows - 1):
        raise DimensionError(f"Result of length {rows} is not a qubit state")
    return Statevector._wrap(gate._data @ state._data, rows.bit_length() - 1)


def dyad(ket: Statevector, bra: Statevector) -> GateMatrix:
    """
    Outer product ``|ket><bra|``.

    Raises
    ------
    DimensionError
        If the two states differ in size.
    """
    if ket.dim != bra.dim:
        raise DimensionError("Cannot form the dyad of vectors", (ket.dim, 1), (bra.dim, 1))
    return GateMatrix._wrap(np.outer(ket._data, bra._data.conj()))


def kron_chain(factors: Sequence[GateMatrix]) -> GateMatrix:
    """``factors[0] ⊗ factors[1] ⊗ ...``, first factor most significant."""
    if not factors:
        raise InvalidArgumentError("kron_chain() needs at least one factor")
    result = factors[0].copy()
    for factor in factors[1:]:
        result = result.kronecker(factor)
    return result


# ---------------------------------------------------------------------------
# Predefined gates
# ---------------------------------------------------------------------------

PAULI_X = GateMatrix.from_elements(GateKind.PAULI_X, 2, [
    0, 1,
    1, 0,
])._freeze()
"""Pauli-X (NOT) gate."""

PAULI_Y = GateMatrix.from_elements(GateKind.PAULI_Y, 2, [
    0, -1j,
    1j, 0,
])._freeze()
"""Pauli-Y gate."""

PAULI_Z = GateMatrix.from_elements(GateKind.PAULI_Z, 2, [
    1, 0,
    0, -1,
])._freeze()
"""Pauli-Z gate."""

HADAMARD_2X2 = GateMatrix.from_elements(GateKind.HADAMARD, 2, [
    _SQRT2_INV, _SQRT2_INV,
    _SQRT2_INV, -_SQRT2_INV,
])._freeze()
"""Hadamard gate."""

IDENTITY_2X2 = GateMatrix.from_elements(GateKind.IDENTITY, 2, [
    1, 0,
    0, 1,
])._freeze()
"""Identity gate."""

CNOT_4X4 = GateMatrix.from_elements(GateKind.CNOT, 4, [
    1, 0, 0, 0,
    0, 1, 0, 0,
    0, 0, 0, 1,
    0, 0, 1, 0,
])._freeze()
"""Controlled-NOT, control on the first qubit: swaps |10> and |11>."""

SWAP_4X4 = GateMatrix.from_elements(GateKind.SWAP, 4, [
    1, 0, 0, 0,
    0, 0, 1, 0,
    0, 1, 0, 0,
    0, 0, 0, 1,
])._freeze()
"""SWAP gate: swaps |01> and |10>."""

PREDEFINED_GATES = {
    "X": PAULI_X,
    "Y": PAULI_Y,
    "Z": PAULI_Z,
    "H": HADAMARD_2X2,
    "I": IDENTITY_2X2,
    "CNOT": CNOT_4X4,
    "SWAP": SWAP_4X4,
}
