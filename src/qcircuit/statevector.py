"""
Dense state vectors for n-qubit systems.

A state of n qubits is stored as 2^n complex128 amplitudes ordered by
binary index, with qubit 0 as the most significant bit:

    index 5 of a 3-qubit state  ->  |101>  (qubit 0 = 1, qubit 1 = 0, qubit 2 = 1)

Every construction and arithmetic result is passed through
:func:`snap_to_zero`, which clears real or imaginary parts smaller than
``ROUND_MINIMUM``. Tiny residues from ``exp(i*theta)`` and 1/sqrt(2)
products therefore never show up as ``1e-17j`` noise.

Memory usage: 2^n * 16 bytes.
    10 qubits: 16 KB
    20 qubits: 16 MB
"""

from __future__ import annotations

import numbers
import operator
from typing import Dict, Iterator, Optional, Sequence

import numpy as np
from numpy import ndarray

from qcircuit.errors import (
    AmplitudeCountError,
    AmplitudeIndexError,
    DimensionError,
    InvalidArgumentError,
    ResourceExhaustedError,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ROUND_MINIMUM = 1e-10
"""Real/imaginary parts with magnitude below this are set to exactly 0."""

MAX_QUBITS = 10
"""Largest system for which 2^n x 2^n data (dense gates, full bases) is built."""

NAMED_STATES = ("std", "bell", "ghz", "w", "random", "zero")

_BELL_TERMS = {
    "00": ("00", "11", 1),
    "01": ("00", "11", -1),
    "10": ("01", "10", 1),
    "11": ("01", "10", -1),
}


# ---------------------------------------------------------------------------
# Array helpers
# ---------------------------------------------------------------------------

def snap_to_zero(data: ndarray, tol: float = ROUND_MINIMUM) -> ndarray:
    """Zero the real and imaginary parts of ``data`` below ``tol``, in place."""
    real = data.real
    imag = data.imag
    real[np.abs(real) < tol] = 0.0
    imag[np.abs(imag) < tol] = 0.0
    return data


def zeros_array(shape) -> ndarray:
    """Allocate a complex128 zero array, translating allocation failures."""
    try:
        return np.zeros(shape, dtype=np.complex128)
    except (MemoryError, OverflowError, ValueError) as exc:
        raise ResourceExhaustedError(
            f"Cannot allocate a dense complex array of shape {shape}"
        ) from exc


def basis_label(index: int, n_qubits: int) -> str:
    """Bit-string label of a basis index, qubit 0 first ('' for 0 qubits)."""
    if n_qubits == 0:
        return ""
    return format(index, f"0{n_qubits}b")


def _qubit_count(n_qubits) -> int:
    if isinstance(n_qubits, bool) or not isinstance(n_qubits, numbers.Integral):
        raise InvalidArgumentError(f"Qubit count must be an integer, got {n_qubits!r}")
    if n_qubits < 0:
        raise InvalidArgumentError(f"Qubit count must be non-negative, got {n_qubits}")
    return int(n_qubits)


# ---------------------------------------------------------------------------
# Statevector
# ---------------------------------------------------------------------------

class Statevector:
    """
    Complex vector of 2^n amplitudes describing an n-qubit state.

    The vector is not required to be normalized; intermediate sums such as
    ``|00> + |11>`` are valid values.

    Parameters
    ----------
    n_qubits : int
        Number of qubits. The vector starts as all zeros.

    Example
    -------
    >>> s = Statevector.from_bits([1, 0])
    >>> s.amplitudes
    array([0.+0.j, 0.+0.j, 1.+0.j, 0.+0.j])
    """

    __slots__ = ("n_qubits", "_data")
    __hash__ = None  # mutable value type
    __array_ufunc__ = None  # numpy scalars defer to our operators

    def __init__(self, n_qubits: int = 0) -> None:
        self.n_qubits = _qubit_count(n_qubits)
        self._data = zeros_array(1 << self.n_qubits)

    # -- Alternate constructors ---------------------------------------------

    @classmethod
    def _wrap(cls, data: ndarray, n_qubits: int) -> Statevector:
        """Adopt ``data`` (already owned, length 2^n) without copying."""
        obj = cls.__new__(cls)
        obj.n_qubits = n_qubits
        obj._data = snap_to_zero(data)
        return obj

    @classmethod
    def from_bits(cls, bits: Sequence[int]) -> Statevector:
        """
        One-hot basis state from a list of 0/1 qubit values.

        ``from_bits([0, 1, 1])`` is ``|011>``, amplitude 1 at index 3.
        """
        bits = list(bits)
        for b in bits:
            if b not in (0, 1):
                raise InvalidArgumentError(f"Qubit values must be 0 or 1, got {b!r}")
        state = cls(len(bits))
        index = 0
        for b in bits:
            index = (index << 1) | int(b)
        state._data[index] = 1.0
        return state

    @classmethod
    def from_label(cls, label: str) -> Statevector:
        """One-hot basis state from a bit-string such as ``"010"``."""
        if any(ch not in "01" for ch in label):
            raise InvalidArgumentError(f"Invalid basis label '{label}'")
        return cls.from_bits([int(ch) for ch in label])

    @classmethod
    def from_amplitudes(cls, amplitudes: Sequence[complex]) -> Statevector:
        """
        State from an explicit amplitude list.

        Raises
        ------
        AmplitudeCountError
            If the length is not a power of two.
        """
        data = np.array(amplitudes, dtype=np.complex128)
        if data.ndim != 1:
            raise AmplitudeCountError(
                f"Amplitudes must be a flat sequence, got shape {data.shape}"
            )
        length = data.shape[0]
        if length == 0 or length & (length - 1):
            raise AmplitudeCountError(
                f"The number of amplitudes must be a power of 2, got {length}"
            )
        return cls._wrap(data, length.bit_length() - 1)

    # -- Properties -----------------------------------------------------------

    @property
    def dim(self) -> int:
        """Number of amplitudes, 2^n."""
        return self._data.shape[0]

    @property
    def amplitudes(self) -> ndarray:
        """Copy of the amplitude array."""
        return self._data.copy()

    def label(self, index: int) -> str:
        """Bit-string label of basis index ``index``."""
        return basis_label(self._check_index(index), self.n_qubits)

    # -- Element access -------------------------------------------------------

    def _check_index(self, index) -> int:
        try:
            i = operator.index(index)
        except TypeError:
            raise AmplitudeIndexError(f"Amplitude index must be an integer, got {index!r}") from None
        if not 0 <= i < self.dim:
            raise AmplitudeIndexError(
                f"Amplitude index {i} out of bounds for {self.n_qubits}-qubit state "
                f"(0 to {self.dim - 1})"
            )
        return i

    def __getitem__(self, index: int) -> complex:
        return complex(self._data[self._check_index(index)])

    def __setitem__(self, index: int, value: complex) -> None:
        i = self._check_index(index)
        self._data[i] = value
        snap_to_zero(self._data[i:i + 1])

    def __len__(self) -> int:
        return self.dim

    def __iter__(self) -> Iterator[complex]:
        return (complex(a) for a in self._data)

    # -- Algebra --------------------------------------------------------------

    def _check_same_shape(self, other: Statevector, op: str) -> None:
        if other.n_qubits != self.n_qubits:
            raise DimensionError(
                f"Cannot {op} statevectors of {self.n_qubits} and {other.n_qubits} qubits",
                (self.dim,), (other.dim,),
            )

    def __add__(self, other: Statevector) -> Statevector:
        if not isinstance(other, Statevector):
            return NotImplemented
        self._check_same_shape(other, "add")
        return Statevector._wrap(self._data + other._data, self.n_qubits)

    def __sub__(self, other: Statevector) -> Statevector:
        if not isinstance(other, Statevector):
            return NotImplemented
        self._check_same_shape(other, "subtract")
        return Statevector._wrap(self._data - other._data, self.n_qubits)

    def __mul__(self, scalar: complex) -> Statevector:
        if not isinstance(scalar, numbers.Number):
            return NotImplemented
        return Statevector._wrap(self._data * scalar, self.n_qubits)

    __rmul__ = __mul__

    def __truediv__(self, scalar: complex) -> Statevector:
        if not isinstance(scalar, numbers.Number):
            return NotImplemented
        # Division by zero follows IEEE semantics (inf/nan), not trapped.
        with np.errstate(divide="ignore", invalid="ignore"):
            data = self._data / complex(scalar)
        return Statevector._wrap(data, self.n_qubits)

    def __neg__(self) -> Statevector:
        return Statevector._wrap(-self._data, self.n_qubits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Statevector):
            return NotImplemented
        return self.n_qubits == other.n_qubits and np.array_equal(self._data, other._data)

    def allclose(self, other: Statevector, atol: float = ROUND_MINIMUM) -> bool:
        """True if both states have the same size and amplitudes within ``atol``."""
        return self.n_qubits == other.n_qubits and np.allclose(
            self._data, other._data, rtol=0.0, atol=atol
        )

    # -- Utilities ------------------------------------------------------------

    def round(self) -> None:
        """Snap near-zero real/imaginary parts to zero, in place."""
        snap_to_zero(self._data)

    def copy(self) -> Statevector:
        return Statevector._wrap(self._data.copy(), self.n_qubits)

    def norm(self) -> float:
        return float(np.linalg.norm(self._data))

    def normalized(self) -> Statevector:
        """Return a unit-norm copy."""
        norm = self.norm()
        if norm == 0.0:
            raise InvalidArgumentError("Cannot normalize the zero vector")
        return self / norm

    def probabilities(self) -> ndarray:
        """Measurement probabilities |a_i|^2 for all basis states."""
        return np.abs(self._data) ** 2

    def nonzero(self) -> Dict[str, complex]:
        """Mapping from basis label to amplitude for non-zero amplitudes."""
        return {
            basis_label(i, self.n_qubits): complex(a)
            for i, a in enumerate(self._data)
            if a != 0
        }

    def __repr__(self) -> str:
        return f"Statevector(qubits={self.n_qubits}, dim={self.dim})"


# ---------------------------------------------------------------------------
# Basis and named states
# ---------------------------------------------------------------------------

def generate_std_basis(n_qubits: int) -> Dict[str, Statevector]:
    """
    Computational basis of ``n_qubits`` qubits.

    Returns
    -------
    dict[str, Statevector]
        ``{"00": |00>, "01": |01>, "10": |10>, "11": |11>}`` for two
        qubits, in increasing index order.

    Raises
    ------
    ResourceExhaustedError
        If ``n_qubits`` exceeds ``MAX_QUBITS``.
    """
    n = _qubit_count(n_qubits)
    if n > MAX_QUBITS:
        raise ResourceExhaustedError(
            f"The {n}-qubit basis holds {1 << n} vectors of {1 << n} amplitudes; "
            f"the limit is {MAX_QUBITS} qubits"
        )
    basis = {}
    for i in range(1 << n):
        state = Statevector(n)
        state._data[i] = 1.0
        basis[basis_label(i, n)] = state
    return basis


def generate_state(
    n_qubits: int, kind: str, label: str = "", seed: Optional[int] = None
) -> Statevector:
    """
    Build a named initial state.

    Parameters
    ----------
    n_qubits : int
        Qubit count of the system the state is for.
    kind : str
        One of ``NAMED_STATES``:

        - ``"std"``: basis state given by ``label`` (e.g. ``"0110"``)
        - ``"bell"``: Bell pair selected by a 2-bit ``label``; needs 2 qubits
        - ``"ghz"``: (|000> + |111>)/sqrt(2); needs 3 qubits
        - ``"w"``: (|001> + |010> + |100>)/sqrt(3); needs 3 qubits
        - ``"random"``: normalized random amplitudes, seeded by ``seed``
        - ``"zero"``: |00...0>
    label : str
        Bit-string for ``"std"`` and ``"bell"``.
    seed : int, optional
        Seed for ``"random"``.

    Raises
    ------
    InvalidArgumentError
        Unknown kind, bad label, or a state that does not exist for
        ``n_qubits`` (e.g. a Bell state on 3 qubits).
    ResourceExhaustedError
        If the state does not fit in memory.
    """
    n = _qubit_count(n_qubits)
    key = kind.lower()

    if key == "std":
        if len(label) != n:
            raise InvalidArgumentError(
                f"Basis label '{label}' does not match {n} qubits"
            )
        return Statevector.from_label(label)

    if key == "bell":
        _require_qubits(key, n, 2)
        if label not in _BELL_TERMS:
            raise InvalidArgumentError(
                f"Invalid Bell state '{label}'. Available: {sorted(_BELL_TERMS)}"
            )
        first, second, sign = _BELL_TERMS[label]
        basis = generate_std_basis(2)
        if sign > 0:
            return (basis[first] + basis[second]) / np.sqrt(2)
        return (basis[first] - basis[second]) / np.sqrt(2)

    if key == "ghz":
        _require_qubits(key, n, 3)
        basis = generate_std_basis(3)
        return (basis["000"] + basis["111"]) / np.sqrt(2)

    if key == "w":
        _require_qubits(key, n, 3)
        basis = generate_std_basis(3)
        return (basis["001"] + basis["010"] + basis["100"]) / np.sqrt(3)

    if key == "random":
        rng = np.random.default_rng(seed)
        dim = 1 << n
        try:
            data = rng.random(dim) + 1j * rng.random(dim)
        except (MemoryError, OverflowError, ValueError) as exc:
            raise ResourceExhaustedError(
                f"Cannot allocate a random state of {n} qubits"
            ) from exc
        return Statevector._wrap(data / np.linalg.norm(data), n)

    if key == "zero":
        return Statevector.from_bits([0] * n)

    raise InvalidArgumentError(
        f"Unknown state kind '{kind}'. Available: {list(NAMED_STATES)}"
    )


def _require_qubits(kind: str, n_qubits: int, required: int) -> None:
    if n_qubits != required:
        raise InvalidArgumentError(
            f"The {kind.upper()} state needs {required} qubits, "
            f"the system has {n_qubits}"
        )
