"""
Builders that embed primitive gates into an n-qubit system.

Every builder returns a full 2^n x 2^n :class:`GateMatrix` tagged with the
primitive's kind.

Single-qubit gates (Hadamard, Pauli, Phase) are Kronecker chains with qubit
0 as the leftmost factor:

    hadamard(3, 1)  =  I ⊗ H ⊗ I

CNOT and SWAP may act on non-adjacent qubits, so they are assembled from
their action on the computational basis instead:

    CNOT  =  sum over |b>  of  |image(b)><b|

Gate categories:
    - Single-qubit: hadamard (one or many targets), pauli, phase
    - Two-qubit: cnot, swap
"""

from __future__ import annotations

import logging
import numbers
from typing import Callable, Dict, Mapping, Sequence, Tuple, Union

import numpy as np

from qcircuit.errors import InvalidArgumentError, InvalidTargetError, ResourceExhaustedError
from qcircuit.gates import (
    HADAMARD_2X2,
    IDENTITY_2X2,
    PAULI_X,
    PAULI_Y,
    PAULI_Z,
    GateKind,
    GateMatrix,
    kron_chain,
)
from qcircuit.statevector import MAX_QUBITS, generate_std_basis

logger = logging.getLogger(__name__)

Targets = Union[int, Sequence[int]]

_PAULI_GATES = {
    "X": (PAULI_X, GateKind.PAULI_X),
    "Y": (PAULI_Y, GateKind.PAULI_Y),
    "Z": (PAULI_Z, GateKind.PAULI_Z),
}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def check_qubit_count(n_qubits: int) -> int:
    """Validate a system size for dense gate construction."""
    if isinstance(n_qubits, bool) or not isinstance(n_qubits, numbers.Integral):
        raise InvalidArgumentError(f"Qubit count must be an integer, got {n_qubits!r}")
    if n_qubits < 1:
        raise InvalidArgumentError(f"Need at least 1 qubit, got {n_qubits}")
    if n_qubits > MAX_QUBITS:
        raise ResourceExhaustedError(
            f"{n_qubits} qubits need {16 * 4 ** n_qubits} bytes per dense gate; "
            f"the limit is {MAX_QUBITS} qubits"
        )
    return int(n_qubits)


def check_targets(n_qubits: int, targets: Targets) -> Tuple[int, ...]:
    """Normalize ``targets`` to a tuple and check range and uniqueness."""
    if isinstance(targets, numbers.Integral) and not isinstance(targets, bool):
        targets = (targets,)
    targets = tuple(targets)
    if not targets:
        raise InvalidTargetError("At least one target qubit is required")
    for q in targets:
        if isinstance(q, bool) or not isinstance(q, numbers.Integral):
            raise InvalidTargetError(f"Qubit index must be an integer, got {q!r}")
        if not 0 <= q < n_qubits:
            raise InvalidTargetError(
                f"Qubit {q} is out of range. "
                f"Circuit has {n_qubits} qubits (0 to {n_qubits - 1})."
            )
    if len(set(targets)) != len(targets):
        raise InvalidTargetError(f"Duplicate qubits in {targets}")
    return tuple(int(q) for q in targets)


# ---------------------------------------------------------------------------
# Kronecker-chain builders
# ---------------------------------------------------------------------------

def local_gate(
    n_qubits: int, factors: Mapping[int, GateMatrix], kind: GateKind = GateKind.CUSTOM
) -> GateMatrix:
    """
    Chain of n 2x2 factors: ``factors[q]`` at position q, identity elsewhere.

    Position 0 is the leftmost (most significant) factor.
    """
    n = check_qubit_count(n_qubits)
    if factors:
        check_targets(n, tuple(factors))
    chain = [factors.get(q, IDENTITY_2X2) for q in range(n)]
    gate = kron_chain(chain)
    gate.kind = kind
    return gate


def hadamard(n_qubits: int, targets: Targets) -> GateMatrix:
    """Hadamard on one qubit, or in parallel on several, of an n-qubit system."""
    n = check_qubit_count(n_qubits)
    targets = check_targets(n, targets)
    logger.debug("Building Hadamard on %s for %d qubits", targets, n)
    return local_gate(n, {q: HADAMARD_2X2 for q in targets}, GateKind.HADAMARD)


def pauli(n_qubits: int, target: int, axis: str) -> GateMatrix:
    """
    Pauli gate on ``target``.

    Parameters
    ----------
    axis : str
        ``"X"``, ``"Y"`` or ``"Z"`` (case-insensitive).
    """
    n = check_qubit_count(n_qubits)
    (target,) = check_targets(n, target)
    key = str(axis).upper()
    if key not in _PAULI_GATES:
        raise InvalidArgumentError(
            f"Unknown Pauli axis '{axis}'. Available: {sorted(_PAULI_GATES)}"
        )
    local, kind = _PAULI_GATES[key]
    logger.debug("Building Pauli-%s on qubit %d for %d qubits", key, target, n)
    return local_gate(n, {target: local}, kind)


def phase_2x2(angle: float) -> GateMatrix:
    """Local phase gate diag(1, e^(i*angle))."""
    return GateMatrix.from_elements(GateKind.PHASE, 2, [1, 0, 0, np.exp(1j * angle)])


def phase(n_qubits: int, target: int, angle: float) -> GateMatrix:
    """
    Phase gate diag(1, e^(i*angle)) on ``target``.

    Qubit 0 is the most significant bit, so for ``target == 0`` the phase
    lands on the whole second half of the diagonal and the gate is written
    directly instead of through a Kronecker chain.
    """
    n = check_qubit_count(n_qubits)
    (target,) = check_targets(n, target)
    if isinstance(angle, bool) or not isinstance(angle, numbers.Real):
        raise InvalidArgumentError(f"Phase angle must be a real number, got {angle!r}")
    logger.debug("Building Phase(%.6g) on qubit %d for %d qubits", angle, target, n)

    if target == 0 and n > 1:
        dim = 1 << n
        gate = GateMatrix.identity(dim)
        factor = np.exp(1j * angle)
        for i in range(dim // 2, dim):
            gate[i, i] = factor
        gate.kind = GateKind.PHASE
        return gate

    return local_gate(n, {target: phase_2x2(angle)}, GateKind.PHASE)


# ---------------------------------------------------------------------------
# Basis-projector builders
# ---------------------------------------------------------------------------

def _projector_sum(
    n_qubits: int, image: Callable[[str], str], kind: GateKind
) -> GateMatrix:
    """
    Sum of |image(b)><b| over every basis label b.

    The images and originals are stacked as columns K and B, so the whole
    sum is the single product K B^dagger, rounded once.
    """
    basis = generate_std_basis(n_qubits)
    kets = np.column_stack([basis[image(label)].amplitudes for label in basis])
    bras = np.column_stack([state.amplitudes for state in basis.values()])
    return GateMatrix.from_array(kets @ bras.conj().T, kind)


def cnot(n_qubits: int, control: int, target: int) -> GateMatrix:
    """Controlled-NOT: flips ``target`` on basis states where ``control`` is 1."""
    n = check_qubit_count(n_qubits)
    control, target = check_targets(n, (control, target))
    logger.debug("Building CNOT(control=%d, target=%d) for %d qubits", control, target, n)

    def image(label: str) -> str:
        if label[control] != "1":
            return label
        bits = list(label)
        bits[target] = "0" if bits[target] == "1" else "1"
        return "".join(bits)

    return _projector_sum(n, image, GateKind.CNOT)


def swap(n_qubits: int, qubit1: int, qubit2: int) -> GateMatrix:
    """SWAP: exchanges the values of two qubits."""
    n = check_qubit_count(n_qubits)
    qubit1, qubit2 = check_targets(n, (qubit1, qubit2))
    logger.debug("Building SWAP(%d, %d) for %d qubits", qubit1, qubit2, n)

    def image(label: str) -> str:
        if label[qubit1] == label[qubit2]:
            return label
        bits = list(label)
        bits[qubit1], bits[qubit2] = bits[qubit2], bits[qubit1]
        return "".join(bits)

    return _projector_sum(n, image, GateKind.SWAP)


# ---------------------------------------------------------------------------
# Gate registry
# ---------------------------------------------------------------------------

GATE_BUILDERS: Dict[str, dict] = {
    # n_qubits None means "one or more targets"
    "h": {"builder": lambda n, q, p: hadamard(n, q), "n_qubits": None, "n_params": 0},
    "x": {"builder": lambda n, q, p: pauli(n, q[0], "X"), "n_qubits": 1, "n_params": 0},
    "y": {"builder": lambda n, q, p: pauli(n, q[0], "Y"), "n_qubits": 1, "n_params": 0},
    "z": {"builder": lambda n, q, p: pauli(n, q[0], "Z"), "n_qubits": 1, "n_params": 0},
    "p": {"builder": lambda n, q, p: phase(n, q[0], p[0]), "n_qubits": 1, "n_params": 1},
    "cx": {"builder": lambda n, q, p: cnot(n, q[0], q[1]), "n_qubits": 2, "n_params": 0},
    "swap": {"builder": lambda n, q, p: swap(n, q[0], q[1]), "n_qubits": 2, "n_params": 0},
}
GATE_BUILDERS["hadamard"] = GATE_BUILDERS["h"]
GATE_BUILDERS["phase"] = GATE_BUILDERS["p"]
GATE_BUILDERS["cnot"] = GATE_BUILDERS["cx"]


def build_gate(
    name: str,
    n_qubits: int,
    qubits: Sequence[int],
    params: Sequence[float] = (),
) -> GateMatrix:
    """
    Look up a builder by name and materialize the gate.

    Raises
    ------
    InvalidArgumentError
        Unknown name, or wrong number of qubits or parameters.
    """
    key = name.lower()
    if key not in GATE_BUILDERS:
        raise InvalidArgumentError(
            f"Unknown gate: '{name}'. Available: {sorted(GATE_BUILDERS)}"
        )
    info = GATE_BUILDERS[key]
    qubits = tuple(qubits)
    params = tuple(params)
    if info["n_qubits"] is not None and len(qubits) != info["n_qubits"]:
        raise InvalidArgumentError(
            f"Gate '{name}' acts on {info['n_qubits']} qubit(s), got {len(qubits)}"
        )
    if len(params) != info["n_params"]:
        raise InvalidArgumentError(
            f"Gate '{name}' requires {info['n_params']} parameter(s), got {len(params)}"
        )
    return info["builder"](n_qubits, qubits, params)
