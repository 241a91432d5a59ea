"""
Quantum circuit representation and evolution.

A circuit is an append-only log of operations. Each operation stores its
target qubits together with the gate already materialized for the whole
system, so evolution is a plain left-to-right fold of matrix-vector
products.

Example
-------
>>> from qcircuit import Circuit, Statevector, evolve
>>> qc = Circuit(2).add_hadamard(0).add_cnot(0, 1)
>>> final = evolve(Statevector.from_bits([0, 0]), qc)
>>> final.nonzero()
{'00': (0.7071067811865475+0j), '11': (0.7071067811865475+0j)}
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from qcircuit import builders
from qcircuit.errors import DimensionError
from qcircuit.gates import GateKind, GateMatrix
from qcircuit.statevector import Statevector
from qcircuit.visualization import format_step

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Operation / Step
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Operation:
    """A gate applied to specific qubits, embedded in the full system."""
    targets: Tuple[int, ...]
    gate: GateMatrix
    params: Tuple[float, ...] = ()

    @property
    def kind(self) -> GateKind:
        return self.gate.kind


@dataclass(frozen=True)
class Step:
    """State of an evolution right after operation number ``index`` (1-based)."""
    index: int
    targets: Tuple[int, ...]
    gate: GateMatrix
    state: Statevector

    @property
    def kind(self) -> GateKind:
        return self.gate.kind


# ---------------------------------------------------------------------------
# Circuit
# ---------------------------------------------------------------------------

class Circuit:
    """
    Quantum circuit on ``n_qubits`` qubits.

    Gates are built eagerly when added; every ``add_*`` method returns the
    circuit so calls can be chained.

    Stored gates are read-only, so neither ``operations`` nor the steps of
    :func:`evolve_steps` can alter the circuit.

    Parameters
    ----------
    n_qubits : int
        Number of qubits, between 1 and ``builders.MAX_QUBITS``.
    name : str, optional
        Circuit name for display.

    Raises
    ------
    InvalidArgumentError
        If ``n_qubits`` is not a positive integer.
    ResourceExhaustedError
        If dense gates for ``n_qubits`` would not fit in memory.
    """

    def __init__(self, n_qubits: int, name: str = "circuit") -> None:
        self.n_qubits = builders.check_qubit_count(n_qubits)
        self.name = name
        self._operations: List[Operation] = []

    # -- Properties ---------------------------------------------------------

    @property
    def dim(self) -> int:
        return 1 << self.n_qubits

    @property
    def operations(self) -> List[Operation]:
        """List of operations in the circuit."""
        return list(self._operations)

    @property
    def depth(self) -> int:
        """Circuit depth (longest path through any qubit)."""
        if not self._operations:
            return 0
        qubit_depth = [0] * self.n_qubits
        for op in self._operations:
            max_d = max(qubit_depth[q] for q in op.targets)
            for q in op.targets:
                qubit_depth[q] = max_d + 1
        return max(qubit_depth)

    def gate_list(self) -> List[Tuple[Tuple[int, ...], GateKind]]:
        """``(targets, kind)`` per operation, in order, for rendering."""
        return [(op.targets, op.kind) for op in self._operations]

    # -- Internal helpers ---------------------------------------------------

    def _append(
        self, targets: Tuple[int, ...], gate: GateMatrix, params: Tuple[float, ...] = ()
    ) -> Circuit:
        if gate.shape != (self.dim, self.dim):
            raise DimensionError(
                f"Gate does not act on the {self.n_qubits}-qubit system",
                gate.shape, (self.dim, self.dim),
            )
        gate._freeze()
        self._operations.append(Operation(targets=targets, gate=gate, params=params))
        return self

    # -- Gates --------------------------------------------------------------

    def add_hadamard(self, *targets) -> Circuit:
        """
        Hadamard on one or more qubits in parallel.

        ``add_hadamard(0)``, ``add_hadamard(0, 2)`` and ``add_hadamard([0, 2])``
        are all accepted; several targets produce a single operation.
        """
        if len(targets) == 1 and not isinstance(targets[0], numbers.Integral):
            targets = tuple(targets[0])
        targets = builders.check_targets(self.n_qubits, targets)
        return self._append(targets, builders.hadamard(self.n_qubits, targets))

    def add_swap(self, qubit1: int, qubit2: int) -> Circuit:
        """SWAP gate."""
        gate = builders.swap(self.n_qubits, qubit1, qubit2)
        return self._append((qubit1, qubit2), gate)

    def add_cnot(self, control: int, target: int) -> Circuit:
        """CNOT (controlled-X) gate."""
        gate = builders.cnot(self.n_qubits, control, target)
        return self._append((control, target), gate)

    def add_pauli(self, target: int, axis: str) -> Circuit:
        """Pauli gate; ``axis`` is ``"X"``, ``"Y"`` or ``"Z"``."""
        gate = builders.pauli(self.n_qubits, target, axis)
        return self._append((target,), gate)

    def add_phase(self, target: int, angle: float) -> Circuit:
        """Phase gate diag(1, e^(i*angle)), angle in radians."""
        gate = builders.phase(self.n_qubits, target, angle)
        return self._append((target,), gate, (float(angle),))

    def add_gate(self, name: str, qubits: Sequence[int], params: Sequence[float] = ()) -> Circuit:
        """Add a gate by registry name (see ``builders.GATE_BUILDERS``)."""
        gate = builders.build_gate(name, self.n_qubits, qubits, params)
        return self._append(tuple(qubits), gate, tuple(float(p) for p in params))

    # Short aliases
    def h(self, *targets) -> Circuit:
        return self.add_hadamard(*targets)

    def x(self, qubit: int) -> Circuit:
        return self.add_pauli(qubit, "X")

    def y(self, qubit: int) -> Circuit:
        return self.add_pauli(qubit, "Y")

    def z(self, qubit: int) -> Circuit:
        return self.add_pauli(qubit, "Z")

    def p(self, angle: float, qubit: int) -> Circuit:
        return self.add_phase(qubit, angle)

    def cx(self, control: int, target: int) -> Circuit:
        return self.add_cnot(control, target)

    def swap(self, qubit1: int, qubit2: int) -> Circuit:
        return self.add_swap(qubit1, qubit2)

    # -- Whole-circuit operator ---------------------------------------------

    def unitary(self) -> GateMatrix:
        """Product of all gates, last gate leftmost (identity when empty)."""
        result = GateMatrix.identity(self.dim)
        for op in self._operations:
            result = op.gate @ result
        result.kind = GateKind.CUSTOM
        return result

    # -- Utility ------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._operations)

    def __iter__(self) -> Iterator[Operation]:
        return iter(list(self._operations))

    def __repr__(self) -> str:
        return f"Circuit(qubits={self.n_qubits}, ops={len(self._operations)})"


# ---------------------------------------------------------------------------
# Evolution
# ---------------------------------------------------------------------------

def evolve_steps(state: Statevector, circuit: Circuit) -> Iterator[Step]:
    """
    Apply the circuit one operation at a time.

    Yields a :class:`Step` after each operation. The circuit and the input
    state are not modified.

    Raises
    ------
    DimensionError
        If the state and circuit qubit counts differ (raised immediately),
        or a gate does not match the running state.
    """
    if state.n_qubits != circuit.n_qubits:
        raise DimensionError(
            f"A {state.n_qubits}-qubit state cannot evolve through a "
            f"{circuit.n_qubits}-qubit circuit"
        )
    return _steps(state, circuit.operations)


def _steps(state: Statevector, operations: List[Operation]) -> Iterator[Step]:
    current = state
    for index, op in enumerate(operations, start=1):
        current = op.gate @ current
        logger.debug("Step %d: %s on qubit(s) %s", index, op.kind, list(op.targets))
        yield Step(index=index, targets=op.targets, gate=op.gate, state=current)


def evolve(state: Statevector, circuit: Circuit, show_steps: bool = False) -> Statevector:
    """
    Final state after applying every operation of ``circuit`` to ``state``.

    Parameters
    ----------
    state : Statevector
        Initial state; must have ``circuit.n_qubits`` qubits.
    circuit : Circuit
        Circuit to run.
    show_steps : bool
        If True, print the gate matrix and the state after each step.
    """
    final = state.copy()
    for step in evolve_steps(state, circuit):
        if show_steps:
            print(format_step(step))
        final = step.state
    return final
