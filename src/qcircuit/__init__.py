"""
qcircuit: dense state-vector simulation of quantum circuits.

States are 2^n complex vectors, gates are 2^n x 2^n complex matrices, and a
circuit evolves a state by applying its gates in order.

Quick Start:
    >>> from qcircuit import Circuit, Statevector, evolve
    >>> qc = Circuit(2).add_hadamard(0).add_cnot(0, 1)
    >>> final = evolve(Statevector.from_label("00"), qc)
    >>> final.nonzero()  # {'00': 0.707, '11': 0.707}

Visualization:
    >>> from qcircuit import draw_circuit
    >>> print(draw_circuit(qc))
"""
__version__ = "1.0.0"

from .errors import (
    AmplitudeCountError,
    AmplitudeIndexError,
    DimensionError,
    InvalidArgumentError,
    InvalidTargetError,
    QuantumCircuitError,
    ResourceExhaustedError,
)
from .statevector import ROUND_MINIMUM, Statevector, generate_state, generate_std_basis
from .gates import (
    CNOT_4X4,
    HADAMARD_2X2,
    IDENTITY_2X2,
    PAULI_X,
    PAULI_Y,
    PAULI_Z,
    SWAP_4X4,
    GateKind,
    GateMatrix,
    apply,
    dyad,
    kron_chain,
)
from . import builders
from .circuit import Circuit, Operation, Step, evolve, evolve_steps
from .visualization import draw_circuit, format_matrix, format_statevector, show_state

__all__ = [
    # Core
    'Statevector',
    'GateMatrix',
    'GateKind',
    'Circuit',
    'Operation',
    'Step',
    'evolve',
    'evolve_steps',
    'generate_state',
    'generate_std_basis',
    'apply',
    'dyad',
    'kron_chain',
    'ROUND_MINIMUM',
    # Predefined gates
    'PAULI_X',
    'PAULI_Y',
    'PAULI_Z',
    'HADAMARD_2X2',
    'IDENTITY_2X2',
    'CNOT_4X4',
    'SWAP_4X4',
    # Errors
    'QuantumCircuitError',
    'DimensionError',
    'AmplitudeIndexError',
    'AmplitudeCountError',
    'InvalidArgumentError',
    'InvalidTargetError',
    'ResourceExhaustedError',
    # Visualization
    'draw_circuit',
    'format_matrix',
    'format_statevector',
    'show_state',
    # Submodules
    'builders',
]
