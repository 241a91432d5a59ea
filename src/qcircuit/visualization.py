"""
Text rendering of states, gates and circuits.

Features:
- Compact complex-number formatting (``0.707``, ``-i``, ``0.5-0.5i``)
- Box-drawn matrices and column vectors
- ASCII circuit diagrams built from ``Circuit.gate_list()``
- State vector bar charts
- Step-by-step evolution output

Everything here returns strings; nothing is printed except by callers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

import numpy as np

from qcircuit.gates import GateKind, GateMatrix
from qcircuit.statevector import Statevector, basis_label, generate_std_basis

if TYPE_CHECKING:
    from qcircuit.circuit import Circuit, Step


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

def _num(x: float) -> str:
    return f"{x:.3g}"


def format_complex(z: complex) -> str:
    """
    Short string for a complex number, 3 significant digits.

    >>> format_complex(1j), format_complex(0.5 - 0.5j), format_complex(0)
    ('i', '0.5-0.5i', '0')
    """
    re, im = float(np.real(z)), float(np.imag(z))
    if re == 0.0 and im == 0.0:
        return "0"
    if im == 0.0:
        return _num(re)
    if im == 1.0:
        imag = "i"
    elif im == -1.0:
        imag = "-i"
    else:
        imag = _num(im) + "i"
    if re == 0.0:
        return imag
    if not imag.startswith("-"):
        imag = "+" + imag
    return _num(re) + imag


# ---------------------------------------------------------------------------
# Matrices and vectors
# ---------------------------------------------------------------------------

def _box(rows: List[List[str]]) -> str:
    """Right-align cells per column and wrap rows in box brackets."""
    if not rows:
        return ""
    widths = [max(len(row[c]) for row in rows) for c in range(len(rows[0]))]
    last = len(rows) - 1
    lines = []
    for r, row in enumerate(rows):
        if r == 0:
            left, right = "┌ ", "┐"
        elif r == last:
            left, right = "└ ", "┘"
        else:
            left, right = "| ", "|"
        body = "".join(cell.rjust(w) + " " for cell, w in zip(row, widths))
        lines.append(left + body + right)
    return "\n".join(lines)


def format_matrix(gate: GateMatrix) -> str:
    """Gate matrix as a box-drawn grid."""
    data = gate.array
    return _box([[format_complex(z) for z in row] for row in data])


def format_statevector(state: Statevector, column: bool = False) -> str:
    """State as ``[ a  b ... ]`` or, with ``column=True``, a boxed column."""
    cells = [format_complex(a) for a in state]
    if column:
        return _box([[c] for c in cells])
    return "[" + "".join(f" {c} " for c in cells) + "]"


def format_basis(n_qubits: int) -> str:
    """Every basis state of ``n_qubits`` qubits with its vector."""
    return "\n".join(
        f"|{label}> : {format_statevector(state)}"
        for label, state in generate_std_basis(n_qubits).items()
    )


def format_step(step: Step) -> str:
    """Gate and resulting state of one evolution step."""
    return "\n".join([
        f"[Step {step.index}]  {step.kind} on qubit(s) {list(step.targets)}",
        "Gate:",
        format_matrix(step.gate),
        "Current state:",
        format_statevector(step.state),
        "",
    ])


# ---------------------------------------------------------------------------
# Circuit diagrams
# ---------------------------------------------------------------------------

_BOX_LABELS = {
    GateKind.HADAMARD: "H",
    GateKind.PAULI_X: "P_X",
    GateKind.PAULI_Y: "P_Y",
    GateKind.PAULI_Z: "P_Z",
    GateKind.PHASE: "Phi",
    GateKind.IDENTITY: "I",
    GateKind.CUSTOM: "U",
}


def _angle_label(angle: float) -> str:
    for value, text in ((np.pi, "π"), (np.pi / 2, "π/2"), (np.pi / 4, "π/4")):
        if abs(angle - value) < 1e-9:
            return text
    return f"{angle:.2f}"


class CircuitDrawer:
    """
    Draw quantum circuits as ASCII art.

    Example output for ``Circuit(3).add_hadamard(0).add_cnot(0, 2)``::

        q0: ────[H]────●────
                       │
        q1: ───────────┼────
                       │
        q2: ───────────⊕────
    """

    def __init__(self, n_qubits: int):
        self.n_qubits = n_qubits
        # each column: qubit -> symbol, plus the (low, high) span it connects
        self.columns: List[Dict] = []

    def add_boxes(self, label: str, qubits) -> None:
        self.columns.append({"cells": {q: f"[{label}]" for q in qubits}, "span": None})

    def add_link(self, q1: int, q2: int, sym1: str, sym2: str) -> None:
        low, high = min(q1, q2), max(q1, q2)
        cells = {q: "┼" for q in range(low + 1, high)}
        cells[q1] = sym1
        cells[q2] = sym2
        self.columns.append({"cells": cells, "span": (low, high)})

    def draw(self) -> str:
        """Generate ASCII circuit diagram."""
        prefix_width = len(f"q{self.n_qubits - 1}: ")
        qubit_lines = [f"q{q}: ".ljust(prefix_width) + "──" for q in range(self.n_qubits)]
        gap_lines = [" " * (prefix_width + 2) for _ in range(self.n_qubits - 1)]

        for column in self.columns:
            cells = column["cells"]
            width = max(len(s) for s in cells.values()) + 4
            for q in range(self.n_qubits):
                qubit_lines[q] += cells.get(q, "").center(width, "─")
            for gap in range(self.n_qubits - 1):
                span = column["span"]
                linked = span is not None and span[0] <= gap < span[1]
                gap_lines[gap] += ("│" if linked else "").center(width)

        lines = []
        for q in range(self.n_qubits):
            lines.append(qubit_lines[q] + "──")
            if q < self.n_qubits - 1:
                lines.append(gap_lines[q].rstrip())
        return "\n".join(lines)


def draw_circuit(circuit: Circuit) -> str:
    """Draw a circuit as ASCII from its operation metadata."""
    drawer = CircuitDrawer(circuit.n_qubits)
    for op in circuit.operations:
        if op.kind == GateKind.CNOT:
            control, target = op.targets
            drawer.add_link(control, target, "●", "⊕")
        elif op.kind == GateKind.SWAP:
            drawer.add_link(op.targets[0], op.targets[1], "x", "x")
        elif op.kind == GateKind.PHASE and op.params:
            drawer.add_boxes(f"P({_angle_label(op.params[0])})", op.targets)
        else:
            drawer.add_boxes(_BOX_LABELS.get(op.kind, "U"), op.targets)
    return drawer.draw()


def format_gate_list(circuit: Circuit) -> str:
    """One line per operation: ``{ 0 1 } CNOT``."""
    return "\n".join(
        "{ " + "".join(f"{q} " for q in targets) + "} " + str(kind)
        for targets, kind in circuit.gate_list()
    )


# ---------------------------------------------------------------------------
# State charts
# ---------------------------------------------------------------------------

def show_state(state: Statevector, threshold: float = 0.01) -> str:
    """Display state vector amplitudes as an ASCII bar chart."""
    lines = ["State Vector:", "─" * 50]
    probs = state.probabilities()
    total = probs.sum()
    for i, amp in enumerate(state):
        prob = probs[i] / total if total > 0 else 0.0
        if prob < threshold:
            continue
        bitstring = basis_label(i, state.n_qubits)
        magnitude = abs(amp)
        phase = float(np.angle(amp))

        bar = "█" * int(prob * 40)

        if abs(phase) < 0.01:
            phase_str = ""
        elif abs(abs(phase) - np.pi) < 0.01:
            phase_str = " (π)"
        else:
            phase_str = f" ({phase:.2f})"

        lines.append(f"|{bitstring}⟩: {bar:40s} {magnitude:.3f}{phase_str} ({prob * 100:.1f}%)")
    return "\n".join(lines)
