"""Tests for Circuit construction and evolution."""

import numpy as np
import pytest

from qcircuit import (
    HADAMARD_2X2,
    Circuit,
    DimensionError,
    GateKind,
    GateMatrix,
    InvalidArgumentError,
    InvalidTargetError,
    ResourceExhaustedError,
    Statevector,
    evolve,
    evolve_steps,
    generate_state,
)
from qcircuit.builders import MAX_QUBITS, phase

SQRT2_INV = 1 / np.sqrt(2)


@pytest.fixture
def bell_circuit():
    return Circuit(2).add_hadamard(0).add_cnot(0, 1)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:

    def test_empty(self):
        qc = Circuit(3)
        assert qc.n_qubits == 3
        assert qc.dim == 8
        assert len(qc) == 0
        assert qc.depth == 0
        assert qc.gate_list() == []

    @pytest.mark.parametrize("n", [0, -1])
    def test_invalid_size(self, n):
        with pytest.raises(InvalidArgumentError):
            Circuit(n)

    def test_too_large(self):
        with pytest.raises(ResourceExhaustedError):
            Circuit(MAX_QUBITS + 1)

    def test_chaining_returns_circuit(self):
        qc = Circuit(2)
        assert qc.add_hadamard(0) is qc
        assert qc.add_cnot(0, 1) is qc
        assert qc.add_swap(0, 1) is qc
        assert qc.add_pauli(1, "X") is qc
        assert qc.add_phase(0, 0.5) is qc
        assert len(qc) == 5

    def test_gate_list(self):
        qc = Circuit(3).add_hadamard(0).add_cnot(0, 1).add_pauli(2, "X").add_phase(1, 1.0)
        assert qc.gate_list() == [
            ((0,), GateKind.HADAMARD),
            ((0, 1), GateKind.CNOT),
            ((2,), GateKind.PAULI_X),
            ((1,), GateKind.PHASE),
        ]

    @pytest.mark.parametrize("args", [(0, 2), ([0, 2],), ((0, 2),)])
    def test_parallel_hadamard_forms(self, args):
        qc = Circuit(3).add_hadamard(*args)
        assert len(qc) == 1
        assert qc.operations[0].targets == (0, 2)

    def test_gates_act_on_whole_system(self):
        qc = Circuit(3).add_pauli(1, "Z").add_swap(0, 2)
        for op in qc:
            assert op.gate.shape == (8, 8)

    def test_phase_records_angle(self):
        qc = Circuit(1).add_phase(0, np.pi / 2)
        assert qc.operations[0].params == (np.pi / 2,)

    def test_add_gate_by_name(self):
        by_name = Circuit(2).add_gate("p", [1], [np.pi])
        direct = Circuit(2).add_phase(1, np.pi)
        assert by_name.operations[0].gate.allclose(direct.operations[0].gate)
        assert by_name.gate_list() == direct.gate_list()

    def test_short_aliases(self):
        qc = Circuit(2).h(0).cx(0, 1).x(0).y(1).z(0).p(0.25, 1).swap(0, 1)
        kinds = [kind for _, kind in qc.gate_list()]
        assert kinds == [
            GateKind.HADAMARD, GateKind.CNOT, GateKind.PAULI_X, GateKind.PAULI_Y,
            GateKind.PAULI_Z, GateKind.PHASE, GateKind.SWAP,
        ]

    def test_invalid_target_leaves_circuit_unchanged(self):
        qc = Circuit(2).add_hadamard(0)
        with pytest.raises(InvalidTargetError):
            qc.add_cnot(0, 5)
        with pytest.raises(InvalidTargetError):
            qc.add_swap(1, 1)
        assert len(qc) == 1

    def test_wrong_size_gate_rejected(self):
        with pytest.raises(DimensionError):
            Circuit(2)._append((0,), HADAMARD_2X2)

    def test_operations_is_a_copy(self, bell_circuit):
        bell_circuit.operations.clear()
        assert len(bell_circuit) == 2

    def test_stored_gates_are_read_only(self):
        qc = Circuit(1).add_pauli(0, "X")
        gate = qc.operations[0].gate
        assert gate.read_only
        with pytest.raises(TypeError):
            gate[0, 1] = 0
        with pytest.raises(TypeError):
            gate.kind = GateKind.CUSTOM
        assert evolve(Statevector.from_label("0"), qc) == Statevector.from_label("1")

    def test_depth(self):
        qc = Circuit(3).add_hadamard(0).add_cnot(0, 1).add_hadamard(2)
        assert qc.depth == 2
        qc.add_cnot(1, 2)
        assert qc.depth == 3


# ---------------------------------------------------------------------------
# Evolution
# ---------------------------------------------------------------------------

class TestEvolve:

    def test_empty_circuit_is_identity(self):
        state = generate_state(3, "random", seed=1)
        assert evolve(state, Circuit(3)) == state

    def test_hadamard_single_qubit(self):
        final = evolve(Statevector.from_label("0"), Circuit(1).add_hadamard(0))
        np.testing.assert_allclose(final.amplitudes, [SQRT2_INV, SQRT2_INV], atol=1e-12)

    @pytest.mark.parametrize("before,after", [("10", "11"), ("00", "00")])
    def test_cnot(self, before, after):
        final = evolve(Statevector.from_label(before), Circuit(2).add_cnot(0, 1))
        assert final == Statevector.from_label(after)

    def test_swap(self):
        final = evolve(Statevector.from_label("10"), Circuit(2).add_swap(0, 1))
        assert final == Statevector.from_label("01")

    def test_bell_state(self, bell_circuit):
        final = evolve(Statevector.from_label("00"), bell_circuit)
        assert final.allclose(generate_state(2, "bell", "00"))

    def test_ghz_state(self):
        qc = Circuit(3).h(0).cx(0, 1).cx(0, 2)
        final = evolve(Statevector.from_label("000"), qc)
        assert final.allclose(generate_state(3, "ghz"))

    def test_hadamard_twice_is_identity(self):
        state = generate_state(2, "random", seed=3)
        final = evolve(state, Circuit(2).h(0, 1).h(0, 1))
        assert final.allclose(state)

    def test_x_on_last_qubit(self):
        final = evolve(Statevector.from_label("000"), Circuit(3).x(2))
        assert final == Statevector.from_label("001")

    def test_z_on_plus_gives_minus(self):
        final = evolve(Statevector.from_label("0"), Circuit(1).h(0).z(0))
        np.testing.assert_allclose(final.amplitudes, [SQRT2_INV, -SQRT2_INV], atol=1e-12)

    def test_phase_quarter_turn(self):
        final = evolve(Statevector.from_label("0"), Circuit(1).h(0).p(np.pi / 2, 0))
        np.testing.assert_allclose(final.amplitudes, [SQRT2_INV, 1j * SQRT2_INV], atol=1e-12)

    def test_phase_on_qubit_zero_of_larger_system(self):
        qc = Circuit(2).h(0).p(np.pi, 0)
        final = evolve(Statevector.from_label("01"), qc)
        np.testing.assert_allclose(final.amplitudes, [0, SQRT2_INV, 0, -SQRT2_INV], atol=1e-12)

    def test_qubit_count_mismatch(self, bell_circuit):
        with pytest.raises(DimensionError):
            evolve(Statevector.from_label("000"), bell_circuit)

    def test_inputs_unchanged(self, bell_circuit):
        state = Statevector.from_label("00")
        evolve(state, bell_circuit)
        evolve(state, bell_circuit)
        assert state == Statevector.from_label("00")
        assert len(bell_circuit) == 2

    def test_result_is_independent_copy(self):
        state = Statevector.from_label("0")
        final = evolve(state, Circuit(1))
        final[0] = 0
        assert state[0] == 1

    def test_unnormalized_input_is_allowed(self, bell_circuit):
        state = Statevector.from_label("00") * 2
        final = evolve(state, bell_circuit)
        assert final.norm() == pytest.approx(2.0)


class TestSteps:

    def test_one_step_per_operation(self, bell_circuit):
        steps = list(evolve_steps(Statevector.from_label("00"), bell_circuit))
        assert [s.index for s in steps] == [1, 2]
        assert [s.kind for s in steps] == [GateKind.HADAMARD, GateKind.CNOT]
        assert steps[1].targets == (0, 1)

    def test_intermediate_states(self, bell_circuit):
        steps = list(evolve_steps(Statevector.from_label("00"), bell_circuit))
        np.testing.assert_allclose(
            steps[0].state.amplitudes, [SQRT2_INV, 0, SQRT2_INV, 0], atol=1e-12
        )
        assert steps[-1].state == evolve(Statevector.from_label("00"), bell_circuit)

    def test_step_gates_cannot_alter_circuit(self):
        qc = Circuit(1).add_hadamard(0)
        for step in evolve_steps(Statevector.from_label("0"), qc):
            with pytest.raises(TypeError):
                step.gate[0, 0] = 5
        final = evolve(Statevector.from_label("0"), qc)
        np.testing.assert_allclose(final.amplitudes, [SQRT2_INV, SQRT2_INV], atol=1e-12)

    def test_mismatch_raised_before_iteration(self, bell_circuit):
        with pytest.raises(DimensionError):
            evolve_steps(Statevector(1), bell_circuit)

    def test_show_steps_prints_each_step(self, bell_circuit, capsys):
        final = evolve(Statevector.from_label("00"), bell_circuit, show_steps=True)
        out = capsys.readouterr().out
        assert "[Step 1]  Hadamard on qubit(s) [0]" in out
        assert "[Step 2]  CNOT on qubit(s) [0, 1]" in out
        assert out.count("Current state:") == 2
        assert final == evolve(Statevector.from_label("00"), bell_circuit)

    def test_quiet_by_default(self, bell_circuit, capsys):
        evolve(Statevector.from_label("00"), bell_circuit)
        assert capsys.readouterr().out == ""


class TestUnitary:

    def test_empty_is_identity(self):
        assert Circuit(2).unitary() == GateMatrix.identity(4)

    def test_matches_evolution(self, bell_circuit):
        state = generate_state(2, "random", seed=5)
        via_unitary = bell_circuit.unitary() @ state
        assert via_unitary.allclose(evolve(state, bell_circuit))

    def test_order_is_last_gate_leftmost(self):
        qc = Circuit(1).h(0).p(np.pi / 2, 0)
        expected = phase(1, 0, np.pi / 2) @ HADAMARD_2X2
        assert qc.unitary().allclose(expected)
        assert qc.unitary().is_unitary()
