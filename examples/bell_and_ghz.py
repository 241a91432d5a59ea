"""Example: Bell and GHZ states with qcircuit."""
import numpy as np

from qcircuit import Circuit, Statevector, draw_circuit, evolve, show_state

print("=" * 50)
print("qcircuit: Bell State Example")
print("=" * 50)

bell = Circuit(2).add_hadamard(0).add_cnot(0, 1)
print(draw_circuit(bell))
print()
print(show_state(evolve(Statevector.from_label("00"), bell)))

print()
print("=" * 50)
print("qcircuit: GHZ State Example")
print("=" * 50)

ghz = Circuit(3).h(0).cx(0, 1).cx(0, 2)
print(draw_circuit(ghz))
print()
final = evolve(Statevector.from_label("000"), ghz)
for label, amp in final.nonzero().items():
    print(f"  |{label}⟩: {amp.real:+.4f}  (p = {abs(amp) ** 2:.2f})")

print("\nA phase on qubit 1 only rotates the |111⟩ amplitude:")
print(show_state(evolve(final, Circuit(3).p(np.pi / 2, 1))))
