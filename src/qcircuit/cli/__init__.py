"""
Command-line interface for qcircuit.

Usage:
    qcircuit run -n 2 -g h:0 -g cx:0,1 --draw
    qcircuit run -n 3 -g p:0:90 --degrees --state ghz --steps
    qcircuit run -n 1 -g h:0 --amplitudes 0.6 0.8j
    qcircuit basis 2
    qcircuit gates
"""
import argparse
import logging
import sys

import numpy as np


def parse_gate_spec(text):
    """Parse ``name:q1,q2[:param]`` into ``(name, qubits, params)``."""
    parts = text.split(":")
    if len(parts) not in (2, 3) or not parts[0]:
        raise argparse.ArgumentTypeError(
            f"invalid gate '{text}', expected NAME:QUBITS[:PARAM] (e.g. cx:0,1 or p:2:1.57)"
        )
    try:
        qubits = tuple(int(q) for q in parts[1].split(","))
        params = (float(parts[2]),) if len(parts) == 3 else ()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid qubits or parameter in gate '{text}'") from None
    return parts[0], qubits, params


def cmd_run(args):
    """Build a circuit from gate specs and evolve an initial state through it."""
    from .. import Circuit, Statevector, evolve, generate_state
    from ..visualization import draw_circuit, format_statevector, show_state

    qc = Circuit(args.qubits)
    for name, qubits, params in args.gate:
        if args.degrees:
            params = tuple(np.deg2rad(p) for p in params)
        qc.add_gate(name, qubits, params)

    if args.draw:
        print(draw_circuit(qc))
        print()

    if args.amplitudes:
        initial = Statevector.from_amplitudes(args.amplitudes)
    else:
        initial = generate_state(args.qubits, args.state, args.label, seed=args.seed)

    final = evolve(initial, qc, show_steps=args.steps)

    print("The initial state is:")
    print(format_statevector(initial, column=True))
    print("The final state is:")
    print(format_statevector(final, column=True))
    if args.chart:
        print()
        print(show_state(final))


def cmd_basis(args):
    """Show the standard basis."""
    from ..visualization import format_basis

    print(format_basis(args.qubits))


def cmd_gates(args):
    """Show the predefined gate matrices."""
    from ..gates import PREDEFINED_GATES
    from ..visualization import format_matrix

    for name, gate in PREDEFINED_GATES.items():
        print(f"{name} ({gate.kind}):")
        print(format_matrix(gate))
        print()


def cmd_info(args):
    """Show qcircuit information."""
    from .. import __version__
    from ..builders import GATE_BUILDERS, MAX_QUBITS
    from ..statevector import NAMED_STATES

    print(f"""
qcircuit v{__version__}
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

Dense state-vector simulation of quantum circuits.

A vector represents the quantum state and a 2^n x 2^n matrix
represents each gate; a circuit evolves a state by applying
its gates in order.

Gates:   {', '.join(sorted(GATE_BUILDERS))}
States:  {', '.join(NAMED_STATES)}
Limit:   {MAX_QUBITS} qubits
""")


def main(argv=None):
    """Main CLI entry point."""
    from ..errors import QuantumCircuitError
    from ..statevector import NAMED_STATES

    parser = argparse.ArgumentParser(
        prog='qcircuit',
        description='Simulate quantum circuits on dense state vectors'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Evolve a state through a circuit')
    run_parser.add_argument('-n', '--qubits', type=int, required=True, help='Number of qubits')
    run_parser.add_argument('-g', '--gate', type=parse_gate_spec, action='append', default=[],
                            metavar='NAME:QUBITS[:PARAM]', help='Append a gate (repeatable)')
    run_parser.add_argument('--degrees', action='store_true', help='Gate parameters are in degrees')
    run_parser.add_argument('--state', default='zero', choices=NAMED_STATES,
                            help='Named initial state')
    run_parser.add_argument('--label', default='', help='Label for std/bell states')
    run_parser.add_argument('--amplitudes', type=complex, nargs='+',
                            help='Explicit initial amplitudes (overrides --state)')
    run_parser.add_argument('--seed', type=int, help='Seed for the random state')
    run_parser.add_argument('--steps', action='store_true', help='Print every step')
    run_parser.add_argument('--draw', action='store_true', help='Print the circuit diagram')
    run_parser.add_argument('--chart', action='store_true', help='Print a bar chart of the final state')
    run_parser.set_defaults(func=cmd_run)

    # Basis command
    basis_parser = subparsers.add_parser('basis', help='Show the standard basis')
    basis_parser.add_argument('qubits', type=int, help='Number of qubits')
    basis_parser.set_defaults(func=cmd_basis)

    # Gates command
    gates_parser = subparsers.add_parser('gates', help='Show predefined gate matrices')
    gates_parser.set_defaults(func=cmd_gates)

    # Info command
    info_parser = subparsers.add_parser('info', help='Show qcircuit info')
    info_parser.set_defaults(func=cmd_info)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    if args.command is None:
        parser.print_help()
        return 0

    try:
        args.func(args)
    except QuantumCircuitError as exc:
        print(f"qcircuit: error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
