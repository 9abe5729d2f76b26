"""
Logic Gate Service

Boolean gate evaluation and input synthesis. Synthesis works backwards from
a wanted output so every generated gate is consistent with the bit it hides.
"""

import itertools
import random
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.puzzle import GateKind, GateSpec

_BINARY_RULES = {
    GateKind.AND: lambda a, b: a and b,
    GateKind.OR: lambda a, b: a or b,
    GateKind.XOR: lambda a, b: a != b,
    GateKind.NAND: lambda a, b: not (a and b),
    GateKind.NOR: lambda a, b: not (a or b),
}

# First-input value that leaves the output fully decided by the second input.
# None means any value works.
NON_CONTROLLING_INPUT: Dict[GateKind, Optional[bool]] = {
    GateKind.AND: True,
    GateKind.NAND: True,
    GateKind.OR: False,
    GateKind.NOR: False,
    GateKind.XOR: None,
}


def evaluate_gate(kind: GateKind, inputs: Sequence[bool]) -> bool:
    """
    Evaluate a single gate.

    Raises:
        ValueError: If the number of inputs does not match the gate's arity
    """
    if len(inputs) != kind.arity:
        raise ValueError(f"{kind.value} gate takes {kind.arity} input(s), got {len(inputs)}")

    if kind is GateKind.NOT:
        return not inputs[0]
    return bool(_BINARY_RULES[kind](bool(inputs[0]), bool(inputs[1])))


def evaluate_circuit(gates: Sequence[GateSpec]) -> bool:
    """Evaluate a chain of gates, wiring each output into the next gate's first input."""
    if not gates:
        raise ValueError("Circuit has no gates")

    output = evaluate_gate(gates[0].kind, gates[0].inputs)
    for gate in gates[1:]:
        output = evaluate_gate(gate.kind, [output] + list(gate.inputs[1:]))
    return output


def satisfying_inputs(kind: GateKind, target: bool) -> List[Tuple[bool, ...]]:
    """All input assignments for which the gate outputs target."""
    return [
        inputs for inputs in itertools.product((False, True), repeat=kind.arity)
        if evaluate_gate(kind, inputs) == target
    ]


def synthesize_inputs(kind: GateKind, target: bool, rng: random.Random) -> List[bool]:
    """Pick inputs, uniformly among the valid ones, that make the gate output target."""
    if kind is GateKind.NOT:
        return [not target]
    return list(rng.choice(satisfying_inputs(kind, target)))


def controllable_kinds(intermediate: bool, kinds: Sequence[GateKind]) -> List[GateKind]:
    """Binary gates whose output is still free once their first input is fixed to intermediate."""
    return [
        kind for kind in kinds
        if kind in NON_CONTROLLING_INPUT
        and NON_CONTROLLING_INPUT[kind] in (None, intermediate)
    ]


def synthesize_chain(first_kind: GateKind,
                     second_kinds: Sequence[GateKind],
                     target: bool,
                     rng: random.Random,
                     intermediate: Optional[bool] = None) -> Tuple[GateSpec, GateSpec]:
    """
    Build a two-gate circuit whose final output is target.

    Gate 1 is synthesized to output the intermediate value (random unless
    given). Gate 2 is chosen from second_kinds among those for which that
    intermediate is a non-controlling first input, so flipping its second
    input flips the output and the flip-if-wrong step always lands on target.

    Raises:
        ValueError: If no gate in second_kinds can be driven by the intermediate
    """
    if intermediate is None:
        intermediate = rng.random() < 0.5

    first_inputs = synthesize_inputs(first_kind, intermediate, rng)
    first_output = evaluate_gate(first_kind, first_inputs)

    candidates = controllable_kinds(first_output, second_kinds)
    if not candidates:
        raise ValueError(f"No gate in {[kind.value for kind in second_kinds]} "
                         f"can be controlled with first input {first_output}")
    second_kind = rng.choice(candidates)

    second_input = rng.random() < 0.5
    if evaluate_gate(second_kind, [first_output, second_input]) != target:
        second_input = not second_input

    return (
        GateSpec(kind=first_kind, inputs=first_inputs),
        GateSpec(kind=second_kind, inputs=[first_output, second_input]),
    )
