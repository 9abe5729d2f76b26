import itertools
import random

import pytest

from escape_room.config.game_settings import COMPLEX_GATE_KINDS
from escape_room.models.puzzle import GateKind, GateSpec
from escape_room.services.logic_gates import (
    NON_CONTROLLING_INPUT, controllable_kinds, evaluate_circuit, evaluate_gate,
    satisfying_inputs, synthesize_chain, synthesize_inputs
)

TRUTH_TABLE = {
    GateKind.AND: {(0, 0): 0, (0, 1): 0, (1, 0): 0, (1, 1): 1},
    GateKind.OR: {(0, 0): 0, (0, 1): 1, (1, 0): 1, (1, 1): 1},
    GateKind.XOR: {(0, 0): 0, (0, 1): 1, (1, 0): 1, (1, 1): 0},
    GateKind.NAND: {(0, 0): 1, (0, 1): 1, (1, 0): 1, (1, 1): 0},
    GateKind.NOR: {(0, 0): 1, (0, 1): 0, (1, 0): 0, (1, 1): 0},
}


@pytest.mark.parametrize('kind', list(TRUTH_TABLE))
def test_binary_gates_match_truth_table(kind):
    for (a, b), expected in TRUTH_TABLE[kind].items():
        assert evaluate_gate(kind, [bool(a), bool(b)]) is bool(expected)


def test_not_gate():
    assert evaluate_gate(GateKind.NOT, [True]) is False
    assert evaluate_gate(GateKind.NOT, [False]) is True


@pytest.mark.parametrize('kind, inputs', [
    (GateKind.NOT, [True, False]),
    (GateKind.AND, [True]),
    (GateKind.XOR, []),
])
def test_wrong_arity_is_rejected(kind, inputs):
    with pytest.raises(ValueError):
        evaluate_gate(kind, inputs)


@pytest.mark.parametrize('kind', list(GateKind))
@pytest.mark.parametrize('target', [False, True])
def test_synthesized_inputs_reproduce_target(kind, target):
    for seed in range(25):
        inputs = synthesize_inputs(kind, target, random.Random(seed))
        assert len(inputs) == kind.arity
        assert evaluate_gate(kind, inputs) is target


def test_not_synthesis_is_unique():
    assert synthesize_inputs(GateKind.NOT, True, random.Random(0)) == [False]
    assert synthesize_inputs(GateKind.NOT, False, random.Random(0)) == [True]


def test_synthesis_draws_from_every_valid_assignment():
    rng = random.Random(5)
    seen = {tuple(synthesize_inputs(GateKind.AND, False, rng)) for _ in range(200)}
    assert seen == set(satisfying_inputs(GateKind.AND, False))
    assert len(seen) == 3


def test_controllable_kinds():
    assert controllable_kinds(True, COMPLEX_GATE_KINDS) == [GateKind.NAND, GateKind.XOR]
    assert controllable_kinds(False, COMPLEX_GATE_KINDS) == [GateKind.NOR, GateKind.XOR]


@pytest.mark.parametrize('kind', list(NON_CONTROLLING_INPUT))
def test_second_input_decides_output_with_non_controlling_first_input(kind):
    firsts = [True, False] if NON_CONTROLLING_INPUT[kind] is None else [NON_CONTROLLING_INPUT[kind]]
    for first in firsts:
        outputs = {evaluate_gate(kind, [first, second]) for second in (False, True)}
        assert outputs == {False, True}


@pytest.mark.parametrize('first_kind', COMPLEX_GATE_KINDS)
@pytest.mark.parametrize('target', [False, True])
@pytest.mark.parametrize('intermediate', [None, False, True])
def test_chain_reaches_target(first_kind, target, intermediate):
    for seed in range(15):
        first, second = synthesize_chain(first_kind, COMPLEX_GATE_KINDS, target,
                                         random.Random(seed), intermediate)
        assert first.kind is first_kind
        assert second.kind in COMPLEX_GATE_KINDS
        assert second.inputs[0] is evaluate_gate(first.kind, first.inputs)
        if intermediate is not None:
            assert second.inputs[0] is intermediate
        assert evaluate_circuit([first, second]) is target


def test_chain_without_controllable_gate_fails():
    with pytest.raises(ValueError):
        synthesize_chain(GateKind.NOR, [GateKind.NAND], True, random.Random(0), intermediate=False)


def test_circuit_wires_output_into_next_gate():
    gates = [GateSpec(GateKind.AND, [True, True]), GateSpec(GateKind.NOR, [False, False])]
    # The stored first input of gate 2 is ignored in favour of gate 1's output
    assert evaluate_circuit(gates) is False


def test_empty_circuit_is_rejected():
    with pytest.raises(ValueError):
        evaluate_circuit([])


def test_every_gate_is_surjective():
    for kind, target in itertools.product(GateKind, (False, True)):
        assert satisfying_inputs(kind, target)
