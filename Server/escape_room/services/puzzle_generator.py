"""
Puzzle Generator

Turns a participant's target bits into logic-gate questions. Each question
hides exactly one bit: its correct option is that bit's value.
"""

import random
from typing import List, Optional

from ..config.game_settings import (
    BINARY_OPTIONS, BITS_PER_CHARACTER, COMPLEX_GATE_KINDS, SIMPLE_GATE_KINDS,
    TARGET_CHARACTERS, group_sizes
)
from ..errors import GenerationInconsistency, ValidationError
from ..models.puzzle import GateKind, GateSpec, Question, QuestionKind
from .logic_gates import evaluate_circuit, synthesize_chain, synthesize_inputs


def character_to_bits(char: str) -> str:
    """Encode one printable ASCII character as 8 bits, most significant first."""
    if len(char) != 1 or char not in TARGET_CHARACTERS:
        raise ValidationError(f"Character {char!r} is not printable ASCII")
    return format(ord(char), f'0{BITS_PER_CHARACTER}b')


def bits_to_character(bits: str) -> str:
    return chr(int(bits, 2))


def _digit(value: bool) -> str:
    return '1' if value else '0'


def _describe_gate(gate: GateSpec) -> str:
    if gate.kind is GateKind.NOT:
        return f"NOT {_digit(gate.inputs[0])}"
    return f"{_digit(gate.inputs[0])} {gate.kind.value} {_digit(gate.inputs[1])}"


def _simple_question(question_id: str, bit_index: int, bit: bool,
                     group: Optional[str], rng: random.Random) -> Question:
    kind = rng.choice(SIMPLE_GATE_KINDS)
    gate = GateSpec(kind=kind, inputs=synthesize_inputs(kind, bit, rng))
    output = evaluate_circuit([gate])

    return Question(
        id=question_id,
        kind=QuestionKind.SIMPLE,
        text=f"What is the output of {_describe_gate(gate)}?",
        gates=[gate],
        options=list(BINARY_OPTIONS),
        correct_answer=int(output),
        explanation=f"{_describe_gate(gate)} = {_digit(output)}",
        bit_index=bit_index,
        group=group,
    )


def _complex_question(question_id: str, bit_index: int, bit: bool, group: str,
                      rng: random.Random, intermediate: Optional[bool] = None,
                      is_final: bool = False) -> Question:
    first_kind = rng.choice(COMPLEX_GATE_KINDS)
    first, second = synthesize_chain(first_kind, COMPLEX_GATE_KINDS, bit, rng, intermediate)
    middle = _digit(second.inputs[0])
    output = evaluate_circuit([first, second])

    return Question(
        id=question_id,
        kind=QuestionKind.COMPLEX,
        text=(f"Gate 1 computes {_describe_gate(first)}. "
              f"Gate 2 computes (Gate 1 output) {second.kind.value} {_digit(second.inputs[1])}. "
              f"What is the output of Gate 2?"),
        gates=[first, second],
        options=list(BINARY_OPTIONS),
        correct_answer=int(output),
        explanation=(f"{_describe_gate(first)} = {middle}, then "
                     f"{middle} {second.kind.value} {_digit(second.inputs[1])} = {_digit(output)}"),
        bit_index=bit_index,
        group=group,
        is_final=is_final,
    )


def verify_question(question: Question, bit: bool) -> None:
    """
    Re-evaluate a question against the bit it should encode.

    Raises:
        GenerationInconsistency: If the circuit or the marked answer disagrees with bit
    """
    gates = question.gates
    for previous, gate in zip(gates, gates[1:]):
        if gate.inputs[0] != evaluate_circuit([previous]):
            raise GenerationInconsistency(f"Question {question.id}: wired input does not match gate output")

    output = evaluate_circuit(gates)
    if output != bit or question.correct_answer != int(bit):
        raise GenerationInconsistency(
            f"Question {question.id}: circuit gives {int(output)}, answer {question.correct_answer}, "
            f"target bit {int(bit)}"
        )


def generate_questions(target_bits: str, rng: random.Random, grouped: bool = True) -> List[Question]:
    """
    Generate one question per bit of target_bits.

    Grouped sets split the bits into alpha/beta/gamma; every group but the
    last gets single-gate questions and the last gets chained two-gate
    circuits, the final one of which reuses the previous bit as its middle
    value. Flat sets get one untagged single-gate question per bit.

    Args:
        target_bits: String of '0' and '1'
        rng: Random source; a seeded one makes the output reproducible
        grouped: Whether to tag questions with groups

    Raises:
        ValueError: If target_bits is empty or not binary
        GenerationInconsistency: If a generated question fails re-evaluation
    """
    if not target_bits or set(target_bits) - {'0', '1'}:
        raise ValueError(f"Target must be a non-empty bit string, got {target_bits!r}")

    bits = [digit == '1' for digit in target_bits]
    questions: List[Question] = []

    if not grouped:
        for index, bit in enumerate(bits):
            questions.append(_simple_question(f"bit-{index}", index, bit, None, rng))
    else:
        layout = group_sizes(len(bits))
        start = 0
        for layout_index, (group, size) in enumerate(layout):
            last_group = layout_index == len(layout) - 1
            for index in range(start, start + size):
                question_id = f"{group}-{index}"
                if not last_group:
                    questions.append(_simple_question(question_id, index, bits[index], group, rng))
                    continue

                is_final = index == start + size - 1
                intermediate = bits[index - 1] if is_final and index > start else None
                questions.append(_complex_question(
                    question_id, index, bits[index], group, rng,
                    intermediate=intermediate, is_final=is_final
                ))
            start += size

    for question in questions:
        verify_question(question, bits[question.bit_index])

    return questions
