import random

import pytest

from escape_room.config.game_settings import (
    BINARY_OPTIONS, COMPLEX_GATE_KINDS, SIMPLE_GATE_KINDS, TARGET_CHARACTERS, group_sizes
)
from escape_room.errors import GenerationInconsistency, ValidationError
from escape_room.models.puzzle import QuestionKind
from escape_room.services.logic_gates import evaluate_circuit, evaluate_gate
from escape_room.services.puzzle_generator import (
    bits_to_character, character_to_bits, generate_questions, verify_question
)


def answers_of(questions):
    return ''.join(str(q.correct_answer) for q in questions)


def test_group_layout():
    assert group_sizes(8) == [('alpha', 3), ('beta', 3), ('gamma', 2)]
    assert group_sizes(4) == [('alpha', 2), ('beta', 1), ('gamma', 1)]
    assert group_sizes(2) == [('alpha', 1), ('beta', 1)]
    assert group_sizes(1) == [('alpha', 1)]


def test_character_encoding():
    assert character_to_bits('A') == '01000001'
    assert bits_to_character('01000001') == 'A'


@pytest.mark.parametrize('char', ['é', '\n', 'AB', ''])
def test_character_outside_printable_ascii_is_rejected(char):
    with pytest.raises(ValidationError):
        character_to_bits(char)


def test_letter_a_scenario():
    questions = generate_questions(character_to_bits('A'), random.Random(42))

    assert [q.group for q in questions] == ['alpha'] * 3 + ['beta'] * 3 + ['gamma'] * 2
    assert [q.bit_index for q in questions] == list(range(8))
    assert answers_of(questions[0:3]) == '010'
    assert answers_of(questions[3:6]) == '000'
    assert answers_of(questions[6:8]) == '01'

    for question in questions[:6]:
        assert question.kind is QuestionKind.SIMPLE
        assert len(question.gates) == 1
        assert question.gates[0].kind in SIMPLE_GATE_KINDS

    for question in questions[6:]:
        assert question.kind is QuestionKind.COMPLEX
        assert len(question.gates) == 2
        assert {gate.kind for gate in question.gates} <= set(COMPLEX_GATE_KINDS)

    assert [q.is_final for q in questions] == [False] * 7 + [True]


def test_final_question_chains_from_previous_bit():
    for seed in range(20):
        bits = character_to_bits('Z')
        final = generate_questions(bits, random.Random(seed))[-1]
        first = final.gates[0]
        assert evaluate_gate(first.kind, first.inputs) is (bits[6] == '1')


@pytest.mark.parametrize('char', list(TARGET_CHARACTERS))
def test_every_bit_covered_exactly_once(char):
    bits = character_to_bits(char)
    questions = generate_questions(bits, random.Random(ord(char)))

    assert sorted(q.bit_index for q in questions) == list(range(8))
    assert len({q.id for q in questions}) == 8
    assert answers_of(questions) == bits
    for question in questions:
        assert evaluate_circuit(question.gates) is (bits[question.bit_index] == '1')
        assert question.options == list(BINARY_OPTIONS)


def test_flat_generation():
    questions = generate_questions('1011', random.Random(3), grouped=False)

    assert [q.id for q in questions] == ['bit-0', 'bit-1', 'bit-2', 'bit-3']
    assert all(q.group is None for q in questions)
    assert all(q.kind is QuestionKind.SIMPLE for q in questions)
    assert answers_of(questions) == '1011'


def test_seeded_generation_is_reproducible():
    first = generate_questions('01100011', random.Random(99))
    second = generate_questions('01100011', random.Random(99))
    assert [q.to_dict() for q in first] == [q.to_dict() for q in second]


def test_unseeded_generation_still_encodes_target():
    for _ in range(20):
        assert answers_of(generate_questions('11110000', random.Random())) == '11110000'


@pytest.mark.parametrize('bits', ['', '012', 'ab'])
def test_invalid_bit_strings(bits):
    with pytest.raises(ValueError):
        generate_questions(bits, random.Random(0))


def test_explanations_state_gate_output():
    for question in generate_questions('10', random.Random(1), grouped=False):
        assert question.explanation.endswith(f"= {question.correct_answer}")


def test_tampered_answer_is_detected():
    question = generate_questions('1', random.Random(0), grouped=False)[0]
    question.correct_answer = 0
    with pytest.raises(GenerationInconsistency):
        verify_question(question, True)


def test_tampered_wire_is_detected():
    question = generate_questions('01', random.Random(0))[-1]
    question.gates[1].inputs[0] = not question.gates[1].inputs[0]
    with pytest.raises(GenerationInconsistency):
        verify_question(question, True)


def test_public_form_hides_answer_and_wired_input():
    question = generate_questions('01000001', random.Random(8))[-1]

    public = question.to_public_dict()
    assert 'correct_answer' not in public
    assert 'explanation' not in public
    assert public['gates'][1]['inputs'][0] is None

    revealed = question.to_public_dict(reveal=True)
    assert revealed['correct_answer'] == question.correct_answer
