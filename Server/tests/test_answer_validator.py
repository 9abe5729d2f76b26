import random

import pytest

from escape_room.errors import ValidationError
from escape_room.models.room import FLAT_GROUP, GroupProgress
from escape_room.services.answer_validator import (
    evaluate_completion, group_names, reconstruct_bits, revealed_bits, validate_answers
)
from escape_room.services.puzzle_generator import character_to_bits, generate_questions

from conftest import correct_answers


@pytest.fixture
def questions():
    return generate_questions(character_to_bits('A'), random.Random(7))


def completed_progress(questions):
    return {
        name: GroupProgress(answers=correct_answers(questions, name), completed=True)
        for name in group_names(questions)
    }


def test_correct_group(questions):
    result = validate_answers(questions, [0, 1, 0], 'alpha')
    assert result.group == 'alpha'
    assert result.all_correct
    assert result.per_question == [True, True, True]
    assert result.reconstructed_bits == '010'


def test_one_wrong_answer_fails_whole_group(questions):
    result = validate_answers(questions, [0, 0, 0], 'alpha')
    assert not result.all_correct
    assert result.per_question == [True, False, True]


def test_group_name_is_case_insensitive(questions):
    assert validate_answers(questions, [0, 0, 0], ' BETA ').all_correct


@pytest.mark.parametrize('answers, group', [
    ([0, 1], 'alpha'),
    ([0, 1, 0, 0], 'alpha'),
    ([0, 1], 'delta'),
    ([0, 1, 0], None),
    (None, 'alpha'),
    ('010', 'alpha'),
    (['0', 1, 0], 'alpha'),
    ([True, 1, 0], 'alpha'),
    ([0, 2, 0], 'alpha'),
    ([0, -1, 0], 'alpha'),
])
def test_malformed_submissions_are_rejected(questions, answers, group):
    with pytest.raises(ValidationError):
        validate_answers(questions, answers, group)


def test_flat_set_takes_no_group():
    flat = generate_questions('101', random.Random(1), grouped=False)
    assert validate_answers(flat, [1, 0, 1]).all_correct
    assert validate_answers(flat, [1, 0, 1]).group is None
    with pytest.raises(ValidationError):
        validate_answers(flat, [1, 0, 1], 'alpha')


def test_completion_reconstructs_target(questions):
    progress = completed_progress(questions)
    assert reconstruct_bits(questions, progress) == '01000001'
    assert evaluate_completion(questions, progress, 'A', 'char') == (True, 'A')


def test_incomplete_group_blocks_completion(questions):
    progress = completed_progress(questions)
    progress['gamma'] = GroupProgress(answers=[0, 0], completed=False)
    assert evaluate_completion(questions, progress, 'A', 'char') == (False, None)


def test_cross_check_denies_drifted_answers(questions):
    progress = completed_progress(questions)
    # Every group claims completion, but the stored bits spell another character
    progress['alpha'] = GroupProgress(answers=[1, 1, 0], completed=True)
    assert evaluate_completion(questions, progress, 'A', 'char') == (False, None)


def test_flat_completion():
    flat = generate_questions('1', random.Random(2), grouped=False)
    progress = {FLAT_GROUP: GroupProgress(answers=[1], completed=True)}
    assert evaluate_completion(flat, progress, '1', 'bit') == (True, '1')


def test_revealed_bits_follow_completed_groups(questions):
    progress = {name: GroupProgress() for name in group_names(questions)}
    assert revealed_bits(questions, progress) == '????????'

    progress['alpha'] = GroupProgress(answers=[0, 1, 0], completed=True)
    assert revealed_bits(questions, progress) == '010?????'


def test_missing_answers_reconstruct_as_unknown(questions):
    progress = {'alpha': GroupProgress(answers=[0, 1, 0], completed=True)}
    assert reconstruct_bits(questions, progress) == '010?????'
