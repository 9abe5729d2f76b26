"""
Answer Validator

Checks submitted answers against a stored question set and decides when a
participant's fragment is unlocked. Groups are all-or-nothing, and the final
unlock re-derives the fragment from the stored answers as a cross-check.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from ..errors import ValidationError
from ..models.puzzle import Question, ValidationResult
from ..models.room import FLAT_GROUP, GroupProgress
from .puzzle_generator import bits_to_character


def group_names(questions: Sequence[Question]) -> List[str]:
    """Group tags in question order, without repeats."""
    names: List[str] = []
    for question in questions:
        if question.group is not None and question.group not in names:
            names.append(question.group)
    return names


def progress_key(questions: Sequence[Question], group: Optional[str]) -> str:
    """
    Resolve the submitted group name to a progress key.

    Raises:
        ValidationError: If the group does not fit the question set
    """
    names = group_names(questions)
    if not names:
        if group:
            raise ValidationError("This question set has no groups; omit the group")
        return FLAT_GROUP

    if not group or not isinstance(group, str):
        raise ValidationError(f"Valid group ({', '.join(names)}) is required")

    normalized = group.strip().lower()
    if normalized not in names:
        raise ValidationError(f"Unknown group '{group}'. Valid groups: {', '.join(names)}")
    return normalized


def questions_for(questions: Sequence[Question], key: str) -> List[Question]:
    if key == FLAT_GROUP:
        return list(questions)
    return [question for question in questions if question.group == key]


def validate_answers(questions: Sequence[Question], answers, group: Optional[str] = None) -> ValidationResult:
    """
    Check one group's (or a flat set's) answers.

    Args:
        questions: The participant's full question set
        answers: Option indices in question order
        group: Group name, or None for flat sets

    Returns:
        ValidationResult with per-question correctness and the bits spelled
        by the submitted answers

    Raises:
        ValidationError: On an unknown group, a wrong answer count, or a
            non-integer / out-of-range answer
    """
    key = progress_key(questions, group)
    selected = questions_for(questions, key)

    if not isinstance(answers, list):
        raise ValidationError("Answers array is required")

    label = f"{key} group" if key != FLAT_GROUP else "question set"
    if len(answers) != len(selected):
        raise ValidationError(f"Expected {len(selected)} answers for {label}, got {len(answers)}")

    for question, answer in zip(selected, answers):
        if isinstance(answer, bool) or not isinstance(answer, int):
            raise ValidationError(f"Answer for {question.id} must be an option index")
        if not 0 <= answer < len(question.options):
            raise ValidationError(f"Answer for {question.id} is out of range")

    per_question = [answer == question.correct_answer for question, answer in zip(selected, answers)]

    return ValidationResult(
        group=None if key == FLAT_GROUP else key,
        per_question=per_question,
        all_correct=all(per_question),
        reconstructed_bits=''.join(str(answer) for answer in answers),
    )


def reconstruct_bits(questions: Sequence[Question], progress: Dict[str, GroupProgress]) -> str:
    """
    Concatenate stored answers in question order into a bit string.

    Questions whose group has no stored answer come out as '?'.
    """
    positions: Dict[str, int] = {}
    bits = []
    for question in questions:
        key = question.group if question.group is not None else FLAT_GROUP
        answers = progress.get(key, GroupProgress()).answers
        index = positions.get(key, 0)
        positions[key] = index + 1
        bits.append(str(answers[index]) if index < len(answers) else '?')
    return ''.join(bits)


def decode_fragment(bits: str, mode: str) -> Optional[str]:
    """Turn reconstructed bits back into a character (char mode) or bit string."""
    if set(bits) - {'0', '1'}:
        return None
    if mode == 'char':
        return bits_to_character(bits)
    return bits


def evaluate_completion(questions: Sequence[Question],
                        progress: Dict[str, GroupProgress],
                        target_value: str,
                        mode: str) -> Tuple[bool, Optional[str]]:
    """
    Decide whether a participant has unlocked their fragment.

    Every group must be complete, and the fragment decoded from the stored
    answers must equal the assigned target value. A mismatch denies
    completion even when each group was marked correct.

    Returns:
        (is_completed, solved_value)
    """
    if not progress or not all(group.completed for group in progress.values()):
        return False, None

    decoded = decode_fragment(reconstruct_bits(questions, progress), mode)
    if decoded != target_value:
        return False, None

    return True, target_value


def revealed_bits(questions: Sequence[Question], progress: Dict[str, GroupProgress]) -> str:
    """Bits of completed groups, '?' elsewhere."""
    bits = []
    for question in questions:
        key = question.group if question.group is not None else FLAT_GROUP
        group = progress.get(key)
        bits.append(str(question.correct_answer) if group and group.completed else '?')
    return ''.join(bits)
