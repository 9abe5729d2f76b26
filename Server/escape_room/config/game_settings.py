"""
Game Configuration Constants Module

This module defines the escape room rules: how a target fragment is split
into question groups, which gates each kind of question may use, and the
limits applied when a host creates a room. Target words for rooms created
without an explicit secret are loaded from target_words.json.

Run the integrity check from the Server directory with:

    python -m escape_room.config.game_settings
"""

import json
import os
import string
from typing import Dict, Final, List, Tuple

from ..models.puzzle import GateKind

# Group names in the order they cover a character's bits
GROUP_NAMES: Final[Tuple[str, ...]] = ('alpha', 'beta', 'gamma')

BITS_PER_CHARACTER: Final[int] = 8

# Gate pool for single-gate questions
SIMPLE_GATE_KINDS: Final[Tuple[GateKind, ...]] = (
    GateKind.AND, GateKind.OR, GateKind.NOT, GateKind.XOR
)

# Gate pool for both gates of a chained (complex) question
COMPLEX_GATE_KINDS: Final[Tuple[GateKind, ...]] = (
    GateKind.NAND, GateKind.NOR, GateKind.XOR
)

BINARY_OPTIONS: Final[Tuple[str, str]] = ('0 (False)', '1 (True)')

# Room limits
MIN_STUDENTS: Final[int] = 1
MAX_STUDENTS: Final[int] = 10
ROOM_MODES: Final[Tuple[str, ...]] = ('char', 'bit')

ROOM_CODE_LENGTH: Final[int] = 6
ROOM_CODE_ALPHABET: Final[str] = string.ascii_uppercase + string.digits

# Characters a char-mode target may contain (printable ASCII)
TARGET_CHARACTERS: Final[str] = ''.join(chr(code) for code in range(0x20, 0x7F))


def _load_target_words() -> Dict[int, List[str]]:
    """
    Load target words from target_words.json, indexed by word length.

    Raises:
        FileNotFoundError: If target_words.json is missing
        ValueError: If the file is not a non-empty array of alphabetic words
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'target_words.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            word_list = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Target word file not found: {json_file_path}")

    if not isinstance(word_list, list) or not word_list:
        raise ValueError("target_words.json must contain a non-empty array of words")

    words_by_length: Dict[int, List[str]] = {}
    for word in word_list:
        word = word.upper()
        if not word.isalpha():
            raise ValueError(f"Word '{word}' contains non-alphabetic characters")
        words_by_length.setdefault(len(word), []).append(word)

    return words_by_length


TARGET_WORDS: Final[Dict[int, List[str]]] = _load_target_words()


def group_sizes(bit_count: int) -> List[Tuple[str, int]]:
    """
    Split a fragment of bit_count bits into the named groups.

    Sizes differ by at most one with the larger groups first, so an 8-bit
    character becomes alpha=3, beta=3, gamma=2. Empty groups are dropped.
    """
    base, remainder = divmod(bit_count, len(GROUP_NAMES))
    layout = []
    for index, name in enumerate(GROUP_NAMES):
        size = base + (1 if index < remainder else 0)
        if size:
            layout.append((name, size))
    return layout


def validate_settings_integrity() -> bool:
    """
    Validates the rule constants.

    Checks that the character layout covers every bit exactly once, that
    complex questions only use binary gates, that the room code alphabet
    has no duplicates, and that every target word list is keyed by a
    supported student count and holds distinct printable words of that
    length. Counts without a word list fall back to random letters.

    Raises:
        ValueError: If any check fails
    """
    layout = group_sizes(BITS_PER_CHARACTER)
    if sum(size for _, size in layout) != BITS_PER_CHARACTER:
        raise ValueError(f"Group layout {layout} does not cover {BITS_PER_CHARACTER} bits")

    if GateKind.NOT in COMPLEX_GATE_KINDS:
        raise ValueError("Complex questions need binary gates")

    if len(set(ROOM_CODE_ALPHABET)) != len(ROOM_CODE_ALPHABET):
        raise ValueError("Room code alphabet contains duplicates")

    for length, words in TARGET_WORDS.items():
        if not MIN_STUDENTS <= length <= MAX_STUDENTS:
            raise ValueError(f"Target words of length {length} are outside the student range "
                             f"{MIN_STUDENTS}-{MAX_STUDENTS}")
        misfits = [word for word in words
                   if len(word) != length or any(char not in TARGET_CHARACTERS for char in word)]
        if misfits:
            raise ValueError(f"Target words listed under length {length} do not fit: {misfits}")
        if len(words) != len(set(words)):
            duplicates = sorted({word for word in words if words.count(word) > 1})
            raise ValueError(f"Duplicate target words of length {length}: {duplicates}")

    return True


if __name__ == "__main__":

    try:
        validate_settings_integrity()
        print(" Settings validation passed")
        print(f" Character layout: {group_sizes(BITS_PER_CHARACTER)}")
        print(f" Target word lengths: {sorted(TARGET_WORDS)}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
