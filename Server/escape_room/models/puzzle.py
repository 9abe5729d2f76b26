"""
Puzzle Data Models

Contains the logic-gate and question structures produced by the puzzle
generator and stored with each participant.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class GateKind(Enum):
    """Supported boolean gates."""
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    XOR = "XOR"
    NAND = "NAND"
    NOR = "NOR"

    @property
    def arity(self) -> int:
        return 1 if self is GateKind.NOT else 2


class QuestionKind(Enum):
    """Question layouts."""
    SIMPLE = "simple_logic_gate"
    COMPLEX = "complex_logic_gate"


@dataclass
class GateSpec:
    """A gate and the inputs it is evaluated with."""
    kind: GateKind
    inputs: List[bool]

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind.value, 'inputs': list(self.inputs)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GateSpec':
        return cls(kind=GateKind(data['kind']), inputs=[bool(value) for value in data['inputs']])


@dataclass
class Question:
    """
    One multiple-choice question encoding a single target bit.

    For complex questions the second gate's first input is wired to the first
    gate's output; the stored value is that output so the circuit can be
    re-evaluated from the record alone.
    """
    id: str
    kind: QuestionKind
    text: str
    gates: List[GateSpec]
    options: List[str]
    correct_answer: int
    explanation: str
    bit_index: int
    group: Optional[str] = None
    is_final: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Storage form, including the answer."""
        return {
            'id': self.id,
            'kind': self.kind.value,
            'text': self.text,
            'gates': [gate.to_dict() for gate in self.gates],
            'options': list(self.options),
            'correct_answer': self.correct_answer,
            'explanation': self.explanation,
            'bit_index': self.bit_index,
            'group': self.group,
            'is_final': self.is_final,
        }

    def to_public_dict(self, reveal: bool = False) -> Dict[str, Any]:
        """Client form. Wired inputs are sent as None; the answer only when revealed."""
        gates = []
        for position, gate in enumerate(self.gates):
            inputs: List[Optional[bool]] = list(gate.inputs)
            if position > 0:
                inputs[0] = None
            gates.append({'kind': gate.kind.value, 'inputs': inputs})

        data = {
            'id': self.id,
            'kind': self.kind.value,
            'text': self.text,
            'gates': gates,
            'options': list(self.options),
            'bit_index': self.bit_index,
            'group': self.group,
            'is_final': self.is_final,
        }
        if reveal:
            data['correct_answer'] = self.correct_answer
            data['explanation'] = self.explanation
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Question':
        return cls(
            id=data['id'],
            kind=QuestionKind(data['kind']),
            text=data['text'],
            gates=[GateSpec.from_dict(gate) for gate in data['gates']],
            options=list(data['options']),
            correct_answer=int(data['correct_answer']),
            explanation=data['explanation'],
            bit_index=int(data['bit_index']),
            group=data.get('group'),
            is_final=bool(data.get('is_final', False)),
        )


@dataclass
class ValidationResult:
    """Outcome of checking one submission against a question set."""
    group: Optional[str]
    per_question: List[bool] = field(default_factory=list)
    all_correct: bool = False
    reconstructed_bits: str = ''
