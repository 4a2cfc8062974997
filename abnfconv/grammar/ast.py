# abnfconv/grammar/ast.py
"""ABNF Grammar AST
- Node: Alternatives / Concatenation / Repetition / Group / Optional /
        Rulename / String / TerminalValues(Range | CodepointSeq) / Prose
- Repeat: Specific(n) | Variable(min, max)
- Rule / Grammar

노드는 모두 frozen dataclass 이다. 같은 부분식이 서로 다른 인스턴스로
만들어져도 == / hash 가 **구조적으로** 일치해야 추출 노드 치환이 동작한다.
그래서 자식 목록은 list가 아니라 tuple로 보관한다.
"""

from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import List, Tuple, Union
import typing

@dataclass(frozen=True)
class Span:
    line: int
    col: int

# ---- 반복 지정자 ----

@dataclass(frozen=True)
class Specific:
    """정확히 n회: `3a`"""
    count: int

@dataclass(frozen=True)
class Variable:
    """
    가변 반복: `*a`, `1*a`, `*2a`, `1*2a`
    - min/max: 생략 시 None
    """
    min: typing.Optional[int] = None
    max: typing.Optional[int] = None

Repeat = Union[Specific, Variable]

# ---- 노드 ----

@dataclass(frozen=True)
class Alternatives:
    nodes: Tuple["Node", ...]

@dataclass(frozen=True)
class Concatenation:
    nodes: Tuple["Node", ...]

@dataclass(frozen=True)
class Repetition:
    repeat: Repeat
    node: "Node"

@dataclass(frozen=True)
class Group:
    node: "Node"

@dataclass(frozen=True)
class Optional:
    """`[ ... ]` 선택 요소. (typing.Optional 과 이름이 겹치므로 typing은 모듈째 임포트)"""
    node: "Node"

@dataclass(frozen=True)
class Rulename:
    name: str

@dataclass(frozen=True)
class String:
    """char-val. %s/%i 접두어는 파서에서 벗겨진다."""
    text: str

@dataclass(frozen=True)
class Range:
    """num-val 범위: %x41-5A → Range(0x41, 0x5A) (양끝 포함)"""
    start: int
    end: int

@dataclass(frozen=True)
class CodepointSeq:
    """num-val 연접: %x0D.0A → CodepointSeq((13, 10))"""
    values: Tuple[int, ...]

@dataclass(frozen=True)
class TerminalValues:
    values: Union[Range, CodepointSeq]

@dataclass(frozen=True)
class Prose:
    """prose-val `<...>` — 파싱만 하고 변환 단계에서는 거부된다."""
    text: str

Node = Union[
    Alternatives, Concatenation, Repetition, Group, Optional,
    Rulename, String, TerminalValues, Prose,
]

# ---- 규칙 / 문법 ----

@dataclass(frozen=True)
class Rule:
    name: str
    node: Node
    span: typing.Optional[Span] = field(default=None, compare=False)

@dataclass
class Grammar:
    """
    파서 산출물. 규칙은 선언 순서를 유지한다.
    (=/ 로 덧붙인 대안은 파서에서 기존 규칙에 병합되므로 이름은 유일)
    """
    rules: List[Rule] = field(default_factory=list)

    def rule_names(self) -> List[str]:
        return [r.name for r in self.rules]

    def find_rule(self, name: str) -> typing.Optional[Rule]:
        """ABNF 규칙 이름은 대소문자를 구분하지 않는다."""
        key = name.lower()
        for r in self.rules:
            if r.name.lower() == key:
                return r
        return None
