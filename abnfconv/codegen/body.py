# abnfconv/codegen/body.py
"""규칙 본문 합성 (+ 반복 전개)

노드 하나를 출력 문법의 본문 문법으로 바꾼다.
본문 = 대안(alternative) 리스트, 대안 = 요소 시퀀스, 요소 = 리터럴 "x" 또는 참조 "<name>".

표기
----
- synthesize_alternatives(): 대안마다 "요소, 요소, ..." 문자열 하나 (대괄호 없음)
- synthesize_body()        : 단일 시퀀스 노드는 대괄호 없이 `"<b>", "<c>"`,
                             그 밖에는 `["<b>"], ["<c>"]` 처럼 대안별 대괄호

치환 규칙
--------
toplevel(그 노드를 정의하는 규칙의 루트)이 아닌 위치에서 추출 노드와 구조적으로
같은 노드를 만나면 본문을 펼치지 않고 "<이름>" 참조를 낸다.

반복 전개
--------
출력 형식에는 반복 연산자가 없으므로:
    3a     → [a, a, a]
    *2a    → [], [a], [a, a]
    1*a    → [a], [a, "<at-least-1-a>"]          (우측 재귀)
    *a     → [], [a, "<zero-or-more-as>"]        (우측 재귀)
    1*2a   → UnsupportedConstruct
"""

from __future__ import annotations
from typing import Collection, List
from ..grammar.ast import *
from ..grammar.naming import synthesize_name, codepoint_char, quote_text
from ..errors import UnsupportedConstruct


def rule_ref(name: str) -> str:
    """규칙 참조 요소: "<name>" (JSON 문자열)"""
    return quote_text(f"<{name}>")


def _join(parts: List[str]) -> str:
    return ", ".join(p for p in parts if p)


def _is_sequence(node: Node, extracted: Collection[Node], toplevel: bool) -> bool:
    """대안이 하나뿐인 '시퀀스'로 렌더링되는 노드인가."""
    if not toplevel and node in extracted:
        return True
    if isinstance(node, Group):
        return _is_sequence(node.node, extracted, toplevel)
    if isinstance(node, TerminalValues):
        return isinstance(node.values, CodepointSeq)
    return isinstance(node, (Concatenation, Rulename, String))


def _single(node: Node, extracted: Collection[Node]) -> str:
    """시퀀스 안에 들어갈 본문. 대안이 둘 이상이면 펼칠 수 없다."""
    alts = synthesize_alternatives(node, extracted, False)
    if len(alts) != 1:
        raise UnsupportedConstruct(
            f"{type(node).__name__} with {len(alts)} alternatives cannot be inlined into a sequence"
        )
    return alts[0]


def _unroll_repetition(node: Repetition, extracted: Collection[Node]) -> List[str]:
    repeat = node.repeat
    if isinstance(repeat, Specific):
        single = _single(node.node, extracted)
        return [_join([single] * repeat.count)]

    if repeat.min is not None and repeat.max is not None:
        raise UnsupportedConstruct(
            f"repetition {repeat.min}*{repeat.max} with both bounds cannot be unrolled "
            f"({synthesize_name(node, True)})"
        )

    single = _single(node.node, extracted)
    if repeat.min is not None:
        # min회 | 1회 + 자기 자신(=min회 이상)
        more = rule_ref(synthesize_name(node, True))
        return [_join([single] * repeat.min), _join([single, more])]
    if repeat.max is not None:
        return [_join([single] * k) for k in range(repeat.max + 1)]
    more = rule_ref(synthesize_name(node, True))
    return ["", _join([single, more])]


def synthesize_alternatives(node: Node, extracted: Collection[Node], toplevel: bool = False) -> List[str]:
    """노드 → 대안 리스트. 각 원소는 한 대안의 요소들을 ', '로 이은 문자열."""
    if not toplevel and node in extracted:
        return [rule_ref(synthesize_name(node, True))]

    if isinstance(node, Alternatives):
        out: List[str] = []
        for n in node.nodes:
            out.extend(synthesize_alternatives(n, extracted, False))
        return out
    elif isinstance(node, Concatenation):
        return [_join([_single(n, extracted) for n in node.nodes])]
    elif isinstance(node, Repetition):
        return _unroll_repetition(node, extracted)
    elif isinstance(node, Group):
        # 그룹은 투명. toplevel 여부도 그대로 넘긴다
        return synthesize_alternatives(node.node, extracted, toplevel)
    elif isinstance(node, Optional):
        return [""] + synthesize_alternatives(node.node, extracted, False)
    elif isinstance(node, Rulename):
        return [rule_ref(node.name)]
    elif isinstance(node, String):
        return [quote_text(node.text)]
    elif isinstance(node, TerminalValues):
        tv = node.values
        if isinstance(tv, Range):
            return [quote_text(codepoint_char(v)) for v in range(tv.start, tv.end + 1)]
        return [_join([quote_text(codepoint_char(v)) for v in tv.values])]

    raise UnsupportedConstruct(f"cannot synthesize a rule body for {type(node).__name__}")


def synthesize_body(node: Node, extracted: Collection[Node], toplevel: bool = False) -> str:
    """노드 → 본문 문자열."""
    alts = synthesize_alternatives(node, extracted, toplevel)
    if _is_sequence(node, extracted, toplevel):
        return alts[0]
    return ", ".join(f"[{alt}]" for alt in alts)
