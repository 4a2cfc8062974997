# abnfconv/grammar/naming.py
"""부분식(노드) → 규칙 이름 합성

출력 문법에는 익명 중첩이 없으므로, 추출된 부분식마다 결정적인 이름을 붙인다.
이름은 노드 구조만의 함수이며(같은 구조 → 같은 이름), 추가로 `toplevel`
여부(그 노드가 자기 규칙 정의의 루트인가)에 따라 괄호 표식이 달라진다.

예)
    ( b / c )          → b-or-c
    ( b / ( a / c ) )  → b-or-（a-or-c）
    *a                 → zero-or-more-as
    1*a                → at-least-1-a
    %x30-39            → b48-to-b57
"""

from __future__     import annotations
import json
from .ast           import *
from ..errors       import UnsupportedConstruct

# 중첩된 복합 이름을 감싸는 괄호. ABNF 리터럴이 만들 수 없는 전각 괄호를 쓴다.
NESTED_RULE_START = "（"   # '（'
NESTED_RULE_END   = "）"   # '）'


def sanitize_name(name: str) -> str:
    """순서 고정: '.' 제거 → '_' → 'underscore' → '--' → '-minus'"""
    name = name.replace(".", "")
    name = name.replace("_", "underscore")
    return name.replace("--", "-minus")


def codepoint_char(value: int) -> str:
    """정수 코드포인트를 문자로. 서로게이트/범위 밖 값은 표현 불가."""
    if value < 0 or value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
        raise UnsupportedConstruct(f"code point {value:#x} is not a Unicode scalar value")
    return chr(value)


def quote_text(text: str) -> str:
    """JSON 문자열 리터럴(비ASCII는 그대로 둔다)."""
    return json.dumps(text, ensure_ascii=False)


def _nested(fragment: str, toplevel: bool) -> str:
    if toplevel:
        return fragment
    return f"{NESTED_RULE_START}{fragment}{NESTED_RULE_END}"


def repetition_rule_name(node: Repetition, toplevel: bool) -> str:
    """
    반복 노드 이름: "{prefix}-{inner}{s?}"
    - 안쪽 노드 이름은 반복 자신과 같은 toplevel 플래그로 합성한다.
    - 안쪽이 Group/Repetition이면 이미 하나의 단위로 보고 복수형 's'를 붙이지 않는다.
    """
    repeat = node.repeat
    plural = True
    if isinstance(repeat, Specific):
        prefix = f"{repeat.count}"
    elif repeat.min is not None and repeat.max is not None:
        prefix = f"between-{repeat.min}-and-{repeat.max}"
    elif repeat.min is not None:
        if repeat.min == 1:
            plural = False
        prefix = f"at-least-{repeat.min}"
    elif repeat.max is not None:
        if repeat.max == 1:
            plural = False
        prefix = f"at-most-{repeat.max}"
    else:
        prefix = "zero-or-more"

    inner = synthesize_name(node.node, toplevel)
    if isinstance(node.node, (Group, Repetition)):
        plural = False
    return f"{prefix}-{inner}{'s' if plural else ''}"


def synthesize_name(node: Node, toplevel: bool = True) -> str:
    """노드 구조로부터 규칙 이름을 만든다. 반환값은 항상 sanitize 된 상태."""
    if isinstance(node, Alternatives):
        name = _nested("-or-".join(synthesize_name(n, False) for n in node.nodes), toplevel)
    elif isinstance(node, Concatenation):
        name = _nested("-and-".join(synthesize_name(n, False) for n in node.nodes), toplevel)
    elif isinstance(node, Repetition):
        name = _nested(repetition_rule_name(node, False), toplevel)
    elif isinstance(node, Group):
        # 그룹은 이름상 투명
        name = synthesize_name(node.node, toplevel)
    elif isinstance(node, Optional):
        name = f"optional-{synthesize_name(node.node, False)}"
    elif isinstance(node, Rulename):
        name = node.name
    elif isinstance(node, String):
        name = node.text
    elif isinstance(node, TerminalValues):
        tv = node.values
        if isinstance(tv, Range):
            name = _nested(f"b{tv.start}-to-b{tv.end}", toplevel)
        else:
            chars = [quote_text(codepoint_char(v)) for v in tv.values]
            name = _nested("-and-".join(chars), toplevel)
    else:
        raise UnsupportedConstruct(f"cannot synthesize a rule name for {type(node).__name__}")

    return sanitize_name(name)
