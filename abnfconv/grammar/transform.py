# abnfconv/grammar/transform.py
"""규칙 트리에서 '독립 규칙으로 승격할 부분식'을 수집한다.

출력 문법(JSON CFG)은 익명 중첩을 표현하지 못하므로
Group / Optional / Repetition / Range 노드는 각각 이름 붙은 규칙이 되어야 한다.

수집 순서가 곧 이후 중복 제거(첫 등장 우선)와 방출 순서이므로 순서를 보존한다.
구조적으로 같은 노드가 여러 번 들어갈 수 있으며, 중복 제거는 이름 기준으로 emitter가 한다.
"""

from __future__     import annotations
from typing         import Dict, List, Sequence
from .ast           import *


def _collect(node: Node, out: List[Node]) -> None:
    if isinstance(node, (Alternatives, Concatenation)):
        for n in node.nodes:
            _collect(n, out)
    elif isinstance(node, (Repetition, Group, Optional)):
        # 자신을 먼저, 그다음 안쪽
        out.append(node)
        _collect(node.node, out)
    elif isinstance(node, TerminalValues) and isinstance(node.values, Range):
        out.append(node)
    # String / CodepointSeq / Rulename / Prose: 인라인 처리, 수집하지 않음


def extract_nested_nodes(rules: Sequence[Rule]) -> List[Node]:
    """모든 규칙을 선언 순서대로 훑어 승격 대상 노드 목록을 돌려준다."""
    out: List[Node] = []
    for r in rules:
        _collect(r.node, out)
    return out


def _resolve(node: Node, declared: Dict[str, str]) -> Node:
    if isinstance(node, Rulename):
        return Rulename(declared.get(node.name.lower(), node.name))
    if isinstance(node, (Alternatives, Concatenation)):
        return type(node)(tuple(_resolve(n, declared) for n in node.nodes))
    if isinstance(node, Repetition):
        return Repetition(node.repeat, _resolve(node.node, declared))
    if isinstance(node, (Group, Optional)):
        return type(node)(_resolve(node.node, declared))
    return node


def resolve_rule_names(rules: Sequence[Rule]) -> List[Rule]:
    """
    규칙 참조 표기를 선언 표기로 통일한다.
    ABNF 규칙 이름은 대소문자를 가리지 않지만 출력 문법의 키는 가리므로,
    `digit`으로 참조해도 `DIGIT = ...`로 선언됐으면 Rulename("DIGIT")가 된다.
    선언되지 않은 이름은 그대로 둔다.
    """
    declared = {r.name.lower(): r.name for r in rules}
    return [Rule(r.name, _resolve(r.node, declared), r.span) for r in rules]
