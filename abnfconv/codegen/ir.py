"""
abnfconv 방출용 IR
=======

규칙 목록을 받아, 직렬화기(emit_json)가 그대로 찍기만 하면 되는
**엔트리 목록(이름 + 대안 리스트)** 으로 정리한다.

엔트리 순서
-----------
1) 합성 시작 규칙  "<start>": [["<program>"]]
2) 추출 노드 규칙  — 발견 순서, 이름 기준 중복 제거(첫 등장 우선), toplevel로 본문 합성
3) 원본 규칙       — 선언 순서, 전체 추출 노드 집합을 기준으로 본문 합성

주의
----
- 규칙 참조는 먼저 선언 표기로 통일한다(ABNF 이름은 대소문자 무시, 출력 키는 구분).
- 추출 노드 집합은 본문 합성 **이전에** 완전히 만들어져 있어야 한다.
  (어떤 부분식을 참조로 바꿀지는 전체 집합을 보고 결정하므로)
- 서로 다른 노드가 같은 이름을 합성하면 첫 번째 규칙으로 합쳐진다(collapsed).
- 추출 노드 이름이 원본 규칙 이름과 같으면 원본 정의를 그대로 쓰고 추출 규칙은 내지 않는다(shadowed).
  예: `( a )` → 이름 "a" → 원본 규칙 <a>를 가리키게 된다.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, List, Sequence, Set
from ..grammar.ast import Node, Rule
from ..grammar.naming import synthesize_name
from ..grammar.transform import extract_nested_nodes, resolve_rule_names
from .body import synthesize_alternatives, rule_ref

START_RULE = "start"
DEFAULT_ROOT_RULE = "program"

ORIGIN_START, ORIGIN_EXTRACTED, ORIGIN_RULE = "start", "extracted", "rule"
STATE_EMITTED, STATE_COLLAPSED, STATE_SHADOWED = "rule", "collapsed", "shadowed"

@dataclass
class RuleEntry:
    """출력 규칙 1개. alternatives의 각 원소는 '요소, 요소' 형태(대괄호 없음)."""
    name: str
    alternatives: List[str]
    origin: str

@dataclass
class JsonGrammarIR:
    """
    JsonGrammarIR
    =============
    entries   : 방출 순서대로의 규칙 엔트리
    extracted : 추출기가 발견한 노드(중복 포함, 발견 순서)
    collapsed : 이름 충돌로 앞선 규칙에 합쳐진 추출 노드 이름(중복 발생 순)
    shadowed  : 원본 규칙 이름과 겹쳐 방출하지 않은 추출 노드 이름
    naming    : 추출 노드별 이름과 처리 결과(extracted와 같은 순서)
    """
    root_rule: str
    entries: List[RuleEntry] = field(default_factory=list)
    extracted: List[Node] = field(default_factory=list)
    collapsed: List[str] = field(default_factory=list)
    shadowed: List[str] = field(default_factory=list)
    naming: List[ExtractedName] = field(default_factory=list)

    def names(self) -> List[str]:
        return [e.name for e in self.entries]

    def entry(self, name: str) -> RuleEntry:
        for e in self.entries:
            if e.name == name:
                return e
        raise KeyError(name)


@dataclass
class ExtractedName:
    """추출 노드 1개의 합성 이름과 처리 결과(emitted / collapsed / shadowed)."""
    node: Node
    name: str
    state: str


def name_extracted_nodes(rules: Sequence[Rule]) -> List[ExtractedName]:
    """
    추출 노드마다 이름을 붙이고 방출 여부를 정한다(발견 순서 유지).
    rules의 참조 표기는 resolve_rule_names로 이미 통일돼 있어야 한다.
    """
    rule_names: Set[str] = {r.name for r in rules}
    known: Set[str] = set()
    out: List[ExtractedName] = []
    for node in extract_nested_nodes(rules):
        name = synthesize_name(node, True)
        if name in known:
            state = STATE_COLLAPSED
        elif name in rule_names:
            state = STATE_SHADOWED
        else:
            state = STATE_EMITTED
        known.add(name)
        out.append(ExtractedName(node, name, state))
    return out


def build_ir(rules: Sequence[Rule], root_rule: str = DEFAULT_ROOT_RULE) -> JsonGrammarIR:
    """
    build_ir(rules[, root_rule]) -> JsonGrammarIR
    ---------------------------------------------
    UnsupportedConstruct는 그대로 전파된다(부분 결과 없음).
    """
    ir = JsonGrammarIR(root_rule=root_rule)

    # 0) 참조 표기를 선언 표기로 통일 (digit → DIGIT)
    rules = resolve_rule_names(rules)

    # 1) 추출 노드를 전부 모은 뒤 고정
    ir.naming = name_extracted_nodes(rules)
    ir.extracted = [x.node for x in ir.naming]
    frozen: FrozenSet[Node] = frozenset(ir.extracted)

    # 2) 시작 규칙
    ir.entries.append(RuleEntry(START_RULE, [rule_ref(root_rule)], ORIGIN_START))

    # 3) 추출 노드 규칙
    for x in ir.naming:
        if x.state == STATE_COLLAPSED:
            ir.collapsed.append(x.name)
        elif x.state == STATE_SHADOWED:
            ir.shadowed.append(x.name)
        else:
            alts = synthesize_alternatives(x.node, frozen, True)
            ir.entries.append(RuleEntry(x.name, alts, ORIGIN_EXTRACTED))

    # 4) 원본 규칙
    for r in rules:
        alts = synthesize_alternatives(r.node, frozen, False)
        ir.entries.append(RuleEntry(r.name, alts, ORIGIN_RULE))

    return ir
