# abnfconv/codegen/emit_json.py
"""JSON 문법 방출 (문자열 생성).

형식
----
    {
      "<start>": [["<program>"]],
      "<b-or-c>": [["<b>"], ["<c>"]],
      "<grp-a-any-bc>": [["<a>", "<b-or-c>"]]
    }

- 키는 항상 따옴표 안의 꺾쇠 이름 "<...>"
- 값은 대안 리스트, 각 대안은 요소 리스트 (빈 대안은 [])
- 한 줄에 규칙 하나. 결과는 json.loads로 읽을 수 있는 UTF-8 텍스트(비ASCII 그대로)
"""

from __future__ import annotations
from typing import List, Sequence
from ..grammar.ast import Rule
from .ir import JsonGrammarIR, RuleEntry, build_ir, DEFAULT_ROOT_RULE
from .body import rule_ref


def _fmt_alternatives(alts: List[str]) -> str:
    """['"a"', ''] → [["a"], []]"""
    return "[" + ", ".join(f"[{a}]" for a in alts) + "]"


def _fmt_entry(e: RuleEntry, indent: str) -> str:
    return f"{indent}{rule_ref(e.name)}: {_fmt_alternatives(e.alternatives)}"


def emit_json_to_string(ir: JsonGrammarIR, indent: str = "  ") -> str:
    lines = [_fmt_entry(e, indent) for e in ir.entries]
    return "{\n" + ",\n".join(lines) + "\n}"


def ruleset_to_json(rules: Sequence[Rule], root_rule: str = DEFAULT_ROOT_RULE) -> str:
    """규칙 목록 → JSON 문법 텍스트 (build_ir + emit_json_to_string)."""
    return emit_json_to_string(build_ir(rules, root_rule=root_rule))
