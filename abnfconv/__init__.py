"""abnfconv — ABNF grammar → JSON CFG converter for grammar-based fuzzers.

This package provides:
- AST nodes for ABNF rules (structural equality/hash)
- An ABNF parser (RFC 5234, RFC 7405 string prefixes)
- The converter: nested-node extraction, name synthesis, body synthesis
  with repetition unrolling, and the JSON emitter
"""

from .errors import MalformedInput, UnsupportedConstruct
from .grammar.ast import (
    Alternatives, Concatenation, Repetition, Group, Optional, Rulename,
    String, TerminalValues, Range, CodepointSeq, Prose,
    Specific, Variable, Rule, Grammar,
)
from .grammar.parser import parse_grammar
from .grammar.transform import extract_nested_nodes, resolve_rule_names
from .grammar.naming import synthesize_name
from .codegen.body import synthesize_body, synthesize_alternatives
from .codegen.ir import build_ir
from .codegen.emit_json import emit_json_to_string, ruleset_to_json
