"""ABNF 파서 (RFC 5234 + RFC 7405 문자열 접두어)
- rule = rulename ("=" / "=/") elements
- alternation : concatenation *( "/" concatenation )
- repetition  : [n | n*m | n* | *m | *] element (반복 접두어와 요소 사이 공백 불가)
- element     : rulename | "(" alt ")" | "[" alt "]" | char-val | num-val | prose-val
- char-val    : "..." | %s"..." | %i"..."
- num-val     : %x41 | %x41-5A | %x0D.0A  (%b / %d / %x)
- 주석은 ';' 부터 줄 끝까지
- 규칙 경계는 'RULENAME 뒤에 = 또는 =/' 가 오는 지점 (줄바꿈/들여쓰기에 의존하지 않음)
- `=/`는 기존 규칙에 대안을 덧붙인다(병합)
"""

from __future__ import annotations
import regex as re
import typing
from dataclasses import dataclass
from typing import List, Tuple
from .ast import *
from ..errors import MalformedInput

# ---- Lexer 토큰 ----
_HEX = r"[0-9A-Fa-f]+"
_NUMVAL = (
    r"%(?:[bB][01]+(?:(?:\.[01]+)+|-[01]+)?"
    r"|[dD][0-9]+(?:(?:\.[0-9]+)+|-[0-9]+)?"
    rf"|[xX]{_HEX}(?:(?:\.{_HEX})+|-{_HEX})?)"
)

_TOKEN_SPEC = [
    ("WS",       r"[ \t\f]+"),
    ("NEWLINE",  r"\r?\n"),
    ("COMMENT",  r";[^\n]*"),
    ("EQ_ALT",   r"=/"),
    ("EQ",       r"="),
    ("SLASH",    r"/"),
    ("LPAREN",   r"\("),
    ("RPAREN",   r"\)"),
    ("LBRACK",   r"\["),
    ("RBRACK",   r"\]"),
    ("REPEAT",   r"[0-9]*\*[0-9]*|[0-9]+"),
    ("CHARVAL",  r'(?:%[sSiI])?"[^"\n]*"'),
    ("NUMVAL",   _NUMVAL),
    ("PROSE",    r"<[^>\n]*>"),
    ("RULENAME", r"[A-Za-z][A-Za-z0-9-]*"),
]
MASTER_RE = re.compile("|".join(f"(?P<{n}>{p})" for n, p in _TOKEN_SPEC))

_NUM_BASE = {"b": 2, "d": 10, "x": 16}

# 요소를 시작할 수 있는 토큰
_ELEMENT_START = ("REPEAT", "RULENAME", "LPAREN", "LBRACK", "CHARVAL", "NUMVAL", "PROSE")

@dataclass
class Tok:
    kind: str
    lexeme: str
    start: int
    end: int
    line: int
    col: int

def _scan(src: str) -> List[Tok]:
    """공백/개행/주석은 줄·칼럼 갱신만 하고 토큰스트림에는 넣지 않는다."""
    toks: List[Tok] = []
    line = col = 1
    i = 0
    while i < len(src):
        m = MASTER_RE.match(src, i)
        if not m:
            snippet = _snippet_caret_at_pos(src, i)
            raise MalformedInput(f"Unexpected char {src[i]!r} at {line}:{col}\n{snippet}")
        kind = m.lastgroup or ""
        lex = m.group(0)
        if kind not in ("WS", "NEWLINE", "COMMENT"):
            toks.append(Tok(kind, lex, i, m.end(), line, col))
        if kind == "NEWLINE":
            line += 1
            col = 1
        else:
            col += len(lex)
        i = m.end()

    toks.append(Tok("EOF", "", len(src), len(src), line, col))
    return toks


# ---------- error handling utils ----------
def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """pos가 속한 라인의 [시작, 끝) 범위"""
    start = src.rfind("\n", 0, pos)
    start = 0 if start == -1 else start + 1
    end = src.find("\n", pos)
    if end == -1:
        end = len(src)
    return start, end

def _snippet_caret_at_pos(src: str, pos: int) -> str:
    start, end = _line_bounds(src, pos)
    line_text = src[start:end].rstrip("\r")
    caret = " " * (pos - start) + "^"
    return f"{line_text}\n{caret}"

def _snippet_with_caret(src: str, tok: Tok) -> str:
    """토큰 시작 위치에 캐럿"""
    return _snippet_caret_at_pos(src, tok.start)

# --- 토큰 스트림 ---
class _TS:
    def __init__(self, toks: List[Tok], src: str):
        self.toks = toks
        self.i = 0
        self.src = src

    def la(self, k: int = 0) -> Tok:
        return self.toks[min(self.i + k, len(self.toks) - 1)]

    def eat(self, kind: str) -> Tok:
        t = self.la()
        if t.kind != kind:
            snippet = _snippet_with_caret(self.src, t)
            raise MalformedInput(
                f"Expected {kind}, got {t.kind} at {t.line}:{t.col}\n{snippet}"
            )
        self.i += 1
        return t

    def match(self, kind: str) -> typing.Optional[Tok]:
        if self.la().kind == kind:
            return self.eat(kind)
        return None

    def at_rule_start(self) -> bool:
        """RULENAME 다음이 '=' 또는 '=/'면 새 규칙의 시작."""
        return self.la().kind == "RULENAME" and self.la(1).kind in ("EQ", "EQ_ALT")


# --- 리터럴 해석 ---
def _parse_repeat(lexeme: str) -> Repeat:
    if "*" not in lexeme:
        return Specific(int(lexeme))
    lo, hi = lexeme.split("*", 1)
    return Variable(min=int(lo) if lo else None, max=int(hi) if hi else None)

def _parse_charval(lexeme: str) -> String:
    # %s / %i 접두어는 대소문자 구분 표시일 뿐, 텍스트만 보존한다
    if lexeme.startswith("%"):
        lexeme = lexeme[2:]
    return String(lexeme[1:-1])

def _parse_numval(lexeme: str) -> TerminalValues:
    base = _NUM_BASE[lexeme[1].lower()]
    body = lexeme[2:]
    if "-" in body:
        lo, hi = body.split("-", 1)
        return TerminalValues(Range(int(lo, base), int(hi, base)))
    return TerminalValues(CodepointSeq(tuple(int(v, base) for v in body.split("."))))


# --- Grammar Parsing ---
def parse_grammar(src: str) -> Grammar:
    ts = _TS(_scan(src), src)
    g = Grammar()
    index = {}  # 소문자 이름 → g.rules 위치

    while ts.la().kind != "EOF":
        name_tok = ts.eat("RULENAME")
        name = name_tok.lexeme
        defined = ts.la()
        if defined.kind not in ("EQ", "EQ_ALT"):
            snippet = _snippet_with_caret(src, defined)
            raise MalformedInput(
                f"Expected '=' or '=/' after rule name '{name}', got {defined.kind} "
                f"at {defined.line}:{defined.col}\n{snippet}"
            )
        ts.eat(defined.kind)
        node = _parse_alternation(ts)
        key = name.lower()
        span = Span(name_tok.line, name_tok.col)

        if defined.kind == "EQ":
            if key in index:
                snippet = _snippet_with_caret(src, name_tok)
                raise MalformedInput(
                    f"Rule '{name}' is already defined (use '=/' to add alternatives) "
                    f"at {name_tok.line}:{name_tok.col}\n{snippet}"
                )
            index[key] = len(g.rules)
            g.rules.append(Rule(name, node, span))
        else:
            if key not in index:
                snippet = _snippet_with_caret(src, name_tok)
                raise MalformedInput(
                    f"Incremental alternative for undefined rule '{name}' "
                    f"at {name_tok.line}:{name_tok.col}\n{snippet}"
                )
            pos = index[key]
            old = g.rules[pos]
            g.rules[pos] = Rule(old.name, _merge_alternatives(old.node, node), old.span)

    return g

def _merge_alternatives(old: Node, new: Node) -> Node:
    """`r = a / b` + `r =/ c` → Alternatives(a, b, c)"""
    left = old.nodes if isinstance(old, Alternatives) else (old,)
    right = new.nodes if isinstance(new, Alternatives) else (new,)
    return Alternatives(left + right)

def _parse_alternation(ts: _TS) -> Node:
    alts = [_parse_concatenation(ts)]
    while ts.match("SLASH"):
        alts.append(_parse_concatenation(ts))
    if len(alts) == 1:
        return alts[0]
    return Alternatives(tuple(alts))

def _parse_concatenation(ts: _TS) -> Node:
    items: List[Node] = []
    while ts.la().kind in _ELEMENT_START and not ts.at_rule_start():
        items.append(_parse_repetition(ts))
    if not items:
        t = ts.la()
        snippet = _snippet_with_caret(ts.src, t)
        raise MalformedInput(f"Expected an element, got {t.kind} at {t.line}:{t.col}\n{snippet}")
    if len(items) == 1:
        return items[0]
    return Concatenation(tuple(items))

def _parse_repetition(ts: _TS) -> Node:
    rep_tok = ts.match("REPEAT")
    if rep_tok is not None and ts.la().start != rep_tok.end:
        # repetition = [repeat] element : 사이에 공백 불가
        t = ts.la()
        snippet = _snippet_with_caret(ts.src, t)
        raise MalformedInput(
            f"Repeat '{rep_tok.lexeme}' must be directly followed by its element "
            f"at {t.line}:{t.col}\n{snippet}"
        )
    element = _parse_element(ts)
    if rep_tok is None:
        return element
    return Repetition(_parse_repeat(rep_tok.lexeme), element)

def _parse_element(ts: _TS) -> Node:
    t = ts.la()
    if t.kind == "RULENAME":
        return Rulename(ts.eat("RULENAME").lexeme)
    elif t.kind == "LPAREN":
        ts.eat("LPAREN")
        inner = _parse_alternation(ts)
        ts.eat("RPAREN")
        return Group(inner)
    elif t.kind == "LBRACK":
        ts.eat("LBRACK")
        inner = _parse_alternation(ts)
        ts.eat("RBRACK")
        return Optional(inner)
    elif t.kind == "CHARVAL":
        return _parse_charval(ts.eat("CHARVAL").lexeme)
    elif t.kind == "NUMVAL":
        return _parse_numval(ts.eat("NUMVAL").lexeme)
    elif t.kind == "PROSE":
        return Prose(ts.eat("PROSE").lexeme[1:-1])

    snippet = _snippet_with_caret(ts.src, t)
    raise MalformedInput(f"Unexpected token {t.kind} at {t.line}:{t.col}\n{snippet}")
