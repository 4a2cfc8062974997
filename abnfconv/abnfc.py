# abnfconv/abnfc.py
"""abnfc – ABNF → JSON 문법 변환기 CLI

사용 예)
    $ abnfc check grammars/aleo.abnf -D
    $ abnfc build grammars/aleo.abnf -o out/aleo.json --root program
    $ abnfc names grammars/aleo.abnf

기능
----
- check : 문법을 읽어 파이프라인(AST→추출→이름/본문 합성) 검증 및 요약 출력
- build : 문법을 읽어 퍼저용 JSON 문법으로 방출(-o 미지정 시 표준출력)
- names : 추출된 부분식과 합성 이름을 발견 순서대로 나열

디버그 모드(-D/--debug)를 켜면 단계별 요약을 표준에러로 출력합니다.
"""

from __future__ import annotations
import argparse
import pathlib
import sys
from typing import Optional

# ------------------------------
# 헬퍼
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)

# ------------------------------
# 파이프라인 로딩
# ------------------------------

def _load_pipeline(grammar_path: str, debug: bool, root_rule: str):
    """
    .abnf 파일을 읽어 AST→IR(추출 노드 규칙 + 원본 규칙)까지 생성.
    """
    from .grammar.loader import load_grammar_text
    from .grammar.parser import parse_grammar
    from .codegen.ir import build_ir

    src = load_grammar_text(grammar_path)
    g = parse_grammar(src)
    if debug: _eprint("[DEBUG] AST ready | rules=%d" % len(g.rules))

    ir = build_ir(g.rules, root_rule=root_rule)
    if debug:
        _eprint("[DEBUG] nested nodes extracted | found=%d collapsed=%d shadowed=%d" %
                (len(ir.extracted), len(ir.collapsed), len(ir.shadowed)))
        _eprint("[DEBUG] IR ready | entries=%d root=%s" % (len(ir.entries), root_rule))

    return g, ir

# ------------------------------
# 디버그 출력 헬퍼
# ------------------------------

def _print_ir_summary(ir) -> None:
    _eprint("\n[IR]")
    _eprint(f"Root: {ir.root_rule}")
    _eprint("Entries:")
    for e in ir.entries:
        _eprint(f"  {e.origin:<9} {e.name}  ({len(e.alternatives)} alt)")
    if ir.collapsed:
        _eprint("Collapsed names:")
        _eprint("  " + ", ".join(ir.collapsed))
    if ir.shadowed:
        _eprint("Shadowed by original rules:")
        _eprint("  " + ", ".join(ir.shadowed))

# ------------------------------
# 커맨드 구현
# ------------------------------

def cmd_check(args) -> int:
    try:
        g, ir = _load_pipeline(args.file, debug=args.debug, root_rule=args.root)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _print_ir_summary(ir)

    n_extracted = sum(1 for e in ir.entries if e.origin == "extracted")
    print(f"[CHECK OK] rules={len(g.rules)} extracted={n_extracted} entries={len(ir.entries)}")
    return 0


def cmd_build(args) -> int:
    try:
        g, ir = _load_pipeline(args.file, debug=args.debug, root_rule=args.root)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _print_ir_summary(ir)

    if g.find_rule(args.root) is None:
        _eprint(f"[WARN] Root rule <{args.root}> is not defined by the grammar.")

    from .codegen.emit_json import emit_json_to_string
    src = emit_json_to_string(ir)

    if args.output is None:
        print(src)
        return 0

    out_path = pathlib.Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(src + "\n", encoding="utf-8")
    print(f"[EMIT] entries={len(ir.entries)} -> {out_path}")
    if args.debug:
        _eprint(f"[DEBUG] bytes={len(src.encode('utf-8'))}")
    return 0


def cmd_names(args) -> int:
    """추출 노드별 합성 이름과 방출 여부를 보여줍니다. 본문 합성은 하지 않습니다."""
    try:
        from .grammar.loader import load_grammar_text
        from .grammar.parser import parse_grammar
        from .grammar.transform import resolve_rule_names
        from .codegen.ir import name_extracted_nodes
        g = parse_grammar(load_grammar_text(args.file))
        naming = name_extracted_nodes(resolve_rule_names(g.rules))
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]", str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    for i, x in enumerate(naming):
        print(f"{i:03d}: {x.state:<9} {x.name}")
    return 0


# ------------------------------
# 엔트리포인트
# ------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    from .codegen.ir import DEFAULT_ROOT_RULE

    ap = argparse.ArgumentParser(prog="abnfc", description="ABNF to JSON grammar converter")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="문법을 변환해 보고 지원하지 않는 구문이 없는지 확인합니다")
    p_check.add_argument("file", help=".abnf 문법 파일")
    p_check.add_argument("--root", default=DEFAULT_ROOT_RULE, help="<start>가 가리킬 루트 규칙")
    p_check.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_check.set_defaults(func=cmd_check)

    p_build = sub.add_parser("build", help="퍼저용 JSON 문법을 생성합니다")
    p_build.add_argument("file", help=".abnf 문법 파일")
    p_build.add_argument("-o", "--output", help="출력 파일 경로(미지정시 표준출력)")
    p_build.add_argument("--root", default=DEFAULT_ROOT_RULE, help="<start>가 가리킬 루트 규칙")
    p_build.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_build.set_defaults(func=cmd_build)

    p_names = sub.add_parser("names", help="추출된 부분식의 합성 이름을 나열합니다")
    p_names.add_argument("file", help=".abnf 문법 파일")
    p_names.set_defaults(func=cmd_names)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
