import json
from abnfconv.abnfc import main
from abnfconv.codegen.emit_json import ruleset_to_json
from abnfconv.grammar.parser import parse_grammar

GRAMMAR = """
program = grp-a-any-bc star-a
a = "a"
b = "b"
c = "c"
grp-a-any-bc = a ( b / c )
star-a = *a
"""


def test_build_writes_json(abnf_file, tmp_path, capsys):
    src = abnf_file(GRAMMAR)
    out = tmp_path / "out" / "grammar.json"
    assert main(["build", str(src), "-o", str(out)]) == 0
    text = out.read_text(encoding="utf-8")
    assert text == ruleset_to_json(parse_grammar(GRAMMAR).rules) + "\n"
    grammar = json.loads(text)
    assert grammar["<b-or-c>"] == [["<b>"], ["<c>"]]
    assert "[EMIT]" in capsys.readouterr().out


def test_build_to_stdout(abnf_file, capsys):
    src = abnf_file(GRAMMAR)
    assert main(["build", str(src), "--root", "star-a"]) == 0
    grammar = json.loads(capsys.readouterr().out)
    assert grammar["<start>"] == [["<star-a>"]]


def test_build_warns_on_unknown_root(abnf_file, capsys):
    src = abnf_file(GRAMMAR)
    assert main(["build", str(src), "--root", "missing"]) == 0
    assert "[WARN]" in capsys.readouterr().err


def test_check_reports_summary(abnf_file, capsys):
    src = abnf_file(GRAMMAR)
    assert main(["check", str(src), "-D"]) == 0
    captured = capsys.readouterr()
    assert "[CHECK OK] rules=6 extracted=2 entries=9" in captured.out
    assert "[DEBUG] AST ready | rules=6" in captured.err


def test_check_fails_on_bounded_repetition(abnf_file, capsys):
    src = abnf_file('a = "a"\none-star-two-a = 1*2a\n')
    assert main(["check", str(src)]) == 2
    assert "UnsupportedConstruct" in capsys.readouterr().err


def test_build_fails_on_syntax_error(abnf_file, tmp_path, capsys):
    src = abnf_file('a = "a" &\n')
    out = tmp_path / "never.json"
    assert main(["build", str(src), "-o", str(out)]) == 2
    assert "[SYNTAX ERROR]" in capsys.readouterr().err
    assert not out.exists()


def test_names_lists_extracted_nodes(abnf_file, capsys):
    src = abnf_file(GRAMMAR + "again = ( b / c )\nwrap = ( a )\n")
    assert main(["names", str(src)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "000: rule      b-or-c",
        "001: rule      zero-or-more-as",
        "002: collapsed b-or-c",
        "003: shadowed  a",
    ]


def test_names_follow_declared_spelling(abnf_file, capsys):
    src = abnf_file('program = ( digit ) ( Digit / "x" )\nDIGIT = "0"\n')
    assert main(["names", str(src)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "000: shadowed  DIGIT",
        "001: rule      DIGIT-or-x",
    ]


def test_names_does_not_need_a_convertible_grammar(abnf_file, capsys):
    src = abnf_file('a = "a"\nb = 1*2a\n')
    assert main(["names", str(src)]) == 0
    assert capsys.readouterr().out.splitlines() == ["000: rule      between-1-and-2-as"]
