import pytest
from abnfconv.grammar.parser import parse_grammar

# 세미콜론 이후는 ABNF 주석
SIMPLE_RULESET = """
a = "a";
b = "b";
c = "c";

grp-a-any-bc = a ( b / c );
grp-a-all-bc = a ( b c );

nested-any-grp = a ( b / (a / c) );
nested-all-grp = a ( b (a c) );

star-a = *a;
one-star-a = 1*a;
star-two-a = *2a;
one-star-two-a = 1*2a;
"""

# 양끝 제한 반복(1*2a)을 뺀, 끝까지 변환 가능한 규칙 집합
CONVERTIBLE_RULESET = """
program = 1*statement
statement = assignment / [ "return" ] value ";"
assignment = name "=" value
name = %x61-63 *( %x61-63 / DIGIT )
value = 2DIGIT
DIGIT = %x30-32
"""


@pytest.fixture
def simple_rules():
    """중첩 그룹과 반복 형태를 고루 담은 규칙 집합"""
    return parse_grammar(SIMPLE_RULESET).rules


@pytest.fixture
def convertible_rules():
    return parse_grammar(CONVERTIBLE_RULESET).rules


@pytest.fixture
def rule_node(simple_rules):
    """이름으로 규칙 노드 찾기"""
    def _find(name):
        for r in simple_rules:
            if r.name == name:
                return r.node
        raise KeyError(name)
    return _find


@pytest.fixture
def abnf_file(tmp_path):
    """텍스트를 .abnf 파일로 써 주는 헬퍼"""
    def _write(text, name="grammar.abnf"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
