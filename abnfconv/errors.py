# abnfconv/errors.py
"""abnfconv 오류 분류

- MalformedInput       : ABNF 원문 파싱 실패(프런트엔드). 위치와 캐럿 스니펫을 메시지에 담는다.
- UnsupportedConstruct : 변환기가 인코딩할 수 없는 노드 형태(예: 1*2a 같은 양끝 제한 반복).

둘 다 치명적이며 부분 출력은 만들지 않는다.
"""

from __future__ import annotations


class MalformedInput(SyntaxError):
    """ABNF 문법 텍스트가 잘못되었을 때."""


class UnsupportedConstruct(ValueError):
    """본문/이름 합성 단계에서 표현할 수 없는 노드를 만났을 때."""
