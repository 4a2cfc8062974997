"""간단한 .abnf 파일 로더"""

from __future__ import annotations
from pathlib    import Path


def load_grammar_text(path: str) -> str:
    """
    Load Grammar Text
    - BOM 제거(utf-8-sig), 개행은 '\\n'으로 통일
    - RFC 5234는 CRLF를 요구하지만 파서는 LF 기준으로 동작한다
    """
    text = Path(path).read_text(encoding="utf-8-sig")
    return text.replace("\r\n", "\n").replace("\r", "\n")
