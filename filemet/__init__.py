"""filemet: 한 줄 표현식으로 파일/폴더 구조 만들기."""

from filemet.core.parser import FileStructureParser, parse_structure
from filemet.domain.errors import INVALID_SYNTAX_MESSAGE, ExpressionSyntaxError

__version__ = "0.1.0"

__all__ = [
    "FileStructureParser",
    "parse_structure",
    "ExpressionSyntaxError",
    "INVALID_SYNTAX_MESSAGE",
]
