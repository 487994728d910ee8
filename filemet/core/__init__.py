"""
Core layer: 표현식 파서와 구조 생성.

역할:
- parser: 표현식 → 경로 목록 (순수 함수)
- structure: 경로 목록 → 파일/폴더
- atomic: 원자적 JSON 쓰기
- ids: 커스텀 표현식 id
"""

from .atomic import atomic_write_json, atomic_write_text
from .ids import generate_expression_id
from .parser import FileStructureParser, parse_structure
from .structure import build_structure, create_structure, resolve_target_dir

__all__ = [
    # parser
    "FileStructureParser",
    "parse_structure",
    # structure
    "build_structure",
    "create_structure",
    "resolve_target_dir",
    # atomic
    "atomic_write_json",
    "atomic_write_text",
    # ids
    "generate_expression_id",
]
