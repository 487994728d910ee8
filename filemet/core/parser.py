"""
표현식 파서: 한 줄짜리 파일 구조 표현식 → 상대 경로 목록.

문법:
- 구분자: "+" 또는 "," (괄호 깊이 0 에서만 분리)
- 그룹: base[...], base{...}, base(...) → base/<그룹 내용 확장>
- "+"는 파일명 접두어일 수 있음 (SvelteKit +page.svelte, folder/+component.tsx)

예:
    api[users/{controller.ts,service.ts} + auth/middleware.ts]
    → api/users/controller.ts, api/users/service.ts, api/auth/middleware.ts

보장:
- 순수 함수: I/O, 전역 가변 상태 없음 → 스레드 안전
- 실패는 전체 단위: 한 파트라도 잘못되면 부분 결과 없이 에러
- 중첩 그룹은 명시적 스택으로 확장 (파이썬 재귀 한도와 무관)
"""

import logging
import re

from filemet.domain.constants import (
    BRACKET_PAIRS,
    CLOSE_BRACKETS,
    CLOSE_TO_OPEN,
    COMMA_SEPARATOR,
    OPEN_BRACKETS,
    PATH_SEPARATOR,
    SEPARATORS,
)
from filemet.domain.errors import INVALID_SYNTAX_MESSAGE, ErrorCodes, ExpressionSyntaxError
from filemet.domain.schemas import Group

logger = logging.getLogger(__name__)

# "folder / file.ts" → "folder/file.ts"
_SLASH_WHITESPACE = re.compile(r"\s*/\s*")

# 작업 스택 항목 종류
_EXPRESSION = "expression"
_PART = "part"


# =============================================================================
# Path Helpers
# =============================================================================


def normalize_path(path: str) -> str:
    """바깥 공백 제거 + "/" 주변 공백 제거. 경로 내부 공백은 유지."""
    return _SLASH_WHITESPACE.sub(PATH_SEPARATOR, path.strip())


def join_path(base_path: str, sub_path: str) -> str:
    """
    base_path와 sub_path를 "/" 하나로 연결.

    base의 끝 슬래시, sub의 앞 슬래시는 제거 (중복 슬래시 방지).
    """
    clean_base = normalize_path(base_path).rstrip(PATH_SEPARATOR)
    clean_sub = sub_path.lstrip(PATH_SEPARATOR)
    return f"{clean_base}{PATH_SEPARATOR}{clean_sub}"


# =============================================================================
# Tokenizer
# =============================================================================


def _is_plus_separator(expr: str, index: int, current: str) -> bool:
    """
    "+"가 구분자인지 파일명 일부인지 판별.

    구분자:
    - 앞 또는 뒤에 공백이 있음 ("a + b", "+ file.ts")
    - 토큰 시작이 아니고 "/" 바로 뒤도 아님 ("file.ts+another.ts")

    리터럴:
    - 토큰 시작 ("+file.ts"), "/" 바로 뒤 ("folder/+component.tsx")
    """
    before = expr[index - 1] if index > 0 else ""
    after = expr[index + 1] if index + 1 < len(expr) else ""

    if before.isspace() or after.isspace():
        return True

    at_token_start = not current.strip()
    after_path_separator = before == PATH_SEPARATOR
    return not at_token_start and not after_path_separator


def split_top_level(expr: str) -> list[str]:
    """
    괄호 깊이 0의 구분자로 분리.

    Args:
        expr: 표현식 (또는 그룹 내용)

    Returns:
        앞뒤 공백이 제거된 비어 있지 않은 파트 목록 (순서 유지)

    Raises:
        ExpressionSyntaxError: UNOPENED_BRACKET, UNCLOSED_BRACKET
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0

    for index, char in enumerate(expr):
        if char in OPEN_BRACKETS:
            depth += 1
        elif char in CLOSE_BRACKETS:
            depth -= 1
            if depth < 0:
                raise ExpressionSyntaxError(
                    ErrorCodes.UNOPENED_BRACKET,
                    position=index,
                    bracket=char,
                )
        elif char in SEPARATORS and depth == 0:
            if char == COMMA_SEPARATOR or _is_plus_separator(expr, index, "".join(current)):
                parts.append("".join(current))
                current = []
                continue

        current.append(char)

    if depth != 0:
        raise ExpressionSyntaxError(ErrorCodes.UNCLOSED_BRACKET, depth=depth)

    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


def validate_brackets(part: str) -> None:
    """
    괄호 종류 짝 검증 (스택 기반).

    Raises:
        ExpressionSyntaxError: MISMATCHED_BRACKET, UNCLOSED_BRACKET
    """
    stack: list[str] = []

    for index, char in enumerate(part):
        if char in OPEN_BRACKETS:
            stack.append(char)
        elif char in CLOSE_BRACKETS:
            if not stack or BRACKET_PAIRS[stack.pop()] != char:
                raise ExpressionSyntaxError(
                    ErrorCodes.MISMATCHED_BRACKET,
                    position=index,
                    bracket=char,
                )

    if stack:
        raise ExpressionSyntaxError(ErrorCodes.UNCLOSED_BRACKET, depth=len(stack))


# =============================================================================
# Group Detection
# =============================================================================


def find_trailing_group(part: str) -> Group | None:
    """
    파트 맨 끝에 붙은 괄호 그룹 찾기.

    마지막 문자가 닫는 괄호일 때만 그룹 후보. 같은 종류의 괄호 중첩만 세면서
    뒤에서 앞으로 여는 괄호를 찾는다. 중간에 있는 괄호("app/(auth)/page.tsx")는
    그룹이 아니다.
    """
    if not part or part[-1] not in CLOSE_BRACKETS:
        return None

    close_bracket = part[-1]
    open_bracket = CLOSE_TO_OPEN[close_bracket]
    depth = 1

    for index in range(len(part) - 2, -1, -1):
        char = part[index]
        if char == close_bracket:
            depth += 1
        elif char == open_bracket:
            depth -= 1
            if depth == 0:
                return Group(
                    base_path=part[:index],
                    open_bracket=open_bracket,
                    content=part[index + 1 : -1],
                    close_bracket=close_bracket,
                )

    return None


def has_top_level_separator(content: str) -> bool:
    """그룹 내용에 깊이 0의 "+" 또는 ","가 있는지."""
    depth = 0
    for char in content:
        if char in OPEN_BRACKETS:
            depth += 1
        elif char in CLOSE_BRACKETS:
            depth -= 1
        elif char in SEPARATORS and depth == 0:
            return True
    return False


def is_grouping(group: Group) -> bool:
    """
    그룹 문법인지 리터럴 텍스트인지 판별.

    - 빈 그룹: 항상 그룹 (결과 0개)
    - [] / {}: 항상 그룹
    - (): 내용에 최상위 구분자가 있거나,
          base가 비어 있지 않고 "/"가 없을 때만 그룹 ("pages(home.tsx)")
          그 외는 리터럴 ("app/(dashboard)")
    """
    if group.is_empty:
        return True
    if not group.is_parentheses:
        return True
    if has_top_level_separator(group.content):
        return True
    return bool(group.base_path) and PATH_SEPARATOR not in group.base_path


# =============================================================================
# Parser
# =============================================================================


def _apply_bases(bases: tuple[str, ...], path: str) -> str:
    for base_path in reversed(bases):
        path = join_path(base_path, path)
    return path


def parse_structure(expression: str) -> list[str]:
    """
    표현식 → 상대 경로 목록.

    Args:
        expression: 파일 구조 표현식

    Returns:
        선언 순서대로 확장된 경로 목록 (중복 허용, 빈 문자열 없음)

    Raises:
        ExpressionSyntaxError: 빈 입력, 괄호 불일치
    """
    cleaned = expression.strip()
    if not cleaned:
        raise ExpressionSyntaxError(ErrorCodes.EMPTY_EXPRESSION)

    paths: list[str] = []

    # (종류, 텍스트, 바깥 그룹들의 base 경로) - LIFO라서 파트는 역순으로 push
    pending: list[tuple[str, str, tuple[str, ...]]] = [(_EXPRESSION, cleaned, ())]

    while pending:
        kind, text, bases = pending.pop()

        if kind == _EXPRESSION:
            parts = split_top_level(text)
            pending.extend((_PART, part, bases) for part in reversed(parts))
            continue

        validate_brackets(text)
        group = find_trailing_group(text)

        if group is None or not is_grouping(group):
            paths.append(_apply_bases(bases, normalize_path(text)))
            continue

        inner_bases = bases + (group.base_path,) if group.base_path else bases
        pending.append((_EXPRESSION, group.content, inner_bases))

    return [path for path in paths if path]


class FileStructureParser:
    """
    표현식 파서 (에디터 명령 호환 인터페이스).

    상태 없음. 인스턴스 하나를 여러 스레드에서 공유해도 안전.
    """

    def parse(self, expression: str) -> list[str] | str:
        """
        표현식 파싱.

        Returns:
            경로 목록, 또는 실패 시 INVALID_SYNTAX_MESSAGE 문자열
        """
        try:
            return parse_structure(expression)
        except ExpressionSyntaxError as e:
            logger.debug(f"Rejected expression {expression!r}: {e.code} {e.context}")
            return INVALID_SYNTAX_MESSAGE

    @staticmethod
    def is_error(result: list[str] | str) -> bool:
        """parse() 결과가 에러 sentinel인지."""
        return isinstance(result, str)
