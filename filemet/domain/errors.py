"""
Error definitions for filemet.

규칙:
- 조용한 실패 금지 → 코드가 있는 예외로 명시적 실패
- 파서 에러는 종류와 무관하게 사용자에게 단일 메시지로 노출
- code/context는 로그와 API 응답용
"""

from typing import Any

# 기존 소비자(에디터 명령, 저장된 템플릿 도구)와의 호환을 위해 문자열 그대로 유지
INVALID_SYNTAX_MESSAGE = "ERROR: Invalid expression syntax"


class FilemetError(Exception):
    """
    filemet 공통 에러.

    Usage:
        raise FilemetError("SOME_CODE", "message", path="a/b")
    """

    def __init__(self, code: str, message: str = "", **context: Any) -> None:
        self.code = code
        self.message = message or code
        self.context = context
        super().__init__(f"[{code}] {self.message}")

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


class ExpressionSyntaxError(FilemetError):
    """
    표현식 구문 에러.

    내부 code(EMPTY_EXPRESSION, UNOPENED_BRACKET 등)는 디버깅용이고,
    사용자에게는 항상 INVALID_SYNTAX_MESSAGE만 보여준다.
    위치/기대 토큰 같은 상세 정보는 노출하지 않는다.
    """

    def __init__(self, code: str, **context: Any) -> None:
        super().__init__(code, INVALID_SYNTAX_MESSAGE, **context)

    @property
    def user_message(self) -> str:
        return INVALID_SYNTAX_MESSAGE


class StructureError(FilemetError):
    """파일/폴더 생성 단계 에러."""


class ExpressionStoreError(FilemetError):
    """커스텀 표현식 저장소 에러."""


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Parser ===
    INVALID_SYNTAX = "INVALID_SYNTAX"  # API 응답용 통합 코드
    EMPTY_EXPRESSION = "EMPTY_EXPRESSION"
    UNOPENED_BRACKET = "UNOPENED_BRACKET"
    UNCLOSED_BRACKET = "UNCLOSED_BRACKET"
    MISMATCHED_BRACKET = "MISMATCHED_BRACKET"

    # === Structure ===
    PATH_OUTSIDE_TARGET = "PATH_OUTSIDE_TARGET"
    TARGET_NOT_FOUND = "TARGET_NOT_FOUND"
    CREATE_FAILED = "CREATE_FAILED"

    # === Store ===
    INVALID_EXPRESSION = "INVALID_EXPRESSION"
    EXPRESSION_NOT_FOUND = "EXPRESSION_NOT_FOUND"
    INVALID_UPDATE_FIELD = "INVALID_UPDATE_FIELD"
    IMPORT_FAILED = "IMPORT_FAILED"
    STORE_CORRUPT = "STORE_CORRUPT"
    STORE_LOCK_TIMEOUT = "STORE_LOCK_TIMEOUT"

    # === Catalog ===
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
