"""Domain layer: errors, schemas and constants."""

from .errors import (
    INVALID_SYNTAX_MESSAGE,
    ErrorCodes,
    ExpressionStoreError,
    ExpressionSyntaxError,
    FilemetError,
    StructureError,
)
from .schemas import (
    CustomExpression,
    FrameworkTemplate,
    Group,
    StructureResult,
    TemplateCategory,
)

__all__ = [
    "INVALID_SYNTAX_MESSAGE",
    "ErrorCodes",
    "FilemetError",
    "ExpressionSyntaxError",
    "StructureError",
    "ExpressionStoreError",
    "CustomExpression",
    "FrameworkTemplate",
    "Group",
    "StructureResult",
    "TemplateCategory",
]
