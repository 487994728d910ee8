"""
Domain Constants: filemet 전역 상수.

표현식 문법 기호, 저장소 파일명, 기본 카테고리 등.
"""

# =============================================================================
# Expression Syntax (표현식 문법)
# =============================================================================
# components/{Header.jsx,Footer.jsx} + utils/helpers.js
# - 그룹: [...] {...} (...)  → 세 종류 모두 그룹 문법, () 만 리터럴 판별 규칙 추가
# - 구분자: + ,              → 괄호 깊이 0 에서만 분리

OPEN_BRACKETS = "[{("
CLOSE_BRACKETS = "]})"
BRACKET_PAIRS = {"[": "]", "{": "}", "(": ")"}
CLOSE_TO_OPEN = {close: open_ for open_, close in BRACKET_PAIRS.items()}

PLUS_SEPARATOR = "+"
COMMA_SEPARATOR = ","
SEPARATORS = PLUS_SEPARATOR + COMMA_SEPARATOR

PATH_SEPARATOR = "/"

# =============================================================================
# Custom Expression Store (커스텀 표현식 저장소)
# =============================================================================
# <store_dir>/
# ├── custom_expressions.json       # export 형식과 동일한 배열
# └── custom_expressions.json.lock

CUSTOM_STORE_FILENAME = "custom_expressions.json"
DEFAULT_CUSTOM_CATEGORY = "custom"
CUSTOM_ID_PREFIX = "custom"

IMPORT_MODE_MERGE = "merge"
IMPORT_MODE_REPLACE = "replace"
IMPORT_MODES = (IMPORT_MODE_MERGE, IMPORT_MODE_REPLACE)

# =============================================================================
# Config (설정)
# =============================================================================

DEFAULT_CONFIG_FILENAME = "default.yaml"
ENV_STORE_PATH = "FILEMET_STORE_PATH"
ENV_WORKSPACE_ROOT = "FILEMET_WORKSPACE_ROOT"
