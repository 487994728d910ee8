"""
구조 생성기: 파서 결과(상대 경로 목록) → 실제 파일/폴더.

규칙:
- 기존 파일은 절대 덮어쓰지 않음 (skipped로 기록)
- "/"로 끝나는 경로는 폴더 선언 → 폴더만 생성
- target_dir 밖으로 나가는 경로(절대 경로, "..")는 쓰기 전에 전체 거부
- 생성된 폴더는 새로 만들어진 단계마다 한 번씩 기록
"""

import logging
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from filemet.core.parser import parse_structure
from filemet.domain.constants import PATH_SEPARATOR
from filemet.domain.errors import ErrorCodes, StructureError
from filemet.domain.schemas import StructureResult

logger = logging.getLogger(__name__)


def resolve_target_dir(path: Path) -> Path:
    """
    생성 기준 폴더 결정.

    - 폴더 → 그대로
    - 파일 → 상위 폴더 (파일에서 명령을 실행한 경우)

    Raises:
        StructureError: TARGET_NOT_FOUND
    """
    if path.is_dir():
        return path
    if path.is_file():
        return path.parent

    raise StructureError(
        ErrorCodes.TARGET_NOT_FOUND,
        f"Target '{path}' does not exist",
        target=str(path),
    )


def _resolve_inside(root: Path, relative: str) -> Path:
    """root 기준 경로 계산 + 탈출 검사."""
    if PurePosixPath(relative).is_absolute() or Path(relative).is_absolute():
        raise StructureError(
            ErrorCodes.PATH_OUTSIDE_TARGET,
            f"Absolute path not allowed: '{relative}'",
            path=relative,
        )

    full_path = (root / relative).resolve()
    if full_path != root and root not in full_path.parents:
        raise StructureError(
            ErrorCodes.PATH_OUTSIDE_TARGET,
            f"Path escapes target directory: '{relative}'",
            path=relative,
        )
    return full_path


def _make_dirs(root: Path, folder: Path) -> list[Path]:
    """folder까지 없는 폴더 생성, 새로 만든 폴더 목록 반환 (상위부터)."""
    missing: list[Path] = []
    current = folder
    while current != root and not current.exists():
        missing.append(current)
        current = current.parent

    folder.mkdir(parents=True, exist_ok=True)
    return list(reversed(missing))


def create_structure(target_dir: Path, paths: Iterable[str]) -> StructureResult:
    """
    경로 목록대로 빈 파일/폴더 생성.

    Args:
        target_dir: 생성 기준 폴더
        paths: 파서가 만든 상대 경로 목록

    Returns:
        StructureResult

    Raises:
        StructureError: PATH_OUTSIDE_TARGET (아무것도 쓰기 전), CREATE_FAILED
    """
    root = target_dir.resolve()
    planned = [(relative, _resolve_inside(root, relative)) for relative in paths]

    result = StructureResult()

    for relative, full_path in planned:
        is_folder = relative.endswith(PATH_SEPARATOR)
        folder = full_path if is_folder else full_path.parent

        try:
            for created in _make_dirs(root, folder):
                relative_dir = created.relative_to(root).as_posix()
                if relative_dir not in result.created_folders:
                    result.created_folders.append(relative_dir)

            if is_folder:
                continue

            if full_path.exists():
                result.skipped.append(relative)
                continue

            full_path.touch(exist_ok=False)
            result.created_files.append(relative)

        except OSError as e:
            logger.error(f"Failed to create '{relative}' under {root}: {e}")
            raise StructureError(
                ErrorCodes.CREATE_FAILED,
                f"Error creating files: {e}",
                path=relative,
            ) from e

    logger.info(f"{result.summary()} in {root}")
    return result


def build_structure(expression: str, target_dir: Path) -> StructureResult:
    """
    표현식 파싱 후 구조 생성.

    구문 에러면 디스크를 건드리지 않고 ExpressionSyntaxError 전파.
    """
    paths = parse_structure(expression)
    return create_structure(target_dir, paths)
