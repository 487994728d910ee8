"""
저장 파일 교체 쓰기.

custom_expressions.json 은 CLI 와 서버가 동시에 읽는다. 읽는 쪽이 반쯤 쓴
배열을 보지 않도록 같은 폴더의 임시 파일에 다 쓴 뒤 os.replace 로 바꿔 끼운다.
fsync 가 안 되는 파일시스템에서는 경고만 남긴다.
"""

import json
import logging
import os
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _sync_parent(folder: Path) -> None:
    """rename 결과(폴더 엔트리)를 디스크에 반영. Windows 등은 건너뜀."""
    flags = os.O_RDONLY | getattr(os, "O_DIRECTORY", 0)
    try:
        fd = os.open(folder, flags)
    except OSError as e:
        logger.warning(f"fsync failed: cannot open folder {folder}: {e}")
        return

    try:
        os.fsync(fd)
    except OSError as e:
        logger.warning(f"fsync failed for folder {folder}: {e}")
    finally:
        os.close(fd)


def atomic_write_text(path: Path, text: str) -> None:
    """
    path 내용을 text 로 통째로 교체.

    실패하면 기존 파일은 그대로 남고 임시 파일은 지워진다.

    Raises:
        OSError: 쓰기/교체 실패
    """
    folder = path.parent
    folder.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(dir=folder, prefix=f".{path.name}.", suffix=".tmp")
    temp_path = Path(temp_name)

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(f"fsync failed for {path.name}: {e}")

        os.replace(temp_path, path)
    except BaseException:
        with suppress(OSError):
            temp_path.unlink()
        raise

    _sync_parent(folder)


def atomic_write_json(path: Path, data: Any) -> None:
    """data 를 export 형식 그대로 (indent=2, 한글 유지) 저장."""
    atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False))
