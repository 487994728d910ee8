"""
ID 생성: 커스텀 표현식 id.

포맷: custom_{epoch_millis}_{random[:9]}
- import된 항목은 기존 id를 유지하므로 포맷을 강제하지 않음
"""

import uuid
from datetime import UTC, datetime

from filemet.domain.constants import CUSTOM_ID_PREFIX

_RANDOM_LENGTH = 9


def generate_expression_id(now: datetime | None = None) -> str:
    """
    커스텀 표현식 ID 생성.

    고유성: 밀리초 타임스탬프 + UUID v4 일부

    Args:
        now: 기준 시각 (테스트용, 기본 현재 UTC)

    Returns:
        expression id 문자열
    """
    now = now or datetime.now(UTC)
    millis = int(now.timestamp() * 1000)
    unique = uuid.uuid4().hex[:_RANDOM_LENGTH]

    return f"{CUSTOM_ID_PREFIX}_{millis}_{unique}"
