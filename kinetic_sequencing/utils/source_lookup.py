from __future__ import annotations
from typing import Generic, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel

V = TypeVar("V")

DEFAULT_SOURCE = "default"


class SourcedValue(BaseModel, Generic[V]):
    """채택된 값 + 어느 출처에서 왔는지"""
    value: Optional[V] = None
    source: str = DEFAULT_SOURCE


def resolve_first(
    sources: Sequence[Tuple[str, Optional[V]]],
    default: Optional[V] = None,
    default_source: str = DEFAULT_SOURCE,
) -> SourcedValue[V]:
    """
    우선순위 순서의 (출처 이름, 값) 리스트에서 처음으로 None 이 아닌 값을 고른다.
    a ?? b ?? c 체인을 명시적으로 표현하고, 감사(audit)용으로 출처도 함께 반환.

    Example:
        >>> resolve_first([("sensor", None), ("video", 12.5)], default=15.0)
        SourcedValue(value=12.5, source='video')
    """
    for name, value in sources:
        if value is not None:
            return SourcedValue(value=value, source=name)
    return SourcedValue(value=default, source=default_source)
