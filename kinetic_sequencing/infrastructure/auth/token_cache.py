"""
외부 API 액세스 토큰 캐시
만료(- 여유 시간) 전까지 재사용, 이후 fetcher 로 재발급
"""
from __future__ import annotations
import logging
import threading
import time
from typing import Callable, Optional

from kinetic_sequencing.schemas.auth_dto import AccessToken

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_MARGIN_S = 60.0


class TokenCache:
    def __init__(
        self,
        fetcher: Callable[[], AccessToken],
        clock: Callable[[], float] = time.monotonic,
        refresh_margin_s: float = DEFAULT_REFRESH_MARGIN_S,
    ):
        self._fetcher = fetcher
        self._clock = clock
        self._refresh_margin_s = refresh_margin_s
        self._lock = threading.Lock()
        self._token: Optional[str] = None
        self._expires_at: float = 0.0

    def get(self) -> str:
        """유효한 토큰 반환 (필요 시 재발급). fetcher 예외는 그대로 전파"""
        with self._lock:
            now = self._clock()
            if self._token is not None and now < self._expires_at - self._refresh_margin_s:
                return self._token

            fresh = self._fetcher()
            self._token = fresh.token
            self._expires_at = now + fresh.expires_in_s
            logger.info(f"[Auth] token refreshed (expires in {fresh.expires_in_s:.0f}s)")
            return self._token

    def invalidate(self) -> None:
        """다음 get() 에서 강제 재발급 (401 응답 등)"""
        with self._lock:
            self._token = None
            self._expires_at = 0.0
