"""
프레임 스케줄러 (애니메이션 루프 대체)
External tick driver with cancelable registrations
"""

import itertools
import logging
from collections import OrderedDict
from typing import Callable

logger = logging.getLogger(__name__)


class FrameScheduler:
    """등록된 콜백을 프레임마다 한 번씩 호출하는 단일 스레드 스케줄러

    cancel()된 핸들은 같은 프레임 안에서도 더 이상 호출되지 않습니다.
    """

    def __init__(self):
        self._callbacks: "OrderedDict[int, Callable[[], None]]" = OrderedDict()
        self._handles = itertools.count(1)
        self.frame = 0

    def register(self, callback: Callable[[], None]) -> int:
        handle = next(self._handles)
        self._callbacks[handle] = callback
        return handle

    def cancel(self, handle: int) -> bool:
        return self._callbacks.pop(handle, None) is not None

    def is_registered(self, handle: int) -> bool:
        return handle in self._callbacks

    @property
    def active(self) -> bool:
        return bool(self._callbacks)

    def advance(self, frames: int = 1) -> int:
        """frames 만큼 진행, 실제로 진행한 프레임 수 반환"""
        advanced = 0
        for _ in range(frames):
            if not self._callbacks:
                break
            for handle in list(self._callbacks):
                callback = self._callbacks.get(handle)
                if callback is not None:
                    callback()
            self.frame += 1
            advanced += 1
        return advanced

    def run(self, max_frames: int = 1000) -> int:
        """등록된 콜백이 모두 해제되거나 max_frames에 도달할 때까지 진행"""
        frames = self.advance(max_frames)
        if self._callbacks:
            logger.debug(f"Scheduler stopped after {frames} frames with active callbacks")
        return frames
