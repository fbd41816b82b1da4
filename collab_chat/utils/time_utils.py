"""
시간 관련 유틸리티 함수
"""
import time


def now_millis() -> int:
    """
    현재 시각을 epoch 밀리초로 반환합니다.

    레코드의 lastmodified 값과 폴링 워터마크는 모두 이 단위를 사용합니다.
    """
    return int(time.time() * 1000)
