from typing import List, Optional, Union
from fastapi import APIRouter, Depends, Query, status

from collab_chat.api.dependencies import get_settings, get_user_repository
from collab_chat.core.config import Settings
from collab_chat.core.errors import ValidationException
from collab_chat.core.logging import get_logger
from collab_chat.schemas.user import User, UserInput
from collab_chat.services.user_service import UserRepository

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[User])
async def list_users(
    users: UserRepository = Depends(get_user_repository)
) -> List[User]:
    """전체 사용자 목록 조회"""
    return await users.list_all()


@router.post("", response_model=Union[User, List[User]], status_code=status.HTTP_201_CREATED)
async def create_user(
    user_input: Optional[UserInput] = None,
    test: bool = Query(default=False, description="true면 본문 없이 테스트 사용자 생성"),
    num: Optional[int] = Query(default=None, ge=0, description="생성할 테스트 사용자 수"),
    users: UserRepository = Depends(get_user_repository),
    config: Settings = Depends(get_settings)
) -> Union[User, List[User]]:
    """
    사용자 생성

    - **firstName**: 이름
    - **lastName**: 성
    - **nickname**: 닉네임

    userID는 시스템이 발급하며 요청 본문의 값은 무시됩니다.
    `?test=true&num=N` 이면 테스트 사용자 N명을 생성해 목록으로 반환합니다.
    """
    if test:
        count = num if num is not None else config.simulate_default_count
        logger.info(f"Test parameter set. Creating {count} test users")
        return await users.create_test_users(count)

    if user_input is None:
        raise ValidationException("Request body is required")

    return await users.create(user_input)


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: str,
    users: UserRepository = Depends(get_user_repository)
) -> User:
    """사용자 조회"""
    return await users.retrieve(user_id)


@router.put("/{user_id}", response_model=User)
async def update_user(
    user_id: str,
    user_input: UserInput,
    users: UserRepository = Depends(get_user_repository)
) -> User:
    """
    사용자 수정

    - **nickname**: 수정 가능한 유일한 필드

    다른 필드의 변경 요청은 무시되고 현재 상태가 반환됩니다.
    """
    return await users.update(user_id, user_input)
