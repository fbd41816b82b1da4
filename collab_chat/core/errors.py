from typing import Optional, Dict, Any, List
from fastapi import HTTPException, status
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """표준 에러 응답 모델"""
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
    status_code: int


class ValidationError(BaseModel):
    """검증 에러 세부사항"""
    field: str
    message: str
    value: Optional[Any] = None


class ValidationErrorResponse(BaseModel):
    """검증 에러 응답 모델"""
    error: str = "validation_error"
    message: str
    validation_errors: List[ValidationError]
    status_code: int


# =============================================================================
# 커스텀 예외 클래스들
# =============================================================================

class BaseCustomException(HTTPException):
    """기본 커스텀 예외 클래스"""
    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error = error
        self.message = message
        self.details = details
        self.status_code = status_code  # status_code를 먼저 설정
        super().__init__(status_code=status_code, detail=self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        """예외를 딕셔너리로 변환"""
        return {
            "error": self.error,
            "message": self.message,
            "details": self.details,
            "status_code": self.status_code
        }


class ValidationException(BaseCustomException):
    """입력 검증 실패 예외"""
    def __init__(
        self,
        message: str = "Validation failed",
        validation_errors: Optional[List[ValidationError]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.validation_errors = validation_errors or []
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error="validation_error",
            message=message,
            details=details
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error,
            "message": self.message,
            "validation_errors": [error.model_dump() for error in self.validation_errors],
            "status_code": self.status_code
        }


class ResourceNotFoundException(BaseCustomException):
    """리소스를 찾을 수 없음 예외"""
    def __init__(
        self,
        resource: str = "Resource",
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if message is None:
            message = f"{resource} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error="resource_not_found",
            message=message,
            details=details or {"resource": resource}
        )


class BusinessLogicException(BaseCustomException):
    """비즈니스 로직 예외"""
    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="business_logic_error",
            message=message,
            details=details
        )


class CorruptRecordException(BaseCustomException):
    """저장된 레코드에 필수 필드가 없음 (해당 요청만 실패)"""
    def __init__(
        self,
        key: str,
        missing_field: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.key = key
        self.missing_field = missing_field
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error="corrupt_record",
            message=f"Stored record {key} is missing required field '{missing_field}'",
            details=details or {"key": key, "field": missing_field}
        )


class IntegrityFaultException(BaseCustomException):
    """복합 리소스가 참조하는 하위 리소스를 찾을 수 없음"""
    def __init__(
        self,
        resource_id: str,
        missing_reference: str,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.resource_id = resource_id
        self.missing_reference = missing_reference
        if message is None:
            message = f"{resource_id} references missing resource {missing_reference}"

        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error="integrity_fault",
            message=message,
            details=details or {"resource_id": resource_id, "missing_reference": missing_reference}
        )


class StoreUnavailableException(BaseCustomException):
    """키-값 저장소 연결 실패 예외"""
    def __init__(
        self,
        message: str = "Key-value store unavailable",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error="store_unavailable",
            message=message,
            details=details
        )


# =============================================================================
# 에러 헬퍼 함수들
# =============================================================================

def create_error_response(
    error: str,
    message: str,
    status_code: int,
    details: Optional[Dict[str, Any]] = None
) -> ErrorResponse:
    """표준 에러 응답 생성"""
    return ErrorResponse(
        error=error,
        message=message,
        status_code=status_code,
        details=details
    )


def create_validation_error_response(
    message: str,
    validation_errors: List[ValidationError],
    status_code: int = status.HTTP_422_UNPROCESSABLE_ENTITY
) -> ValidationErrorResponse:
    """검증 에러 응답 생성"""
    return ValidationErrorResponse(
        message=message,
        validation_errors=validation_errors,
        status_code=status_code
    )


# =============================================================================
# 자주 사용되는 에러 팩토리 함수들
# =============================================================================

def user_not_found_error(user_id: Optional[str] = None):
    """사용자를 찾을 수 없음 에러"""
    details = {"user_id": user_id} if user_id else None
    return ResourceNotFoundException("User", details=details)


def chat_room_not_found_error(chat_room_id: Optional[str] = None):
    """채팅방을 찾을 수 없음 에러"""
    details = {"chat_room_id": chat_room_id} if chat_room_id else None
    return ResourceNotFoundException("Chat room", details=details)


def chat_message_not_found_error(chat_message_id: Optional[str] = None):
    """메시지를 찾을 수 없음 에러"""
    details = {"chat_message_id": chat_message_id} if chat_message_id else None
    return ResourceNotFoundException("Chat message", details=details)


def participant_count_error(count: int):
    """1:1 채팅방 참여자 수 검증 실패 에러"""
    return ValidationException(
        "Chat room requires exactly two participants",
        validation_errors=[
            ValidationError(
                field="participants",
                message="Exactly two participant userIDs are required",
                value=count
            )
        ]
    )
