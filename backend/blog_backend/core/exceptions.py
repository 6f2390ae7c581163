# 커스텀 예외 클래스 정의
# 서비스/저장소 계층은 HTTP를 모릅니다. 대신 각 예외가 status_code 를 들고 있고,
# main.py 의 예외 핸들러가 이를 공통 응답 봉투 {status, message} 로 변환합니다.


class BlogServiceError(Exception):
    """블로그 백엔드의 모든 도메인 예외의 기본 클래스

    Attributes:
        message: 클라이언트에게 보여줄 메시지
        status_code: HTTP 경계에서 사용할 상태 코드
    """
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ---- 400: 잘못된 입력 ----

class ValidationError(BlogServiceError):
    """입력 형식/값이 잘못된 경우. 재시도해도 결과는 같습니다."""
    status_code = 400
    default_message = "Invalid request"


class InvalidObjectIdError(ValidationError):
    """문자열 id 가 MongoDB ObjectId 형식이 아닐 때 (DB 호출 전에 거부)

    Attributes:
        value: 거부된 원본 문자열
    """
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid id: {value!r}")


class InvalidImageTypeError(ValidationError):
    default_message = "Invalid file type. Only JPEG, PNG and GIF images are allowed"

    def __init__(self, content_type: str = None, message: str = None):
        self.content_type = content_type
        super().__init__(message)


class ContentTypeMismatchError(InvalidImageTypeError):
    """선언된 Content-Type 과 실제 디코딩된 포맷이 다를 때"""
    def __init__(self, content_type: str, detected: str):
        self.detected = detected
        super().__init__(content_type, f"File content ({detected}) does not match declared type {content_type}")


class ImageProcessingError(ValidationError):
    default_message = "Failed to process image"


class ImageDecodeError(ImageProcessingError):
    default_message = "Uploaded file is not a readable image"


class UnsupportedImageFormatError(ImageProcessingError):
    def __init__(self, image_format: str = None):
        self.image_format = image_format
        super().__init__(f"Unsupported image format: {image_format or 'unknown'}")


# ---- 404 ----

class NotFoundError(BlogServiceError):
    status_code = 404
    default_message = "Resource not found"

    def __init__(self, resource: str = "Resource", resource_id: str = None):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


# ---- 409 ----

class ConflictError(BlogServiceError):
    status_code = 409
    default_message = "Conflict"


class EmailAlreadyRegisteredError(ConflictError):
    default_message = "Email already registered"


# ---- 401 / 403 ----

class AuthError(BlogServiceError):
    """인증 실패. 원인(없는 사용자/틀린 비밀번호/잘못된 토큰)과 무관하게 같은 형태로 노출됩니다."""
    status_code = 401
    default_message = "Could not validate credentials"


class InvalidCredentialsError(AuthError):
    default_message = "Invalid credentials"


class TokenError(AuthError):
    default_message = "Invalid token"


class InvalidTokenSignatureError(TokenError):
    default_message = "Invalid token signature"


class TokenExpiredError(TokenError):
    default_message = "Token has expired"


class MalformedTokenError(TokenError):
    default_message = "Malformed token"


class PermissionDeniedError(BlogServiceError):
    status_code = 403
    default_message = "You are not allowed to modify this resource"


# ---- 5xx: 외부 시스템 ----

class UpstreamError(BlogServiceError):
    """DB 또는 오브젝트 스토리지 호출 실패

    원인 예외는 로그에만 남기고, 클라이언트에게는 일반 메시지만 보여줍니다.

    Attributes:
        upstream: 실패한 외부 시스템 이름 (예: "mongodb", "r2")
    """
    status_code = 502
    default_message = "Upstream service failure"

    def __init__(self, upstream: str, message: str = None):
        self.upstream = upstream
        super().__init__(message)


class UpstreamTimeoutError(UpstreamError):
    status_code = 504
    default_message = "Upstream service timed out"


class DatabaseError(UpstreamError):
    def __init__(self, message: str = None):
        super().__init__("mongodb", message)


class DatabaseTimeoutError(UpstreamTimeoutError):
    def __init__(self, message: str = None):
        super().__init__("mongodb", message)


class StorageError(UpstreamError):
    default_message = "Failed to upload image"

    def __init__(self, message: str = None):
        super().__init__("r2", message)


class StorageAuthError(StorageError):
    pass


class StorageNetworkError(StorageError):
    pass


class StorageTimeoutError(UpstreamTimeoutError):
    def __init__(self, message: str = None):
        super().__init__("r2", message)


class PasswordHashError(BlogServiceError):
    default_message = "Failed to hash password"
