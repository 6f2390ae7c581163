# 사용자 라우터
# - GET/PUT/DELETE /api/v1/users/me : 인증 필요 (토큰의 sub 가 대상 사용자)
# - GET /api/v1/users/{user_id}/posts : 특정 사용자가 쓴 글 목록

from fastapi import APIRouter, Depends

from ...core.security import TokenClaims
from ...models.user import UserPatch
from ...schemas.post_schema import PostPublic
from ...schemas.user_schema import ApiResponse, UserPublic
from ...services.content_service import ContentService
from ...services.session_service import SessionService
from ..deps import get_content_service, get_current_claims, get_session_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ApiResponse, response_model_exclude_none=True, summary="내 정보 조회")
async def get_me(
    claims: TokenClaims = Depends(get_current_claims),
    service: SessionService = Depends(get_session_service),
):
    user = await service.get_user(claims.subject)
    return ApiResponse(data=UserPublic.from_user(user))


@router.put("/me", response_model=ApiResponse, response_model_exclude_none=True, summary="내 정보 수정 (보낸 필드만 변경)")
async def update_me(
    patch: UserPatch,
    claims: TokenClaims = Depends(get_current_claims),
    service: SessionService = Depends(get_session_service),
):
    await service.update_user(claims.subject, patch)
    return ApiResponse(message="User updated successfully")


@router.delete("/me", response_model=ApiResponse, response_model_exclude_none=True, summary="회원 탈퇴 (게시글은 남음)")
async def delete_me(
    claims: TokenClaims = Depends(get_current_claims),
    service: SessionService = Depends(get_session_service),
):
    await service.delete_user(claims.subject)
    return ApiResponse(message="User deleted successfully")


@router.get("/{user_id}/posts", response_model=ApiResponse, response_model_exclude_none=True, summary="작성자별 게시글 목록")
async def list_user_posts(user_id: str, service: ContentService = Depends(get_content_service)):
    posts = await service.list_posts_by_author(user_id)
    return ApiResponse(data=[PostPublic.from_post(p) for p in posts])
