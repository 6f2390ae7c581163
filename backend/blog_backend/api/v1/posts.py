# 게시글 라우터
# - GET /api/v1/posts?page=&limit= : 최신순 목록 (인증 불필요)
# - GET /api/v1/posts/{post_id}    : 단건 조회 (인증 불필요)
# - POST/PUT/DELETE                : 인증 필요 (작성은 탈퇴하지 않은 사용자만)
#
# 작성자 확인은 서비스가 아니라 여기서 합니다. 수정/삭제는 작성자 본인만 가능합니다.

from fastapi import APIRouter, Depends, Query, status

from ...core.exceptions import PermissionDeniedError
from ...core.security import TokenClaims
from ...models.post import Post, PostPatch
from ...schemas.post_schema import PostCreate, PostPublic
from ...schemas.user_schema import ApiResponse
from ...services.content_service import ContentService
from ..deps import get_active_claims, get_content_service, get_current_claims

router = APIRouter(prefix="/posts", tags=["posts"])


async def _ensure_author(service: ContentService, post_id: str, claims: TokenClaims) -> None:
    post = await service.get_post(post_id)
    if post.author_id != claims.subject:
        raise PermissionDeniedError()


@router.get("", response_model=ApiResponse, response_model_exclude_none=True, summary="게시글 목록 (최신순)")
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: ContentService = Depends(get_content_service),
):
    posts = await service.list_posts(page, limit)
    return ApiResponse(data=[PostPublic.from_post(p) for p in posts])


@router.get("/{post_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="게시글 조회")
async def get_post(post_id: str, service: ContentService = Depends(get_content_service)):
    post = await service.get_post(post_id)
    return ApiResponse(data=PostPublic.from_post(post))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="게시글 작성 (로그인 필요)",
)
async def create_post(
    payload: PostCreate,
    claims: TokenClaims = Depends(get_active_claims),
    service: ContentService = Depends(get_content_service),
):
    post = Post(author_id=claims.subject, **payload.model_dump())
    created = await service.create_post(post)
    return ApiResponse(message="Post created successfully", data=PostPublic.from_post(created))


@router.put("/{post_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="게시글 수정 (작성자만)")
async def update_post(
    post_id: str,
    patch: PostPatch,
    claims: TokenClaims = Depends(get_current_claims),
    service: ContentService = Depends(get_content_service),
):
    await _ensure_author(service, post_id, claims)
    await service.update_post(post_id, patch)
    return ApiResponse(message="Post updated successfully")


@router.delete("/{post_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="게시글 삭제 (작성자만)")
async def delete_post(
    post_id: str,
    claims: TokenClaims = Depends(get_current_claims),
    service: ContentService = Depends(get_content_service),
):
    await _ensure_author(service, post_id, claims)
    await service.delete_post(post_id)
    return ApiResponse(message="Post deleted successfully")
