# 업로드된 이미지 정보 (DB 에 저장하지 않음. Post.image_url 이 유일한 연결고리)

from pydantic import BaseModel


class Asset(BaseModel):
    filename: str
    content_type: str
    size: int
    url: str
