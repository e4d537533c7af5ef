import math
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, HttpUrl, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

T = TypeVar("T")

_http_url = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    # HttpUrl 로 검증만 하고 입력 문자열을 그대로 둔다 (HttpUrl 은 끝에 "/" 를 붙인다)
    try:
        _http_url.validate_python(value)
    except ValidationError as exc:
        raise ValueError(exc.errors()[0]["msg"]) from exc
    return value


UrlStr = Annotated[str, AfterValidator(_check_http_url)]


class CamelModel(BaseModel):
    """응답은 camelCase, 요청은 camelCase/snake_case 모두 허용."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None


class Page(CamelModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, items: list[T], *, total: int, page: int, limit: int) -> "Page[T]":
        return cls(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )
