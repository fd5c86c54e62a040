from pydantic import BaseModel


class ListMeta(BaseModel):
    page: int
    page_size: int
    total: int


class CountRead(BaseModel):
    count: int


class CountResponse(BaseModel):
    data: CountRead


# Keeps (page - 1) * page_size well inside PostgreSQL's bigint OFFSET.
MAX_PAGE = 1_000_000
