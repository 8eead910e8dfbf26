# app/schemas/common.py
from pydantic import BaseModel


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class MessageResponse(BaseModel):
    message: str
