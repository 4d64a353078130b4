"""Central API response type contracts.

Runtime behavior of endpoints does not depend on these definitions; they
document the wire shapes for static analysis and for the client.
"""

from __future__ import annotations

from typing import Literal, NotRequired, TypedDict


class AdvocateRecord(TypedDict):
    id: str
    firstName: str
    lastName: str
    degree: str
    yearsOfExperience: int
    phoneNumber: int
    specialties: list[str]
    city: str
    state: str
    country: str
    createdAt: str | None
    updatedAt: str | None


class PaginationMeta(TypedDict):
    totalCount: int
    pageSize: int
    hasNextPage: bool
    hasPreviousPage: bool
    currentPage: NotRequired[int]
    totalPages: NotRequired[int]
    nextCursor: NotRequired[str]
    prevCursor: NotRequired[str]
    cursorField: NotRequired[str]


class AdvocateListResponse(TypedDict):
    success: Literal[True]
    data: list[AdvocateRecord]
    pagination: PaginationMeta


class AdvocateDetailResponse(TypedDict):
    success: Literal[True]
    data: AdvocateRecord


class ErrorResponse(TypedDict):
    success: Literal[False]
    error: str
    message: str


class SeedSummary(TypedDict):
    advocates: int
    specialties: int
    locations: int
    relationships: int
