from typing import Literal

from pydantic import Field

from .attraction import AttractionBrief
from .common import CamelModel

RankingType = Literal["visited", "wantToVisit"]


class RankingEntry(CamelModel):
    id: str
    name: str
    description: str
    images: list[str] = Field(default_factory=list)
    count: int


class RankedAttraction(AttractionBrief):
    visited_count: int | None = None
    want_to_visit_count: int | None = None


class RankingBoard(CamelModel):
    visited_ranking: list[RankedAttraction]
    want_to_visit_ranking: list[RankedAttraction]
