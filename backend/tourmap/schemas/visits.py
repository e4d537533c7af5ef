from pydantic import Field

from .attraction import AttractionBrief
from .common import CamelModel
from .ranking import RankingType


class VisitMark(CamelModel):
    attraction_id: str = Field(..., min_length=1)
    type: RankingType


class UserAttractions(CamelModel):
    visited: list[AttractionBrief]
    want_to_visit: list[AttractionBrief]
