from .attraction import (
    AttractionAction,
    AttractionBrief,
    AttractionCreate,
    AttractionFilters,
    AttractionOut,
    AttractionUpdate,
    GeoPoint,
    LocationPayload,
    VisitCounts,
)
from .auth import LoginResponse, MobileAuthRequest, MobileAuthResponse, MobileUser, RefreshResponse, SessionInfo
from .comment import CommentAttraction, CommentCreate, CommentOut
from .common import ApiResponse, CamelModel, Page
from .ranking import RankedAttraction, RankingBoard, RankingEntry, RankingType
from .user import UserPublic, UserSummary
from .visits import UserAttractions, VisitMark

__all__ = [
    "ApiResponse",
    "AttractionAction",
    "AttractionBrief",
    "AttractionCreate",
    "AttractionFilters",
    "AttractionOut",
    "AttractionUpdate",
    "CamelModel",
    "CommentAttraction",
    "CommentCreate",
    "CommentOut",
    "GeoPoint",
    "LocationPayload",
    "LoginResponse",
    "MobileAuthRequest",
    "MobileAuthResponse",
    "MobileUser",
    "Page",
    "RankedAttraction",
    "RankingBoard",
    "RankingEntry",
    "RankingType",
    "RefreshResponse",
    "SessionInfo",
    "UserAttractions",
    "UserPublic",
    "UserSummary",
    "VisitCounts",
    "VisitMark",
]
