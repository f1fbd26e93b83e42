from service.episode.access_service import EpisodeAccessResult, EpisodeAccessService
from service.episode.purchase_service import (
    PurchaseEligibility,
    PurchaseResult,
    PurchaseService,
    PurchaseStage,
)

__all__ = [
    "EpisodeAccessService",
    "EpisodeAccessResult",
    "PurchaseService",
    "PurchaseResult",
    "PurchaseEligibility",
    "PurchaseStage",
]
