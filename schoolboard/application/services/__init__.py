from .collection_store import CollectionStore
from .filter_set import ALL, FilterPredicateSet
from .derived_view import derive_view, matches, sort_records
from .pagination import PaginationController
from .mutation_panel import DetailMutationPanel
from .list_controller import ListController
from .listing_service import ListingService
from .session import SessionContext
from .dashboard_stats import DashboardSummary, summarize
from .countdown import QuizCountdown, format_time

__all__ = [
    "CollectionStore",
    "ALL",
    "FilterPredicateSet",
    "derive_view",
    "matches",
    "sort_records",
    "PaginationController",
    "DetailMutationPanel",
    "ListController",
    "ListingService",
    "SessionContext",
    "DashboardSummary",
    "summarize",
    "QuizCountdown",
    "format_time",
]
