"""Wiring of services for CLI commands."""

from dayledger.config import Settings
from dayledger.database.factories import create_local_cache
from dayledger.domain.aggregation import DailyAggregator
from dayledger.domain.category import CategoryRegistry
from dayledger.domain.persistence import Connectivity, InventoryCoordinator
from dayledger.domain.summary import SummaryService


def build_aggregator(ctx) -> DailyAggregator:
    """Aggregator over a fresh category snapshot."""
    settings: Settings = ctx.obj["settings"]
    registry = CategoryRegistry.load(ctx.obj["db"])
    return DailyAggregator(registry, meals_token=settings.meals_token)


def build_coordinator(ctx, online: bool = True) -> InventoryCoordinator:
    """Coordinator over the configured database and local cache."""
    settings: Settings = ctx.obj["settings"]
    return InventoryCoordinator(
        db=ctx.obj["db"],
        cache=create_local_cache(settings.resolve_cache_dir()),
        aggregator=build_aggregator(ctx),
        connectivity=Connectivity(online=online),
        settings=settings,
    )


def build_summary_service(ctx) -> SummaryService:
    return SummaryService(ctx.obj["db"], build_aggregator(ctx))
