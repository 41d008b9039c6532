"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from honorsync.adapters.checkpoint import JsonFileCheckpointStore
from honorsync.adapters.feed import load_feed
from honorsync.adapters.sqlalchemy import SqlAlchemyEntityStore, is_started, startup
from honorsync.adapters.supabase import SupabaseEntityStore
from honorsync.config import (
    StoreKind,
    get_feed_config,
    get_honors_config,
    get_storage_config,
    get_store_kind,
    get_supabase_config,
    get_sync_config,
)
from honorsync.domain.canonicalization import CanonicalNameResolver
from honorsync.domain.primary_winner import PrimaryWinnerResolver
from honorsync.domain.reconciliation import ReconciliationEngine
from honorsync.domain.residue import apply_residue_repair, detect_residue
from honorsync.domain.stored_honors import refresh_stored_primaries
from honorsync.domain.sync import SyncExecutor, build_sync_plan

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from honorsync.adapters.feed import FeedLoadResult
    from honorsync.config import HonorsConfig, SyncConfig
    from honorsync.domain.ports.checkpoint import CheckpointStore
    from honorsync.domain.ports.store import EntityStore
    from honorsync.domain.reconciliation import ReconciliationResult
    from honorsync.domain.residue import RepairResult, ResidueReport
    from honorsync.domain.stored_honors import RefreshReport
    from honorsync.domain.sync import SyncOptions, SyncReport

log = getLogger(__name__)


@dataclass(slots=True)
class SyncRun:
    feed: FeedLoadResult
    reconciliation: ReconciliationResult
    report: SyncReport


@dataclass(slots=True)
class ResidueRun:
    report: ResidueReport
    repair: RepairResult | None = None


def build_store(kind: StoreKind | str | None = None) -> EntityStore:
    """Return the configured entity store, starting the SQLAlchemy adapter if needed."""

    resolved = kind if isinstance(kind, StoreKind) else get_store_kind(kind)
    if resolved is StoreKind.SUPABASE:
        return SupabaseEntityStore(config=get_supabase_config())
    if not is_started():
        startup()
    return SqlAlchemyEntityStore()


def build_resolver(honors: HonorsConfig | None = None) -> PrimaryWinnerResolver:
    config = honors or get_honors_config()
    return PrimaryWinnerResolver(multi_equal_awards=config.multi_equal_awards)


def load_honor_feed(source: str | Path) -> FeedLoadResult:
    return load_feed(source, resilience=get_feed_config().resilience)


def reconcile_feed(
    feed: FeedLoadResult,
    *,
    award_type: str | None = None,
    honors: HonorsConfig | None = None,
) -> ReconciliationResult:
    config = honors or get_honors_config()
    engine = ReconciliationEngine(
        resolver=build_resolver(config),
        source_tag=config.source_tag,
        base_url=config.base_url,
    )
    return engine.reconcile(feed.facts, award_type=award_type)


def sync_honors(
    source: str | Path,
    options: SyncOptions,
    *,
    store: EntityStore | None = None,
    checkpoints: CheckpointStore | None = None,
    award_type: str | None = None,
    reset_checkpoint: bool = False,
    should_stop: Callable[[], bool] | None = None,
    sync_config: SyncConfig | None = None,
    honors: HonorsConfig | None = None,
) -> SyncRun:
    """Reconcile the feed at ``source`` and apply the result to the store."""

    feed = load_honor_feed(source)
    result = reconcile_feed(feed, award_type=award_type, honors=honors)
    names = CanonicalNameResolver.from_facts(feed.facts)

    config = sync_config or get_sync_config()
    effective_checkpoints = checkpoints
    if effective_checkpoints is None:
        effective_checkpoints = JsonFileCheckpointStore(get_storage_config().checkpoint_path())
    if reset_checkpoint and not options.dry_run:
        effective_checkpoints.clear()
        log.info("Cleared sync checkpoint")

    executor = SyncExecutor(
        store if store is not None else build_store(),
        checkpoints=effective_checkpoints,
        batch_size=config.batch_size,
        concurrency=config.concurrency,
        call_delay_seconds=config.call_delay_seconds,
        call_timeout_seconds=config.call_timeout_seconds,
        max_retries=config.max_retries,
        retry_backoff_seconds=config.retry_backoff_seconds,
    )
    report = executor.run(build_sync_plan(result, names), options, should_stop=should_stop)

    log.info(
        "Finished honor sync: processed=%s, updated=%s, created=%s, unchanged=%s, "
        "missing=%s, invalid_entries=%s, failed=%s, dry_run=%s",
        report.processed,
        report.updated,
        report.created,
        report.unchanged,
        report.missing,
        report.invalid_entries,
        len(report.failed),
        report.dry_run,
    )
    return SyncRun(feed=feed, reconciliation=result, report=report)


def repair_residue(
    source: str | Path,
    *,
    apply: bool = False,
    store: EntityStore | None = None,
    page_size: int | None = None,
) -> ResidueRun:
    """Find placeholder-named entities and, with ``apply``, rename or delete them."""

    feed = load_honor_feed(source)
    names = CanonicalNameResolver.from_facts(feed.facts)
    effective_store = store if store is not None else build_store()
    report = detect_residue(
        effective_store,
        names,
        page_size=page_size or get_sync_config().page_size,
    )
    if not apply:
        return ResidueRun(report=report)
    repair = apply_residue_repair(report, effective_store)
    log.info(
        "Residue repair: renamed=%s, deleted=%s, vanished=%s, failed=%s",
        repair.renamed,
        repair.deleted,
        repair.vanished,
        len(repair.failed),
    )
    return ResidueRun(report=report, repair=repair)


def refresh_primary_winners(
    *,
    apply: bool = False,
    force: bool = False,
    award_type: str | None = None,
    limit: int | None = None,
    store: EntityStore | None = None,
    honors: HonorsConfig | None = None,
    page_size: int | None = None,
) -> RefreshReport:
    return refresh_stored_primaries(
        store if store is not None else build_store(),
        resolver=build_resolver(honors),
        force=force,
        award_type=award_type,
        limit=limit,
        dry_run=not apply,
        page_size=page_size or get_sync_config().page_size,
    )
