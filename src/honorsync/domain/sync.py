"""Apply reconciled honors to the entity store.

Plan items are processed in external-id order, in batches. Within a batch a
small pool of asyncio workers pulls items from a shared queue; every store
call runs in a worker thread with a timeout and a bounded number of retries
with linear backoff. A worker pauses after each entity to respect the remote
rate limit. The checkpoint is overwritten once a batch has fully finished, so
an interrupted run resumes at the first entity of the unfinished batch.

Writes happen only when the merged honor list differs from the stored one,
and merged entries keep the first-seen ``created_at`` of the stored entry,
so re-running a sync reproduces the same final state.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from honorsync.domain.model import Entity, SyncMode
from honorsync.domain.ports.checkpoint import Checkpoint
from honorsync.domain.ports.store import StoreError
from honorsync.domain.validation import honor_record_violation

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from honorsync.domain.canonicalization import CanonicalName, CanonicalNameResolver
    from honorsync.domain.model import HonorRecord
    from honorsync.domain.ports.checkpoint import CheckpointStore
    from honorsync.domain.ports.store import EntityStore
    from honorsync.domain.reconciliation import ReconciliationResult

log = getLogger(__name__)

DEFAULT_BATCH_SIZE = 300
DEFAULT_CONCURRENCY = 3
DEFAULT_CALL_DELAY_SECONDS = 0.8
DEFAULT_CALL_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BACKOFF_SECONDS = 1.0


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, frozen=True)
class SyncItem:
    external_id: int
    honors: list[HonorRecord]
    canonical_name: CanonicalName | None = None


def build_sync_plan(
    result: ReconciliationResult,
    names: CanonicalNameResolver | None = None,
) -> list[SyncItem]:
    """One plan item per entity, ordered by external id."""

    return [
        SyncItem(
            external_id=external_id,
            honors=result.honors_for(external_id),
            canonical_name=names.resolve(external_id) if names is not None else None,
        )
        for external_id in sorted(result.entries_by_entity)
    ]


@dataclass(slots=True, frozen=True)
class MergeOutcome:
    honors: list[HonorRecord]
    dropped_existing: int = 0


def _honor_key(record: HonorRecord) -> str | None:
    value = record.get("honor_id")
    if value is None or value == "":
        return None
    return str(value)


def merge_honors(
    existing: Iterable[HonorRecord],
    incoming: Iterable[HonorRecord],
    *,
    mode: SyncMode,
    current_year: int | None = None,
) -> MergeOutcome:
    """Combine stored and new honors.

    Merge keys by honor id with the incoming record winning; stored records
    without an honor id are kept and stored records the store would now reject
    are dropped. Replace keeps only the incoming records.
    """

    stored = list(existing)
    first_seen = {
        key: record["created_at"]
        for record in stored
        if (key := _honor_key(record)) is not None and record.get("created_at") is not None
    }
    fresh: list[HonorRecord] = []
    for record in incoming:
        key = _honor_key(record)
        fresh.append({**record, "created_at": first_seen[key]} if key in first_seen else record)

    if mode is SyncMode.REPLACE:
        return MergeOutcome(honors=fresh)

    dropped = 0
    keyless: list[HonorRecord] = []
    keyed: dict[str, HonorRecord] = {}
    for record in stored:
        if honor_record_violation(record, current_year=current_year) is not None:
            dropped += 1
            continue
        key = _honor_key(record)
        if key is None:
            keyless.append(record)
        else:
            keyed[key] = record
    for record in fresh:
        keyed[str(_honor_key(record))] = record
    return MergeOutcome(honors=[*keyless, *keyed.values()], dropped_existing=dropped)


@dataclass(slots=True, frozen=True)
class SyncOptions:
    dry_run: bool = True
    mode: SyncMode = SyncMode.MERGE
    create_missing: bool = False
    limit: int | None = None
    start_offset: int = 0
    resume: bool = False


class ItemStatus(StrEnum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    CREATED = "created"
    MISSING = "missing"
    UNSAFE_NAME = "unsafe_name"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class ItemOutcome:
    external_id: int
    status: ItemStatus
    invalid_entries: int = 0
    dropped_existing: int = 0


@dataclass(slots=True)
class SyncReport:
    """Counts for one sync run; ``updated`` includes created entities.

    ``changes`` lists every outcome other than unchanged, in processing order.
    """

    mode: SyncMode
    dry_run: bool
    planned: int = 0
    selected: int = 0
    start_index: int = 0
    last_index: int | None = None
    batches: int = 0
    processed: int = 0
    updated: int = 0
    unchanged: int = 0
    created: int = 0
    missing: int = 0
    unsafe_names: int = 0
    empty: int = 0
    invalid_entries: int = 0
    dropped_existing: int = 0
    failed: list[int] = field(default_factory=list)
    changes: list[ItemOutcome] = field(default_factory=list)
    stopped: bool = False

    def record(self, outcome: ItemOutcome) -> None:
        if outcome.status is not ItemStatus.UNCHANGED:
            self.changes.append(outcome)
        self.invalid_entries += outcome.invalid_entries
        self.dropped_existing += outcome.dropped_existing
        if outcome.status is ItemStatus.FAILED:
            self.failed.append(outcome.external_id)
            return
        self.processed += 1
        match outcome.status:
            case ItemStatus.UPDATED:
                self.updated += 1
            case ItemStatus.CREATED:
                self.created += 1
                self.updated += 1
            case ItemStatus.UNCHANGED:
                self.unchanged += 1
            case ItemStatus.MISSING:
                self.missing += 1
            case ItemStatus.UNSAFE_NAME:
                self.unsafe_names += 1
            case ItemStatus.EMPTY:
                self.empty += 1


class SyncExecutor:
    def __init__(
        self,
        store: EntityStore,
        *,
        checkpoints: CheckpointStore | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        concurrency: int = DEFAULT_CONCURRENCY,
        call_delay_seconds: float = DEFAULT_CALL_DELAY_SECONDS,
        call_timeout_seconds: float = DEFAULT_CALL_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
        current_year: int | None = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if concurrency <= 0:
            raise ValueError("concurrency must be positive")
        self._store = store
        self._checkpoints = checkpoints
        self._batch_size = batch_size
        self._concurrency = concurrency
        self._call_delay = call_delay_seconds
        self._call_timeout = call_timeout_seconds
        self._max_retries = max_retries
        self._retry_backoff = retry_backoff_seconds
        self._clock = clock
        self._current_year = current_year

    def run(
        self,
        plan: Sequence[SyncItem],
        options: SyncOptions,
        *,
        should_stop: Callable[[], bool] | None = None,
    ) -> SyncReport:
        """Apply ``plan`` to the store; ``should_stop`` is polled between batches."""

        items = sorted(plan, key=lambda item: item.external_id)
        start = self._start_index(options)
        selected = items[start:]
        if options.limit is not None:
            selected = selected[: options.limit]

        report = SyncReport(
            mode=options.mode,
            dry_run=options.dry_run,
            planned=len(items),
            selected=len(selected),
            start_index=start,
        )
        log.info(
            "Starting honor sync: mode=%s, dry_run=%s, entities=%s of %s, start_index=%s",
            options.mode,
            options.dry_run,
            len(selected),
            len(items),
            start,
        )

        for offset in range(0, len(selected), self._batch_size):
            if should_stop is not None and should_stop():
                report.stopped = True
                log.warning("Stop requested; halting before entity index %s", start + offset)
                break
            batch = selected[offset : offset + self._batch_size]
            for outcome in asyncio.run(self._run_batch(batch, options)):
                report.record(outcome)
            report.batches += 1
            report.last_index = start + offset + len(batch) - 1
            self._save_checkpoint(report, options)
            log.info(
                "Batch %s complete (processed=%s, updated=%s, failed=%s, last_index=%s)",
                report.batches,
                report.processed,
                report.updated,
                len(report.failed),
                report.last_index,
            )

        return report

    def _start_index(self, options: SyncOptions) -> int:
        if options.start_offset < 0:
            raise ValueError("start_offset must be non-negative")
        if not options.resume:
            return options.start_offset
        if self._checkpoints is None:
            raise ValueError("Resuming a sync requires a checkpoint store")
        checkpoint = self._checkpoints.load()
        if checkpoint is None:
            log.info("No checkpoint found; starting at offset %s", options.start_offset)
            return options.start_offset
        log.info("Resuming after checkpoint index %s", checkpoint.last_index)
        return checkpoint.last_index + 1

    def _save_checkpoint(self, report: SyncReport, options: SyncOptions) -> None:
        if options.dry_run or self._checkpoints is None or report.last_index is None:
            return
        self._checkpoints.save(
            Checkpoint(
                last_index=report.last_index,
                processed=report.processed,
                updated=report.updated,
                timestamp=self._clock(),
            )
        )

    async def _run_batch(
        self, batch: Sequence[SyncItem], options: SyncOptions
    ) -> list[ItemOutcome]:
        queue: asyncio.Queue[SyncItem] = asyncio.Queue()
        for item in batch:
            queue.put_nowait(item)
        outcomes: list[ItemOutcome] = []

        async def worker() -> None:
            while True:
                try:
                    item = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                outcomes.append(await self._process(item, options))
                if self._call_delay > 0:
                    await asyncio.sleep(self._call_delay)

        workers = min(self._concurrency, len(batch))
        await asyncio.gather(*(worker() for _ in range(workers)))
        return sorted(outcomes, key=lambda outcome: outcome.external_id)

    async def _process(self, item: SyncItem, options: SyncOptions) -> ItemOutcome:
        try:
            return await self._sync_item(item, options)
        except (StoreError, TimeoutError):
            log.exception("Honor sync failed for entity %s", item.external_id)
            return ItemOutcome(item.external_id, ItemStatus.FAILED)

    async def _sync_item(self, item: SyncItem, options: SyncOptions) -> ItemOutcome:
        valid: list[HonorRecord] = []
        for record in item.honors:
            violation = honor_record_violation(record, current_year=self._current_year)
            if violation is None:
                valid.append(record)
            else:
                log.warning(
                    "Dropping honor %s for entity %s: %s",
                    record.get("honor_id"),
                    item.external_id,
                    violation,
                )
        invalid = len(item.honors) - len(valid)
        if not valid:
            return ItemOutcome(item.external_id, ItemStatus.EMPTY, invalid_entries=invalid)

        entity = await self._call(self._store.fetch, item.external_id)
        if entity is None:
            return await self._create(item, valid, invalid, options)

        merged = merge_honors(
            entity.honors,
            valid,
            mode=options.mode,
            current_year=self._current_year,
        )
        if merged.honors == entity.honors:
            return ItemOutcome(
                item.external_id,
                ItemStatus.UNCHANGED,
                invalid_entries=invalid,
                dropped_existing=merged.dropped_existing,
            )
        if not options.dry_run:
            entity.honors = merged.honors
            await self._call(self._store.upsert, entity)
        return ItemOutcome(
            item.external_id,
            ItemStatus.UPDATED,
            invalid_entries=invalid,
            dropped_existing=merged.dropped_existing,
        )

    async def _create(
        self,
        item: SyncItem,
        honors: list[HonorRecord],
        invalid: int,
        options: SyncOptions,
    ) -> ItemOutcome:
        if not options.create_missing:
            return ItemOutcome(item.external_id, ItemStatus.MISSING, invalid_entries=invalid)
        name = item.canonical_name
        if name is None or not name.safe:
            log.warning(
                "Not creating entity %s: no safe name (candidate=%r)",
                item.external_id,
                name.name if name is not None else None,
            )
            return ItemOutcome(item.external_id, ItemStatus.UNSAFE_NAME, invalid_entries=invalid)
        if not options.dry_run:
            entity = Entity(external_id=item.external_id, display_name=name.name, honors=honors)
            await self._call(self._store.upsert, entity)
        return ItemOutcome(item.external_id, ItemStatus.CREATED, invalid_entries=invalid)

    async def _call[**P, T](self, func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
        attempt = 0
        while True:
            try:
                return await asyncio.wait_for(
                    asyncio.to_thread(func, *args, **kwargs),
                    timeout=self._call_timeout,
                )
            except (StoreError, TimeoutError) as exc:
                if attempt >= self._max_retries:
                    raise
                attempt += 1
                delay = self._retry_backoff * attempt
                log.warning(
                    "Store call %s failed (%s); retry %s/%s in %.1fs",
                    getattr(func, "__name__", func),
                    exc,
                    attempt,
                    self._max_retries,
                    delay,
                )
                await asyncio.sleep(delay)
