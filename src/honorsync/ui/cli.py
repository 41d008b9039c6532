from __future__ import annotations

import argparse
import logging
import sys
import threading
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from honorsync.app import (
    build_store,
    load_honor_feed,
    reconcile_feed,
    refresh_primary_winners,
    repair_residue,
    sync_honors,
)
from honorsync.config import ConfigurationError, StoreKind, configure_logging
from honorsync.domain.model import SyncMode
from honorsync.domain.sync import SyncOptions

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from honorsync.domain.reconciliation import ReconciliationResult
    from honorsync.domain.reconciliation.audit import GroupAudit

log = logging.getLogger(__name__)

_STOP_REQUESTED = threading.Event()


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {parsed}")
    return parsed


def _positive_int(value: str) -> int:
    parsed = _non_negative_int(value)
    if parsed == 0:
        raise argparse.ArgumentTypeError("must be positive")
    return parsed


def _add_store_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--store",
        choices=[kind.value for kind in StoreKind],
        help="Store backend (defaults to HONORSYNC_STORE or sqlalchemy)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile board game honors into the catalog")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile = subparsers.add_parser(
        "reconcile", help="Classify the feed and report groups without touching the store"
    )
    reconcile.add_argument("--input", required=True, help="Feed path or http(s) URL")
    reconcile.add_argument("--award-type", help="Restrict the run to one award family")

    sync = subparsers.add_parser("sync", help="Write reconciled honors into the store")
    sync.add_argument("--input", required=True, help="Feed path or http(s) URL")
    sync.add_argument("--apply", action="store_true", help="Write changes (default: dry run)")
    sync.add_argument(
        "--replace",
        action="store_true",
        help="Replace stored honor lists instead of merging by honor id",
    )
    sync.add_argument("--award-type", help="Restrict the run to one award family")
    sync.add_argument("--limit", type=_positive_int, help="Maximum number of entities to process")
    sync.add_argument(
        "--start-offset",
        type=_non_negative_int,
        default=0,
        help="Index of the first entity in id order (default: %(default)s)",
    )
    sync.add_argument(
        "--resume",
        action="store_true",
        help="Continue after the last completed batch recorded in the checkpoint",
    )
    sync.add_argument(
        "--reset-checkpoint",
        action="store_true",
        help="Discard the stored checkpoint before an applied run",
    )
    sync.add_argument(
        "--create-missing",
        action="store_true",
        help="Create referenced games that are absent from the store",
    )
    _add_store_argument(sync)

    residue = subparsers.add_parser(
        "residue", help="Find games named after honor titles and repair them"
    )
    residue.add_argument("--input", required=True, help="Feed path or http(s) URL")
    residue.add_argument("--apply", action="store_true", help="Rename or delete (default: report)")
    _add_store_argument(residue)

    refresh = subparsers.add_parser(
        "refresh-primaries", help="Recompute subcategories and primary winners in the store"
    )
    refresh.add_argument("--apply", action="store_true", help="Write changes (default: dry run)")
    refresh.add_argument(
        "--force", action="store_true", help="Re-resolve groups that already have one primary"
    )
    refresh.add_argument("--award-type", help="Restrict the run to one award family")
    refresh.add_argument("--limit", type=_positive_int, help="Maximum number of games to write")
    _add_store_argument(refresh)

    args = parser.parse_args(list(argv))
    if args.command == "sync" and args.reset_checkpoint and args.resume:
        raise ValueError("--reset-checkpoint cannot be combined with --resume")
    return args


def _log_audit(audit: GroupAudit) -> None:
    log.info(
        "Groups: total=%s, with_primary=%s, multi_equal=%s, missing_winner=%s, "
        "missing_primary=%s, multiple_primary=%s",
        audit.groups,
        audit.groups_with_primary,
        audit.multi_equal_groups,
        len(audit.missing_winner),
        len(audit.missing_primary),
        len(audit.multiple_primary),
    )
    for anomaly in (*audit.missing_primary, *audit.multiple_primary):
        log.warning(
            "Group %s %s: %s winners, %s primaries",
            anomaly.key.award_type,
            anomaly.key.year,
            anomaly.winners,
            anomaly.primaries,
        )


def _log_reconciliation(result: ReconciliationResult) -> None:
    stats = result.stats
    log.info(
        "Facts: seen=%s, used=%s, skipped=%s, filtered=%s; entries=%s for %s games",
        stats.facts_seen,
        stats.facts_used,
        stats.facts_skipped,
        stats.facts_filtered,
        stats.entries_emitted,
        len(result.entries_by_entity),
    )
    log.info(
        "Categories: %s; low_confidence=%s; skip reasons: %s",
        {str(category): count for category, count in sorted(stats.categories.items())},
        stats.low_confidence,
        {str(reason): count for reason, count in sorted(stats.skipped.items())},
    )
    _log_audit(result.audit)


def _run_reconcile(args: argparse.Namespace) -> None:
    feed = load_honor_feed(args.input)
    result = reconcile_feed(feed, award_type=args.award_type)
    _log_reconciliation(result)


def _run_sync(args: argparse.Namespace) -> None:
    options = SyncOptions(
        dry_run=not args.apply,
        mode=SyncMode.REPLACE if args.replace else SyncMode.MERGE,
        create_missing=args.create_missing,
        limit=args.limit,
        start_offset=args.start_offset,
        resume=args.resume,
    )
    run = sync_honors(
        args.input,
        options,
        store=build_store(args.store),
        award_type=args.award_type,
        reset_checkpoint=args.reset_checkpoint,
        should_stop=_STOP_REQUESTED.is_set,
    )
    _log_reconciliation(run.reconciliation)
    report = run.report
    label = "Projected" if report.dry_run else "Applied"
    for change in report.changes:
        log.info(
            "%s: game %s %s (invalid_entries=%s, dropped_existing=%s)",
            label,
            change.external_id,
            change.status,
            change.invalid_entries,
            change.dropped_existing,
        )
    log.info(
        "%s: processed=%s of %s, updated=%s, created=%s, unchanged=%s, missing=%s, "
        "unsafe_names=%s, invalid_entries=%s, dropped_existing=%s, failed=%s",
        "Dry run" if report.dry_run else "Sync",
        report.processed,
        report.selected,
        report.updated,
        report.created,
        report.unchanged,
        report.missing,
        report.unsafe_names,
        report.invalid_entries,
        report.dropped_existing,
        len(report.failed),
    )
    if report.failed:
        log.warning("Failed games: %s", ", ".join(str(game_id) for game_id in report.failed))
    if report.stopped:
        log.warning("Sync stopped early; rerun with --resume to continue")


def _run_residue(args: argparse.Namespace) -> None:
    run = repair_residue(args.input, apply=args.apply, store=build_store(args.store))
    for finding in run.report.findings:
        log.info(
            "%s %s %r%s",
            finding.action,
            finding.external_id,
            finding.current_name,
            f" -> {finding.restored_name!r}" if finding.restored_name else "",
        )
    if run.repair is None:
        log.info("Residue report only; pass --apply to repair %s games", len(run.report.findings))


def _run_refresh(args: argparse.Namespace) -> None:
    report = refresh_primary_winners(
        apply=args.apply,
        force=args.force,
        award_type=args.award_type,
        limit=args.limit,
        store=build_store(args.store),
    )
    log.info(
        "%s: groups=%s, changed=%s, unchanged=%s, multi_equal=%s, forced_fallbacks=%s, "
        "games_written=%s of %s",
        "Dry run" if report.dry_run else "Refresh",
        report.winner_groups,
        report.groups_changed,
        report.groups_unchanged,
        report.multi_equal_groups,
        report.forced_fallbacks,
        report.entities_written,
        report.entities_mutated,
    )


COMMANDS = {
    "reconcile": _run_reconcile,
    "sync": _run_sync,
    "residue": _run_residue,
    "refresh-primaries": _run_refresh,
}


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    if parsed_args.verbose:
        logging.getLogger("honorsync").setLevel(logging.DEBUG)

    try:
        COMMANDS[parsed_args.command](parsed_args)
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Request a stop after the current batch; a second Ctrl+C exits immediately."""
    if _STOP_REQUESTED.is_set():
        log.info("Closed by user (Ctrl+C)")
        sys.exit(0)
    _STOP_REQUESTED.set()
    log.info("Stopping after the current batch (Ctrl+C again to quit)")


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
