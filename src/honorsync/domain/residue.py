"""Detection and repair of placeholder-named entities.

A naive earlier import created or renamed games using truncated honor titles.
Such an entity shows the placeholder name signature and also lacks the core
catalog metadata a real game carries (publication year, artwork). Requiring
both avoids flagging genuine games with long award-like names.

Detection never writes; ``apply_residue_repair`` is the separate apply step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from honorsync.domain.canonicalization import is_placeholder_name
from honorsync.domain.model import ResidueAction
from honorsync.domain.ports.store import StoreError, iter_entities

if TYPE_CHECKING:
    from honorsync.domain.canonicalization import CanonicalNameResolver
    from honorsync.domain.ports.store import EntityStore

log = getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


@dataclass(slots=True, frozen=True)
class ResidueFinding:
    external_id: int
    current_name: str
    action: ResidueAction
    restored_name: str | None = None


@dataclass(slots=True)
class ResidueReport:
    scanned: int = 0
    placeholder_with_metadata: int = 0
    findings: list[ResidueFinding] = field(default_factory=list)

    @property
    def renames(self) -> list[ResidueFinding]:
        return [finding for finding in self.findings if finding.action is ResidueAction.RENAME]

    @property
    def deletions(self) -> list[ResidueFinding]:
        return [finding for finding in self.findings if finding.action is ResidueAction.DELETE]


@dataclass(slots=True)
class RepairResult:
    renamed: int = 0
    deleted: int = 0
    vanished: int = 0
    failed: list[int] = field(default_factory=list)


def detect_residue(
    store: EntityStore,
    resolver: CanonicalNameResolver,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> ResidueReport:
    """Scan ``store`` for placeholder-corrupted entities and plan their repair."""

    report = ResidueReport()
    for entity in iter_entities(store, page_size=page_size):
        report.scanned += 1
        if not is_placeholder_name(entity.display_name):
            continue
        if entity.has_core_metadata:
            report.placeholder_with_metadata += 1
            continue

        canonical = resolver.resolve(entity.external_id)
        if canonical is not None and canonical.safe and canonical.name != entity.display_name:
            finding = ResidueFinding(
                external_id=entity.external_id,
                current_name=entity.display_name,
                action=ResidueAction.RENAME,
                restored_name=canonical.name,
            )
        else:
            finding = ResidueFinding(
                external_id=entity.external_id,
                current_name=entity.display_name,
                action=ResidueAction.DELETE,
            )
        report.findings.append(finding)

    log.info(
        "Residue scan: scanned=%s, rename=%s, delete=%s, placeholder_with_metadata=%s",
        report.scanned,
        len(report.renames),
        len(report.deletions),
        report.placeholder_with_metadata,
    )
    return report


def apply_residue_repair(report: ResidueReport, store: EntityStore) -> RepairResult:
    """Apply the renames and deletions planned by ``detect_residue``."""

    result = RepairResult()
    for finding in report.findings:
        try:
            if finding.action is ResidueAction.RENAME and finding.restored_name is not None:
                entity = store.fetch(finding.external_id)
                if entity is None:
                    result.vanished += 1
                    log.warning("Entity %s disappeared before rename", finding.external_id)
                    continue
                entity.display_name = finding.restored_name
                store.upsert(entity)
                result.renamed += 1
                log.info(
                    "Renamed entity %s: %r -> %r",
                    finding.external_id,
                    finding.current_name,
                    finding.restored_name,
                )
            else:
                store.delete(finding.external_id)
                result.deleted += 1
                log.info("Deleted entity %s (%r)", finding.external_id, finding.current_name)
        except StoreError:
            log.exception("Residue repair failed for entity %s", finding.external_id)
            result.failed.append(finding.external_id)
    return result
