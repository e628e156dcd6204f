import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from common.resources import ManagedResource, ResourceKind, Target

logger = logging.getLogger(__name__)


class OutcomeStatus(Enum):
    APPLIED = "applied"
    OBSERVED = "observed"
    NOT_FOUND = "not found"
    FAILED = "failed"


@dataclass(frozen=True)
class ReconcileOutcome:
    resource_name: str
    kind: ResourceKind
    status: OutcomeStatus
    state: object = None
    reason: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status is OutcomeStatus.FAILED


def _probe(resource: ManagedResource):
    """Returns (state, error). Both None means the resource was not found."""
    try:
        return resource.probe(), None
    except Exception as e:
        logger.warning("Probe of %s %s failed: %s", resource.kind.value, resource.name, e)
        return None, f"probe failed: {e}"


def _observe(resource: ManagedResource) -> ReconcileOutcome:
    state, error = _probe(resource)
    if error is not None:
        return ReconcileOutcome(resource.name, resource.kind, OutcomeStatus.FAILED, reason=error)
    if state is None:
        return ReconcileOutcome(resource.name, resource.kind, OutcomeStatus.NOT_FOUND)
    return ReconcileOutcome(resource.name, resource.kind, OutcomeStatus.OBSERVED, state)


def _converge(resource: ManagedResource, target: Target) -> ReconcileOutcome:
    mutation = resource.apply(target)

    # the subsystems don't report reliably, the re-read is the confirmation
    state, error = _probe(resource)

    if not mutation.ok:
        return ReconcileOutcome(resource.name, resource.kind, OutcomeStatus.FAILED, state, mutation.reason)
    if error is not None:
        return ReconcileOutcome(resource.name, resource.kind, OutcomeStatus.FAILED, reason=error)
    if state is None:
        return ReconcileOutcome(resource.name, resource.kind, OutcomeStatus.NOT_FOUND)
    if not resource.is_converged(state, target):
        reason = f"expected {resource.expected(target)}, observed {state}"
        return ReconcileOutcome(resource.name, resource.kind, OutcomeStatus.FAILED, state, reason)
    return ReconcileOutcome(resource.name, resource.kind, OutcomeStatus.APPLIED, state)


def reconcile(resources: Iterable[ManagedResource], target: Optional[Target] = None) -> List[ReconcileOutcome]:
    """
    Bring every resource to `target`, in list order, and confirm by re-probing.

    - target=None: status-only pass, resources are probed and never mutated
    - one outcome per resource; a failing resource never stops the batch
    """
    outcomes = []
    for resource in resources:
        if target is None:
            outcomes.append(_observe(resource))
        else:
            outcomes.append(_converge(resource, target))
    return outcomes
