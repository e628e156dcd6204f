"""
Reconciler passes over the three resource sets of the lockdown policy.
Each pass prints a section header and one line per resource.
"""
import logging
from typing import List, Optional

from common.reconciler import ReconcileOutcome, reconcile
from common.resources import Target, discover_wireless_adapters
from core.console import header, print_error, print_info, print_outcome
from utilities.context import ConsoleContext

logger = logging.getLogger(__name__)


def _report(outcomes: List[ReconcileOutcome]) -> List[ReconcileOutcome]:
    for outcome in outcomes:
        print_outcome(outcome)
    return outcomes


def services_pass(context: ConsoleContext, target: Optional[Target]) -> List[ReconcileOutcome]:
    header("Services")
    resources = context.config.policy.service_resources(context.services)
    return _report(reconcile(resources, target))


def adapters_pass(context: ConsoleContext, target: Optional[Target]) -> List[ReconcileOutcome]:
    header("Wireless adapters")
    try:
        resources = discover_wireless_adapters(context.adapters)
    except Exception as e:
        logger.warning("Adapter enumeration failed: %s", e)
        print_error(f"Could not enumerate network adapters: {e}")
        return []

    if not resources:
        print_info("No wireless adapters found.")
        return []

    return _report(reconcile(resources, target))


def policy_keys_pass(context: ConsoleContext, target: Optional[Target]) -> List[ReconcileOutcome]:
    policy = context.config.policy
    header(f"Policy keys ({policy.policy_path})")
    outcomes = _report(reconcile(policy.policy_key_resources(context.policy_store), target))

    if target is Target.REVERT:
        try:
            if context.policy_store.remove_path(policy.policy_path):
                print_info(f"Removed key {policy.policy_path}")
        except Exception as e:
            logger.warning("Could not remove %s: %s", policy.policy_path, e)
            print_error(f"Could not remove {policy.policy_path}: {e}")

    return outcomes


def summarize(outcomes: List[ReconcileOutcome]) -> None:
    failed = [o for o in outcomes if o.failed]
    print()
    if failed:
        print_error(f"{len(failed)} of {len(outcomes)} resource(s) did not converge.")
    else:
        print_info(f"{len(outcomes)} resource(s) processed.")
