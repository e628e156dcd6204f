from common.lockdown_policy import LockdownPolicy
from common.reconciler import OutcomeStatus, reconcile
from common.resources import (
    AdapterState,
    AdapterStatus,
    ManagedService,
    PolicyValueState,
    RunState,
    ServiceState,
    StartupMode,
    Target,
    discover_wireless_adapters,
)

from conftest import POLICY_PATH, RUNNING_AUTO, FakeServiceControl

DISABLED_STOPPED = ServiceState(StartupMode.DISABLED, RunState.STOPPED)


def _lockdown_resources(policy, service_control, adapter_control, policy_store):
    return (
        policy.service_resources(service_control)
        + discover_wireless_adapters(adapter_control)
        + policy.policy_key_resources(policy_store)
    )


def _final_state(policy, service_control, adapter_control, policy_store):
    return [
        (o.resource_name, o.status, o.state)
        for o in reconcile(_lockdown_resources(policy, service_control, adapter_control, policy_store))
    ]


def test_lockdown_converges_every_resource(policy, service_control, adapter_control, policy_store):
    resources = _lockdown_resources(policy, service_control, adapter_control, policy_store)

    outcomes = reconcile(resources, Target.LOCKDOWN)

    assert [o.status for o in outcomes] == [OutcomeStatus.APPLIED] * 5
    assert [o.resource_name for o in outcomes] == ["svcA", "svcB", "Wi-Fi", "X", "Y"]
    assert outcomes[0].state == DISABLED_STOPPED
    assert outcomes[2].state == AdapterState(AdapterStatus.DISABLED)
    assert outcomes[3].state == PolicyValueState(1)
    assert policy_store.values == {(POLICY_PATH, "X"): 1, (POLICY_PATH, "Y"): 1}


def test_lockdown_is_idempotent(policy, service_control, adapter_control, policy_store):
    args = (policy, service_control, adapter_control, policy_store)

    reconcile(_lockdown_resources(*args), Target.LOCKDOWN)
    once = _final_state(*args)

    second = reconcile(_lockdown_resources(*args), Target.LOCKDOWN)
    twice = _final_state(*args)

    assert once == twice
    assert all(o.status is OutcomeStatus.APPLIED for o in second)


def test_revert_after_lockdown_restores_and_removes_keys(policy, service_control, adapter_control, policy_store):
    args = (policy, service_control, adapter_control, policy_store)
    policy_store.paths.add(POLICY_PATH)
    policy_store.values[(POLICY_PATH, "X")] = 7  # prior value is irrelevant to revert

    reconcile(_lockdown_resources(*args), Target.LOCKDOWN)
    outcomes = reconcile(_lockdown_resources(*args), Target.REVERT)

    assert all(o.status is OutcomeStatus.APPLIED for o in outcomes)
    assert service_control.services == {"svcA": RUNNING_AUTO, "svcB": RUNNING_AUTO}
    assert adapter_control.adapters["Wi-Fi"].status is AdapterStatus.UP
    assert policy_store.values == {}


def test_revert_of_missing_policy_keys_is_satisfied(policy, policy_store):
    outcomes = reconcile(policy.policy_key_resources(policy_store), Target.REVERT)

    assert [o.status for o in outcomes] == [OutcomeStatus.APPLIED, OutcomeStatus.APPLIED]
    assert all(o.state == PolicyValueState(None) for o in outcomes)


def test_unknown_service_is_not_found_and_batch_continues(policy_store):
    control = FakeServiceControl({"svcA": RUNNING_AUTO, "svcC": RUNNING_AUTO})
    policy = LockdownPolicy(services=("svcA", "ghost", "svcC"), policy_path=POLICY_PATH, policy_values={})

    outcomes = reconcile(policy.service_resources(control), Target.LOCKDOWN)

    assert [o.status for o in outcomes] == [
        OutcomeStatus.APPLIED, OutcomeStatus.NOT_FOUND, OutcomeStatus.APPLIED,
    ]
    assert outcomes[1].reason is None


def test_probe_of_unknown_service_does_not_raise():
    control = FakeServiceControl({})

    assert ManagedService("ghost", control).probe() is None
    assert reconcile([ManagedService("ghost", control)])[0].status is OutcomeStatus.NOT_FOUND


def test_failure_is_isolated_to_one_resource(policy, service_control):
    service_control.fail_on[("stop", "svcA")] = "access denied"

    outcomes = reconcile(policy.service_resources(service_control), Target.LOCKDOWN)

    assert len(outcomes) == 2
    assert outcomes[0].status is OutcomeStatus.FAILED
    assert outcomes[0].reason == "access denied"
    # startup mode change is kept, the stop is not retried
    assert outcomes[0].state == ServiceState(StartupMode.DISABLED, RunState.RUNNING)
    assert outcomes[1].status is OutcomeStatus.APPLIED


def test_policy_key_write_failure_is_isolated(policy, policy_store):
    policy_store.fail_names.add("X")

    outcomes = reconcile(policy.policy_key_resources(policy_store), Target.LOCKDOWN)

    assert [o.status for o in outcomes] == [OutcomeStatus.FAILED, OutcomeStatus.APPLIED]
    assert "access denied" in outcomes[0].reason


def test_unconverged_state_is_reported_as_failure(policy):
    class StuckControl(FakeServiceControl):
        def stop(self, name, force=True):
            self.calls.append(("stop", name))
            self.services[name] = ServiceState(self.services[name].startup_mode, RunState.STOP_PENDING)

    control = StuckControl({"svcA": RUNNING_AUTO, "svcB": RUNNING_AUTO})

    outcome = reconcile(policy.service_resources(control), Target.LOCKDOWN)[0]

    assert outcome.status is OutcomeStatus.FAILED
    assert outcome.reason == "expected Disabled/Stopped, observed Disabled/StopPending"


def test_probe_error_becomes_failed_outcome(policy):
    class BrokenControl(FakeServiceControl):
        def query_service(self, name):
            raise OSError("RPC server unavailable")

    outcomes = reconcile(policy.service_resources(BrokenControl({})))

    assert [o.status for o in outcomes] == [OutcomeStatus.FAILED, OutcomeStatus.FAILED]
    assert outcomes[0].reason == "probe failed: RPC server unavailable"


def test_status_only_never_mutates(policy, service_control, adapter_control, policy_store):
    args = (policy, service_control, adapter_control, policy_store)

    first = reconcile(_lockdown_resources(*args))
    second = reconcile(_lockdown_resources(*args))

    assert first == second
    assert all(o.status is OutcomeStatus.OBSERVED for o in first)
    assert service_control.mutations == []
    assert adapter_control.set_calls == []
    assert policy_store.writes == 0


def test_status_only_reports_unconfigured_keys(policy, policy_store):
    outcomes = reconcile(policy.policy_key_resources(policy_store))

    assert [str(o.state) for o in outcomes] == ["Not set", "Not set"]


def test_two_service_example(policy, service_control, policy_store):
    resources = policy.service_resources(service_control) + policy.policy_key_resources(policy_store)

    reconcile(resources, Target.LOCKDOWN)
    probed = reconcile(resources)
    assert [o.state for o in probed] == [
        DISABLED_STOPPED, DISABLED_STOPPED, PolicyValueState(1), PolicyValueState(1),
    ]

    reconcile(resources, Target.REVERT)
    probed = reconcile(resources)
    assert [o.state for o in probed] == [
        RUNNING_AUTO, RUNNING_AUTO, PolicyValueState(None), PolicyValueState(None),
    ]
