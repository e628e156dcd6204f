"""
Managed resources: one class per resource kind.

Every resource knows how to
- probe its current state from the owning subsystem (pure read)
- apply a target state (lockdown or revert) in a single pass
- decide whether an observed state satisfies a target

Backends (service control, adapter control, policy store) are passed in, so the
same classes run against the real Windows APIs or against in-memory fakes.
"""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol

from common.errors import ResourceNotFound

logger = logging.getLogger(__name__)


class ResourceKind(Enum):
    SERVICE = "service"
    NETWORK_ADAPTER = "network adapter"
    POLICY_KEY = "policy key"


class Target(Enum):
    LOCKDOWN = "lockdown"
    REVERT = "revert"


class StartupMode(Enum):
    AUTOMATIC = "Automatic"
    MANUAL = "Manual"
    DISABLED = "Disabled"
    BOOT = "Boot"
    SYSTEM = "System"
    UNKNOWN = "Unknown"


class RunState(Enum):
    RUNNING = "Running"
    STOPPED = "Stopped"
    START_PENDING = "StartPending"
    STOP_PENDING = "StopPending"
    PAUSED = "Paused"
    OTHER = "Other"


class AdapterStatus(Enum):
    UP = "Up"
    DISABLED = "Disabled"
    DISCONNECTED = "Disconnected"
    OTHER = "Other"


@dataclass(frozen=True)
class ServiceState:
    startup_mode: StartupMode
    run_state: RunState

    def __str__(self) -> str:
        return f"{self.startup_mode.value}/{self.run_state.value}"


@dataclass(frozen=True)
class AdapterState:
    status: AdapterStatus

    def __str__(self) -> str:
        return self.status.value


@dataclass(frozen=True)
class PolicyValueState:
    # None -> value (or its container key) is not configured
    value: Optional[int]

    def __str__(self) -> str:
        return "Not set" if self.value is None else str(self.value)


@dataclass(frozen=True)
class WirelessAdapter:
    name: str
    description: str
    status: AdapterStatus


@dataclass(frozen=True)
class Mutation:
    """Result of a single mutator call. Never raised, always returned."""
    ok: bool
    reason: Optional[str] = None

    @classmethod
    def done(cls) -> "Mutation":
        return cls(True)

    @classmethod
    def failed(cls, reason: str) -> "Mutation":
        return cls(False, reason)


# ============================
# --- Backend interfaces ---
# ============================
class ServiceControl(Protocol):
    def query_service(self, name: str) -> Optional[ServiceState]: ...

    def set_startup_mode(self, name: str, mode: StartupMode) -> None: ...

    def stop(self, name: str, force: bool = True) -> None: ...

    def start(self, name: str) -> None: ...


class AdapterControl(Protocol):
    def list_adapters(self, physical_only: bool = True) -> List[WirelessAdapter]: ...

    def set_adapter_enabled(self, name: str, enabled: bool) -> None: ...


class PolicyStore(Protocol):
    def ensure_path(self, path: str) -> None: ...

    def set_value(self, path: str, name: str, value: int) -> None: ...

    def get_value(self, path: str, name: str) -> Optional[int]: ...

    def delete_value(self, path: str, name: str) -> bool: ...

    def remove_path(self, path: str) -> bool: ...


# ============================
# --- Resources ---
# ============================
class ManagedResource(ABC):
    KIND: ResourceKind

    def __init__(self, name: str):
        self.name = name

    @property
    def kind(self) -> ResourceKind:
        return self.KIND

    @abstractmethod
    def probe(self):
        """Return the observed state, or None when the resource does not exist."""
        raise NotImplementedError

    @abstractmethod
    def apply(self, target: Target) -> Mutation:
        raise NotImplementedError

    @abstractmethod
    def is_converged(self, state, target: Target) -> bool:
        raise NotImplementedError

    @abstractmethod
    def expected(self, target: Target) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class ManagedService(ManagedResource):
    KIND = ResourceKind.SERVICE

    def __init__(self, name: str, control: ServiceControl):
        super().__init__(name)
        self._control = control

    def probe(self) -> Optional[ServiceState]:
        return self._control.query_service(self.name)

    def apply(self, target: Target) -> Mutation:
        try:
            if target is Target.LOCKDOWN:
                self._control.set_startup_mode(self.name, StartupMode.DISABLED)
                state = self._control.query_service(self.name)
                if state is not None and state.run_state is not RunState.STOPPED:
                    self._control.stop(self.name, force=True)
            else:
                self._control.set_startup_mode(self.name, StartupMode.AUTOMATIC)
                self._control.start(self.name)
        except ResourceNotFound:
            # reported as NotFound by the re-probe
            return Mutation.done()
        except Exception as e:
            logger.warning("Service %s (%s) failed: %s", self.name, target.value, e)
            return Mutation.failed(str(e))

        logger.info("Service %s: %s applied", self.name, target.value)
        return Mutation.done()

    def is_converged(self, state: ServiceState, target: Target) -> bool:
        if target is Target.LOCKDOWN:
            return state.startup_mode is StartupMode.DISABLED and state.run_state is RunState.STOPPED
        return state.startup_mode is StartupMode.AUTOMATIC and state.run_state is RunState.RUNNING

    def expected(self, target: Target) -> str:
        if target is Target.LOCKDOWN:
            return str(ServiceState(StartupMode.DISABLED, RunState.STOPPED))
        return str(ServiceState(StartupMode.AUTOMATIC, RunState.RUNNING))


class WirelessAdapterResource(ManagedResource):
    KIND = ResourceKind.NETWORK_ADAPTER

    def __init__(self, adapter: WirelessAdapter, control: AdapterControl):
        super().__init__(adapter.name)
        self.description = adapter.description
        self._control = control

    def probe(self) -> Optional[AdapterState]:
        # enumeration is re-run on every probe, adapters come and go
        for adapter in self._control.list_adapters(physical_only=True):
            if adapter.name == self.name:
                return AdapterState(adapter.status)
        return None

    def apply(self, target: Target) -> Mutation:
        enabled = target is Target.REVERT
        try:
            self._control.set_adapter_enabled(self.name, enabled)
        except ResourceNotFound:
            # gone adapter: "off" is trivially satisfied
            return Mutation.done()
        except Exception as e:
            logger.warning("Adapter %s (%s) failed: %s", self.name, target.value, e)
            return Mutation.failed(str(e))

        logger.info("Adapter %s: %s", self.name, "enabled" if enabled else "disabled")
        return Mutation.done()

    def is_converged(self, state: AdapterState, target: Target) -> bool:
        if target is Target.LOCKDOWN:
            return state.status is AdapterStatus.DISABLED
        return state.status is not AdapterStatus.DISABLED

    def expected(self, target: Target) -> str:
        return AdapterStatus.DISABLED.value if target is Target.LOCKDOWN else "enabled"


class PolicyKeyResource(ManagedResource):
    KIND = ResourceKind.POLICY_KEY

    def __init__(self, path: str, name: str, value: int, store: PolicyStore):
        super().__init__(name)
        self.path = path
        self.value = value
        self._store = store

    def probe(self) -> PolicyValueState:
        return PolicyValueState(self._store.get_value(self.path, self.name))

    def apply(self, target: Target) -> Mutation:
        try:
            if target is Target.LOCKDOWN:
                self._store.ensure_path(self.path)
                self._store.set_value(self.path, self.name, self.value)
            else:
                # missing value means the revert is already satisfied
                self._store.delete_value(self.path, self.name)
        except Exception as e:
            logger.warning("Policy %s\\%s (%s) failed: %s", self.path, self.name, target.value, e)
            return Mutation.failed(str(e))

        logger.info("Policy %s\\%s: %s applied", self.path, self.name, target.value)
        return Mutation.done()

    def is_converged(self, state: PolicyValueState, target: Target) -> bool:
        if target is Target.LOCKDOWN:
            return state.value == self.value
        return state.value is None

    def expected(self, target: Target) -> str:
        return str(PolicyValueState(self.value if target is Target.LOCKDOWN else None))


# ============================
# --- Discovery ---
# ============================
WIRELESS_PATTERN = re.compile(r"wireless|wi-?fi", re.IGNORECASE)


def is_wireless(adapter: WirelessAdapter) -> bool:
    return WIRELESS_PATTERN.search(adapter.description or "") is not None


def discover_wireless_adapters(control: AdapterControl) -> List[WirelessAdapterResource]:
    """
    Enumerate physical adapters and keep the wireless ones.
    Not cached: every call asks the adapter subsystem again.
    """
    return [
        WirelessAdapterResource(adapter, control)
        for adapter in control.list_adapters(physical_only=True)
        if is_wireless(adapter)
    ]
