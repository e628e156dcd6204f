from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Tuple

from common.resources import (
    ManagedService,
    PolicyKeyResource,
    PolicyStore,
    ServiceControl,
)

# ============================
# --- Default lockdown table ---
# ============================
DEFAULT_SERVICES: Tuple[str, ...] = (
    "lfsvc",              # Geolocation Service
    "SensorService",      # Sensor Service
    "SensorDataService",  # Sensor Data Service
    "SensrSvc",           # Sensor Monitoring Service
    "MapsBroker",         # Downloaded Maps Manager
    "DiagTrack",          # Connected User Experiences and Telemetry
    "dmwappushservice",   # Device Management WAP Push
)

DEFAULT_POLICY_PATH = "HKLM\\SOFTWARE\\Policies\\Microsoft\\Windows\\LocationAndSensors"

DEFAULT_POLICY_VALUES: Mapping[str, int] = MappingProxyType({
    "DisableLocation": 1,
    "DisableLocationScripting": 1,
    "DisableSensors": 1,
    "DisableWindowsLocationProvider": 1,
})


@dataclass(frozen=True)
class LockdownPolicy:
    """
    What "lockdown" means. Both lockdown and revert build their resources from
    the same instance, so the two can't drift apart.
    """
    services: Tuple[str, ...] = DEFAULT_SERVICES
    policy_path: str = DEFAULT_POLICY_PATH
    policy_values: Mapping[str, int] = field(default_factory=lambda: DEFAULT_POLICY_VALUES)

    def __post_init__(self):
        object.__setattr__(self, "services", tuple(self.services))
        object.__setattr__(self, "policy_values", MappingProxyType(dict(self.policy_values)))

    def service_resources(self, control: ServiceControl) -> List[ManagedService]:
        return [ManagedService(name, control) for name in self.services]

    def policy_key_resources(self, store: PolicyStore) -> List[PolicyKeyResource]:
        return [
            PolicyKeyResource(self.policy_path, name, value, store)
            for name, value in self.policy_values.items()
        ]
