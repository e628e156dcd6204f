from typing import List

import wmi

from common.errors import MutationFailed, ResourceNotFound
from common.resources import AdapterStatus, WirelessAdapter

# Win32_NetworkAdapter.NetConnectionStatus
NET_CONNECTION_CONNECTED = 2
NET_CONNECTION_DISCONNECTED = {0, 7}  # Disconnected, Media disconnected


def adapter_status(nic) -> AdapterStatus:
    """
    Map a Win32_NetworkAdapter row to AdapterStatus.
    NetEnabled is False for administratively disabled adapters.
    """
    if nic.NetEnabled is False or (nic.NetEnabled is None and nic.NetConnectionStatus is None):
        return AdapterStatus.DISABLED
    if nic.NetConnectionStatus == NET_CONNECTION_CONNECTED:
        return AdapterStatus.UP
    if nic.NetConnectionStatus in NET_CONNECTION_DISCONNECTED:
        return AdapterStatus.DISCONNECTED
    return AdapterStatus.OTHER


class WmiAdapterControl:
    """
    Network adapters through WMI.

    The adapter "name" is the connection name shown in Network Connections
    (NetConnectionID, e.g. "Wi-Fi"), the description is the hardware name.
    """

    def __init__(self):
        self._connection = None

    @property
    def _wmi(self):
        # connected on first use
        if self._connection is None:
            self._connection = wmi.WMI()
        return self._connection

    def _query(self, physical_only: bool):
        if physical_only:
            return self._wmi.Win32_NetworkAdapter(PhysicalAdapter=True)
        return self._wmi.Win32_NetworkAdapter()

    def list_adapters(self, physical_only: bool = True) -> List[WirelessAdapter]:
        adapters = []
        for nic in self._query(physical_only):
            if not nic.NetConnectionID:
                continue
            adapters.append(WirelessAdapter(
                name=nic.NetConnectionID,
                description=nic.Description or nic.Name or "",
                status=adapter_status(nic),
            ))
        return adapters

    def set_adapter_enabled(self, name: str, enabled: bool) -> None:
        matches = self._wmi.Win32_NetworkAdapter(NetConnectionID=name)
        if not matches:
            raise ResourceNotFound(name)

        nic = matches[0]
        result, = nic.Enable() if enabled else nic.Disable()
        if result != 0:
            raise MutationFailed(f"{'Enable' if enabled else 'Disable'} returned {result}")
