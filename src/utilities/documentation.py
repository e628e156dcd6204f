from core.console import header
from core.dispatcher import MenuCommand

DOCUMENTATION = """\
1 - Full lockdown
    Disables and stops the location/sensor/telemetry services, disables every
    physical wireless adapter and writes the location policy keys.
2 - Check status
    Shows the current state of the same services, adapters and keys.
    Nothing is changed.
3 - Services and wireless adapters only
    Same as 1 without the policy keys.
4 - Policy keys only
    Writes the location policy keys. The key is created if missing.
5 - Revert
    Services back to Automatic and started, wireless adapters enabled,
    policy keys and the key that holds them removed.
6 - Public IP and geolocation
    Asks an IP echo service for the public address, then an IP geolocation
    service for city, region, country, coordinates and ISP.
7 - This text.
Q - Exit.

Every change is confirmed by reading the state back:
    [OK]     the resource reached the requested state
    [--]     the resource does not exist on this machine
    [ERROR]  the change failed or did not take effect
One failing resource never stops the others. A partially applied lockdown
is left as is; run the same option again to retry.
"""


class ShowDocumentation(MenuCommand):
    KEY = '7'

    def get_name(self) -> str:
        return 'Documentation'

    def process(self):
        header("Documentation")
        print(DOCUMENTATION)
