from core.console import header, print_error, print_ok
from scripts.ip_lookup import NetworkIdentity, query_identity
from utilities.context import ContextCommand


def print_identity(identity: NetworkIdentity):
    if identity.public_ip is not None:
        print_ok(f"Public IP: {identity.public_ip}")

    geo = identity.geo
    if geo is not None:
        print(f"City:             {geo.city or '?'}")
        print(f"Region:           {geo.region or '?'}")
        print(f"Country:          {geo.country or '?'}")
        lat = "?" if geo.lat is None else geo.lat
        lon = "?" if geo.lon is None else geo.lon
        print(f"Coordinates:      {lat}, {lon}")
        print(f"ISP:              {geo.isp or '?'}")

    for error in identity.errors:
        print_error(error)


class ShowIdentity(ContextCommand):
    KEY = '6'

    def get_name(self) -> str:
        return 'Show public IP and geolocation'

    def process(self):
        config = self._context.config
        header("Network identity")
        identity = query_identity(
            self._context.http,
            ip_echo_url=config.ip_echo_url,
            geo_lookup_url=config.geo_lookup_url,
            timeout=config.http_timeout,
        )
        print_identity(identity)
