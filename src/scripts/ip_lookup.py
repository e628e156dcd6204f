"""
Public IP and coarse geolocation lookup.

Two sequential, dependent calls:
    1. IP echo endpoint       -> PublicIp
    2. IP-to-geo endpoint(ip) -> GeoLocation

Stage 2 only accepts a PublicIp, so it can't run when stage 1 failed.
Each stage is tried once; errors are collected, not raised.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from common.errors import NetworkCallFailed

logger = logging.getLogger(__name__)

DEFAULT_IP_ECHO_URL = "https://api.ipify.org?format=json"
DEFAULT_GEO_LOOKUP_URL = "http://ip-api.com/json/{ip}"


@dataclass(frozen=True)
class PublicIp:
    address: str

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True)
class GeoLocation:
    city: Optional[str]
    region: Optional[str]
    country: Optional[str]
    lat: Optional[float]
    lon: Optional[float]
    isp: Optional[str]


@dataclass
class NetworkIdentity:
    public_ip: Optional[PublicIp] = None
    geo: Optional[GeoLocation] = None
    errors: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.public_ip is not None and self.geo is not None


def _get_json(session: requests.Session, url: str, timeout: Optional[float]) -> dict:
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
        body = response.json()
    except (requests.RequestException, ValueError) as e:
        raise NetworkCallFailed(f"GET {url}: {e}") from e

    if not isinstance(body, dict):
        raise NetworkCallFailed(f"GET {url}: unexpected response body")
    return body


def fetch_public_ip(session: requests.Session, url: str = DEFAULT_IP_ECHO_URL,
                    timeout: Optional[float] = None) -> PublicIp:
    body = _get_json(session, url, timeout)
    address = body.get("ip")
    if not address:
        raise NetworkCallFailed(f"GET {url}: no 'ip' in response")
    return PublicIp(str(address))


def fetch_geolocation(session: requests.Session, ip: PublicIp, url: str = DEFAULT_GEO_LOOKUP_URL,
                      timeout: Optional[float] = None) -> GeoLocation:
    target = url.format(ip=ip.address)
    body = _get_json(session, target, timeout)

    # ip-api answers 200 with status=fail for reserved/invalid addresses
    if body.get("status") == "fail":
        raise NetworkCallFailed(f"GET {target}: {body.get('message', 'lookup failed')}")

    return GeoLocation(
        city=body.get("city"),
        region=body.get("regionName") or body.get("region"),
        country=body.get("country"),
        lat=body.get("lat"),
        lon=body.get("lon"),
        isp=body.get("isp"),
    )


def query_identity(session: requests.Session,
                   ip_echo_url: str = DEFAULT_IP_ECHO_URL,
                   geo_lookup_url: str = DEFAULT_GEO_LOOKUP_URL,
                   timeout: Optional[float] = None) -> NetworkIdentity:
    identity = NetworkIdentity()

    try:
        identity.public_ip = fetch_public_ip(session, ip_echo_url, timeout)
    except NetworkCallFailed as e:
        logger.warning("Public IP lookup failed: %s", e)
        identity.errors.append(f"Public IP lookup failed: {e}")
        return identity

    try:
        identity.geo = fetch_geolocation(session, identity.public_ip, geo_lookup_url, timeout)
    except NetworkCallFailed as e:
        logger.warning("Geolocation lookup failed: %s", e)
        identity.errors.append(f"Geolocation lookup failed: {e}")

    return identity
