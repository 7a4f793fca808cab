from typing import Optional
from urllib.parse import quote, urlsplit, urlunsplit

from fastapi import Request

# Characters JavaScript's encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def strip_query_param(url: str, name: str) -> str:
    """Return `url` without any `name` query parameter. Other segments are kept verbatim."""
    parts = urlsplit(url)
    kept = [
        segment
        for segment in parts.query.split("&")
        if segment and segment.split("=", 1)[0] != name
    ]
    return urlunsplit(parts._replace(query="&".join(kept)))


def resolve_origin(request: Request, public_origin: Optional[str] = None) -> str:
    if public_origin:
        return public_origin.rstrip("/")
    return f"{request.url.scheme}://{request.url.netloc}"


def build_source_link(origin: str, source_name: str) -> str:
    return f"{origin.rstrip('/')}/?source={encode_uri_component(source_name)}"


def build_referral_link(origin: str, user_id: str) -> str:
    return f"{origin.rstrip('/')}/?ref={user_id}"


def build_channel_invite_link(base: str, source: str, user_id: str) -> str:
    return f"{base.rstrip('/')}?start={source}_{user_id}"
