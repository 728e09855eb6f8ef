"""URL canonicalization and text fingerprinting.

Every function here degrades to a safe value instead of raising: a URL that
cannot be parsed is returned unchanged by ``canonicalize`` and yields ``None``
from ``registrable_domain``.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import tldextract

logger = logging.getLogger(__name__)

TRACKING_PARAMS = frozenset(
    {
        "gclid",
        "fbclid",
        "mc_cid",
        "mc_eid",
        "msclkid",
        "_ga",
        "igshid",
        "ref_src",
    }
)
TRACKING_PREFIXES = ("utm_",)

DEFAULT_PORTS = {"http": 80, "https": 443}

FINGERPRINT_TOKENS = 30
FNV_OFFSET_BASIS = 14695981039346656037
FNV_PRIME = 1099511628211
_MASK_64 = (1 << 64) - 1

_AMP_PREFIX = re.compile(r"^/amp(?=/|$)")
_AMP_SUFFIX = re.compile(r"/amp$")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")

# Bundled public suffix snapshot only; never fetch the list over the network.
_extract = tldextract.TLDExtract(suffix_list_urls=())


def _is_tracking_param(key: str) -> bool:
    lowered = key.lower()
    return lowered in TRACKING_PARAMS or lowered.startswith(TRACKING_PREFIXES)


def _normalize_path(path: str) -> str:
    previous = None
    while path != previous:
        previous = path
        path = _AMP_PREFIX.sub("", path, count=1)
        if len(path) > 1:
            path = path.rstrip("/")
        path = _AMP_SUFFIX.sub("", path)
    if not path.startswith("/"):
        path = "/" + path
    return path


def canonicalize(url: str) -> str:
    """Normalize a URL into a stable deduplication key.

    Lower-cases scheme and host, strips default ports, the fragment, tracking
    parameters and AMP path segments, sorts the remaining query parameters by
    key and drops trailing slashes (the root path is kept).

    Args:
        url: Raw URL as returned by a provider.

    Returns:
        The canonical URL, or the input unchanged if it cannot be parsed.
    """
    try:
        parts = urlsplit(url.strip())
        if not parts.scheme or not parts.hostname:
            return url

        scheme = parts.scheme.lower()
        host = parts.hostname.lower()
        if ":" in host:
            host = f"[{host}]"
        port = parts.port
        netloc = host
        if port is not None and DEFAULT_PORTS.get(scheme) != port:
            netloc = f"{host}:{port}"
        if parts.username:
            userinfo = parts.username
            if parts.password:
                userinfo = f"{userinfo}:{parts.password}"
            netloc = f"{userinfo}@{netloc}"

        params = [
            (key, value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
            if not _is_tracking_param(key)
        ]
        params.sort(key=lambda kv: kv[0])
        query = urlencode(params)

        return urlunsplit((scheme, netloc, _normalize_path(parts.path), query, ""))
    except Exception:
        logger.debug("Could not canonicalize url %r", url)
        return url


def registrable_domain(url: str) -> str | None:
    """Resolve the public-suffix-aware registrable domain of a URL.

    Args:
        url: Any URL or bare hostname.

    Returns:
        e.g. ``"bbc.co.uk"`` for ``https://news.bbc.co.uk/x``, or None when the
        host has no registrable domain (IP addresses, ``localhost``, garbage).
    """
    try:
        parts = _extract(url)
    except Exception:
        return None
    if not parts.domain or not parts.suffix:
        return None
    return f"{parts.domain}.{parts.suffix}".lower()


def extract_domain(url: str) -> str:
    """Extract the host of a URL without a leading ``www.``.

    Returns an empty string if the URL has no host.
    """
    try:
        host = urlsplit(url).hostname or ""
    except ValueError:
        return ""
    if host.startswith("www."):
        host = host[4:]
    return host


def fingerprint_tokens(title: str, snippet: str = "") -> list[str]:
    text = _NON_ALNUM.sub(" ", f"{title} {snippet}".lower())
    return text.split()[:FINGERPRINT_TOKENS]


def title_fingerprint(title: str, snippet: str = "") -> str:
    """Compute a coarse near-duplicate fingerprint of an article.

    The first 30 alphanumeric tokens of ``title + snippet`` are hashed with
    64-bit FNV-1a. Collisions are acceptable; this is not a digest.

    Returns:
        16 lowercase hex digits.
    """
    joined = " ".join(fingerprint_tokens(title, snippet))
    value = FNV_OFFSET_BASIS
    for byte in joined.encode("utf-8"):
        value ^= byte
        value = (value * FNV_PRIME) & _MASK_64
    return f"{value:016x}"
