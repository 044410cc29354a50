"""URL resolver and default page scraper.

``UrlResolver`` delegates to any async scraper returning
``{"content": ..., "title": ...}`` or ``{"error": ...}`` and turns the
payload into a ``ResolvedPage`` or a ``ResolverError``. No retries.

``WebScraper`` is the scraper used when none is injected. Security:
- SSRF guard: ipaddress module blocks private/loopback/link-local ranges before
  any connection is established.
- Allowed URL schemes: https:// and http:// only.
- Content-Type whitelist: text/html and text/plain only.
- Max response body, timeout and redirect limit come from ``WebCfg``.
"""

from __future__ import annotations

import asyncio
import ipaddress
import socket
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from http.client import HTTPException, HTTPResponse
from typing import Any

import html2text
from bs4 import BeautifulSoup

from docchat.config import WebCfg
from docchat.errors import ResolverError

ScrapeResult = dict[str, Any]
Scraper = Callable[[str], Awaitable[ScrapeResult]]

_ALLOWED_SCHEMES = {"https", "http"}
_ALLOWED_CONTENT_TYPES = {"text/html", "text/plain"}

# html2text converter
_h2t = html2text.HTML2Text()
_h2t.ignore_links = True
_h2t.ignore_images = True
_h2t.body_width = 0


class SsrfError(ValueError):
    """Raised when a URL resolves to a private or reserved address."""


@dataclass(frozen=True)
class ResolvedPage:
    title: str
    content: str


# ------------------------------------------------------------------
# Resolver
# ------------------------------------------------------------------


class UrlResolver:
    """Normalize a scraper's result into ``ResolvedPage`` / ``ResolverError``."""

    def __init__(self, scraper: Scraper | None = None) -> None:
        self._scraper = scraper if scraper is not None else WebScraper()

    async def resolve(self, url: str) -> ResolvedPage:
        """Scrape *url* once.

        Raises:
            ResolverError: The payload carried ``error``, the scraper raised,
                or no content came back.
        """
        try:
            result = await self._scraper(url)
        except Exception as exc:
            raise ResolverError(url, str(exc) or exc.__class__.__name__) from exc

        if not isinstance(result, dict):
            raise ResolverError(url, f"Scraper returned an unexpected payload for {url}")
        if result.get("error"):
            raise ResolverError(url, str(result["error"]))

        content = result.get("content") or ""
        if not str(content).strip():
            raise ResolverError(url, f"No content found at {url}")
        title = str(result.get("title") or "").strip() or url
        return ResolvedPage(title=title, content=str(content))


# ------------------------------------------------------------------
# Default scraper
# ------------------------------------------------------------------


class WebScraper:
    """Fetch a URL and convert HTML/plain text to ``{"content", "title"}``.

    SSRF protection is applied *before* any connection is made:
    the hostname is resolved and all resulting IP addresses are checked
    against private/loopback/link-local/reserved ranges via the stdlib
    ``ipaddress`` module.

    Fetch, transport and validation failures are returned as
    ``{"error": message}``; ``UrlResolver`` also guards against anything else.
    """

    def __init__(self, config: WebCfg | None = None) -> None:
        self.config = config or WebCfg()

    async def __call__(self, url: str) -> ScrapeResult:
        return await asyncio.to_thread(self.scrape, url)

    def scrape(self, url: str) -> ScrapeResult:
        """Blocking scrape; run off the event loop by ``__call__``."""
        try:
            self._validate_scheme(url)
            self._check_ssrf(url)
            raw, content_type = self._fetch(url)
        except (ValueError, RuntimeError, OSError, HTTPException) as exc:
            return {"error": str(exc)}
        title, text = self._to_plain_text(raw, content_type)
        if not text.strip():
            return {"error": f"No readable text found at '{url}'."}
        return {"content": text, "title": title or url}

    # ------------------------------------------------------------------
    # Fetch pipeline
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_scheme(url: str) -> None:
        parsed = urllib.parse.urlparse(url)
        if parsed.scheme not in _ALLOWED_SCHEMES:
            raise ValueError(
                f"Unsupported URL scheme '{parsed.scheme}'. Only https:// and http:// are allowed."
            )

    @staticmethod
    def _check_ssrf(url: str) -> None:
        """Resolve the hostname and block private/reserved IP ranges.

        Raises SsrfError if any resolved address is private, loopback,
        link-local, or otherwise reserved.
        """
        parsed = urllib.parse.urlparse(url)
        hostname = parsed.hostname
        if not hostname:
            raise ValueError(f"URL has no hostname: {url}")

        try:
            addrinfos = socket.getaddrinfo(hostname, None)
        except socket.gaierror as exc:
            raise ValueError(f"DNS resolution failed for '{hostname}': {exc}") from exc

        for addrinfo in addrinfos:
            addr_str = addrinfo[4][0]
            try:
                ip = ipaddress.ip_address(addr_str)
            except ValueError:
                continue
            if (
                ip.is_private
                or ip.is_loopback
                or ip.is_link_local
                or ip.is_reserved
                or ip.is_multicast
                or ip.is_unspecified
            ):
                raise SsrfError(
                    f"URL resolves to private address ({ip}). "
                    "Access to internal network addresses is not allowed."
                )

    def _fetch(self, url: str) -> tuple[bytes, str]:
        """Fetch *url* with timeout, redirect limit, size cap, and Content-Type check.

        Returns (body_bytes, content_type_without_params).
        """
        cfg = self.config
        request = urllib.request.Request(url, headers={"User-Agent": cfg.user_agent})
        opener = urllib.request.build_opener(_LimitedRedirectHandler(cfg.max_redirects))

        try:
            response: HTTPResponse = opener.open(request, timeout=cfg.timeout)
        except (urllib.error.URLError, TimeoutError) as exc:
            raise RuntimeError(f"Failed to fetch URL '{url}': {exc}") from exc

        with response:
            raw_ct = response.headers.get("Content-Type", "text/html")
            ct = raw_ct.split(";")[0].strip().lower()
            if ct not in _ALLOWED_CONTENT_TYPES:
                raise ValueError(
                    f"Unsupported Content-Type '{ct}' for URL '{url}'. "
                    f"Accepted: {', '.join(sorted(_ALLOWED_CONTENT_TYPES))}"
                )

            body = response.read(cfg.max_bytes + 1)
        if len(body) > cfg.max_bytes:
            raise ValueError(
                f"Response body exceeds {cfg.max_bytes:,} bytes for URL '{url}'."
            )

        return body, ct

    @staticmethod
    def _to_plain_text(body: bytes, content_type: str) -> tuple[str, str]:
        """Convert *body* to ``(title, plain_text)`` based on *content_type*."""
        text = body.decode("utf-8", errors="replace")
        if content_type == "text/plain":
            return "", text

        # HTML: take the <title>, strip non-content tags, then html2text
        soup = BeautifulSoup(text, "html.parser")
        title = soup.title.get_text(strip=True) if soup.title else ""
        for tag in soup.find_all(["script", "style", "nav", "footer", "head"]):
            tag.decompose()
        return title, _h2t.handle(str(soup)).strip()


class _LimitedRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Cap redirects at *max_redirects* and SSRF-check every redirect target."""

    def __init__(self, max_redirects: int) -> None:
        self._max_redirects = max_redirects
        self._count = 0

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        self._count += 1
        if self._count > self._max_redirects:
            raise RuntimeError(
                f"Too many redirects (>{self._max_redirects}) for URL '{req.full_url}'."
            )
        WebScraper._validate_scheme(newurl)
        WebScraper._check_ssrf(newurl)
        return super().redirect_request(req, fp, code, msg, headers, newurl)
