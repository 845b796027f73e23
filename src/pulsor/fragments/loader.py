"""HTML fragment and template fetchers registered as async pulsers.

``install_fetch_fragment`` and ``install_fetch_template`` each register one
async pulser that GETs an HTML file over HTTP and resolves to its usable
markup, or ``None`` when nothing usable came back.  Failures never raise
out of the pulser: they are reported through the registry's logger.

Bind callbacks to the returned handle to observe every requested name.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from pulsor.config import PulsorConfig
    from pulsor.core.handle import PulserHandle
    from pulsor.core.registry import Registry

FRAGMENT_ALIAS = "fetch:fragment"
TEMPLATE_ALIAS = "fetch:template"

_TEMPLATE_RE = re.compile(r"<template>(.*?)</template>", re.DOTALL)
_HTML_SUFFIX_RE = re.compile(r"\.html", re.IGNORECASE)


def extract_template(text: str) -> str | None:
    """Inner text of the first ``<template>`` block, or None if there is none."""
    match = _TEMPLATE_RE.search(text)
    return match.group(1) if match else None


def is_full_document(text: str) -> bool:
    """True if ``text`` looks like a whole page rather than a fragment.

    Dev servers commonly answer unknown paths with the app's index.html.
    """
    return "<!DOCTYPE html>" in text or "<html" in text


def template_name(name: str) -> str:
    """Map a requested template name to its file stem (``template.<name>``)."""
    return _HTML_SUFFIX_RE.sub("", f"template.{name}")


async def _get(
    url: str,
    *,
    base_url: str,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None,
) -> httpx.Response:
    async with httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport) as c:
        return await c.get(url)


def install_fetch_fragment(
    registry: Registry,
    *,
    base_url: str = "",
    path: str = "/src/fragments/",
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
    override: bool = False,
) -> PulserHandle:
    """Register the ``fetch:fragment`` pulser.

    ``pulse(name)`` fetches ``<path><name>.html`` and resolves to the inner
    text of its ``<template>`` block, or to the whole body when it has none.
    Resolves to None on a non-2xx status, on a full HTML document, on blank
    content, or on a transport error.
    """
    logger = registry.logger

    async def fetch_fragment(fragment: str) -> str | None:
        url = f"{path}{fragment}.html"
        try:
            response = await _get(url, base_url=base_url, timeout=timeout, transport=transport)
        except httpx.HTTPError as exc:
            logger.record("error", f"Error fetching fragment '{fragment}': {exc}")
            return None

        if not response.is_success:
            return None

        text = response.text
        if is_full_document(text):
            logger.record(
                "warn", f"Fragment '{fragment}' not found or returned a full HTML document."
            )
            return None

        body = extract_template(text)
        if body is None:
            body = text
        if not body.strip():
            return None
        return body

    return registry.create_pulser(FRAGMENT_ALIAS, fetch_fragment, override=override)


def install_fetch_template(
    registry: Registry,
    *,
    base_url: str = "",
    path: str = "/src/templates/",
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
    override: bool = False,
) -> PulserHandle:
    """Register the ``fetch:template`` pulser.

    ``pulse(name)`` fetches ``<path>template.<name>.html`` (any ``.html`` in
    ``name`` is dropped) and resolves to the inner text of its
    ``<template>`` block.  Unlike fragments, a body without a
    ``<template>`` block is rejected.
    """
    logger = registry.logger

    async def fetch_template(template: str) -> str | None:
        stem = template_name(template)
        url = f"{path}{stem}.html"
        try:
            response = await _get(url, base_url=base_url, timeout=timeout, transport=transport)
        except httpx.HTTPError as exc:
            logger.record("error", f"Error fetching template '{stem}': {exc}")
            return None

        if not response.is_success:
            return None

        body = extract_template(response.text)
        if body is None or not body.strip():
            logger.record("warn", f"Template '{stem}' not found or returned empty content.")
            return None
        return body

    return registry.create_pulser(TEMPLATE_ALIAS, fetch_template, override=override)


def install_fetchers(
    registry: Registry,
    config: PulsorConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[PulserHandle, PulserHandle]:
    """Register both fetchers using the URLs and timeout from ``config``.

    Returns:
        The ``fetch:fragment`` and ``fetch:template`` handles.

    """
    fragment = install_fetch_fragment(
        registry,
        base_url=config.fragment_base_url,
        path=config.fragments_path,
        timeout=config.fetch_timeout,
        transport=transport,
    )
    template = install_fetch_template(
        registry,
        base_url=config.fragment_base_url,
        path=config.templates_path,
        timeout=config.fetch_timeout,
        transport=transport,
    )
    return fragment, template
