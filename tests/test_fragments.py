"""Tests for pulsor.fragments — HTML fragment and template fetchers."""

from __future__ import annotations

import httpx
import pytest

from pulsor.config import PulsorConfig
from pulsor.core.entry import ExecutionMode
from pulsor.fragments import (
    FRAGMENT_ALIAS,
    TEMPLATE_ALIAS,
    extract_template,
    install_fetch_fragment,
    install_fetch_template,
    install_fetchers,
    is_full_document,
    template_name,
)

BASE = "http://testserver"

FILES = {
    "/src/fragments/card.html": "<template><div class=\"card\"></div></template>",
    "/src/fragments/plain.html": "<p>plain</p>",
    "/src/fragments/blank.html": "<template>   </template>",
    "/src/fragments/page.html": "<!DOCTYPE html><html><body></body></html>",
    "/src/templates/template.modal.html": "<template><dialog></dialog></template>",
    "/src/templates/template.bare.html": "<dialog></dialog>",
}


def _serve(request: httpx.Request) -> httpx.Response:
    body = FILES.get(request.url.path)
    if body is None:
        return httpx.Response(404, text="missing")
    return httpx.Response(200, text=body)


@pytest.fixture
def transport() -> httpx.MockTransport:
    return httpx.MockTransport(_serve)


class TestHelpers:
    """Pure text helpers."""

    def test_extract_template(self) -> None:
        assert extract_template("<template>\n<b>x</b>\n</template>") == "\n<b>x</b>\n"

    def test_extract_template_first_block(self) -> None:
        assert extract_template("<template>a</template><template>b</template>") == "a"

    def test_extract_template_missing(self) -> None:
        assert extract_template("<b>x</b>") is None

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("<!DOCTYPE html><html></html>", True),
            ("<html lang=\"en\">", True),
            ("<template><p></p></template>", False),
        ],
    )
    def test_is_full_document(self, text: str, expected: bool) -> None:
        assert is_full_document(text) is expected

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("modal", "template.modal"),
            ("modal.html", "template.modal"),
            ("modal.HTML", "template.modal"),
        ],
    )
    def test_template_name(self, name: str, expected: str) -> None:
        assert template_name(name) == expected


class TestFetchFragment:
    """The fetch:fragment pulser."""

    def test_registers_async_pulser(self, registry, transport) -> None:
        handle = install_fetch_fragment(registry, base_url=BASE, transport=transport)
        assert handle.alias == FRAGMENT_ALIAS
        assert handle.execution_mode is ExecutionMode.ASYNC

    @pytest.mark.asyncio
    async def test_template_body(self, registry, transport) -> None:
        handle = install_fetch_fragment(registry, base_url=BASE, transport=transport)
        assert await handle.pulse("card") == "<div class=\"card\"></div>"

    @pytest.mark.asyncio
    async def test_body_without_template(self, registry, transport) -> None:
        handle = install_fetch_fragment(registry, base_url=BASE, transport=transport)
        assert await handle.pulse("plain") == "<p>plain</p>"

    @pytest.mark.asyncio
    async def test_not_found(self, registry, transport) -> None:
        handle = install_fetch_fragment(registry, base_url=BASE, transport=transport)
        assert await handle.pulse("nope") is None

    @pytest.mark.asyncio
    async def test_blank(self, registry, transport) -> None:
        handle = install_fetch_fragment(registry, base_url=BASE, transport=transport)
        assert await handle.pulse("blank") is None

    @pytest.mark.asyncio
    async def test_full_document_warns(self, registry, transport, logger) -> None:
        handle = install_fetch_fragment(registry, base_url=BASE, transport=transport)
        assert await handle.pulse("page") is None
        assert any("Fragment 'page'" in m for m in logger.messages("warn"))

    @pytest.mark.asyncio
    async def test_transport_error(self, registry, logger) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        handle = install_fetch_fragment(
            registry, base_url=BASE, transport=httpx.MockTransport(refuse)
        )
        assert await handle.pulse("card") is None
        errors = logger.messages("error")
        assert len(errors) == 1
        assert errors[0].startswith("Error fetching fragment 'card'")

    @pytest.mark.asyncio
    async def test_custom_path(self, registry) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, text="<template>ok</template>")

        handle = install_fetch_fragment(
            registry, base_url=BASE, path="/parts/", transport=httpx.MockTransport(handler)
        )
        assert await handle.pulse("nav") == "ok"
        assert seen == ["/parts/nav.html"]

    @pytest.mark.asyncio
    async def test_callbacks_receive_name(self, registry, transport) -> None:
        handle = install_fetch_fragment(registry, base_url=BASE, transport=transport)
        requested: list[str] = []
        handle.bind(requested.append)

        await handle.pulse("card")
        await handle.pulse("nope")

        assert requested == ["card", "nope"]

    def test_duplicate_install_rejected(self, registry, transport) -> None:
        from pulsor._errors import AlreadyExistsError

        install_fetch_fragment(registry, base_url=BASE, transport=transport)
        with pytest.raises(AlreadyExistsError):
            install_fetch_fragment(registry, base_url=BASE, transport=transport)
        install_fetch_fragment(registry, base_url=BASE, transport=transport, override=True)


class TestFetchTemplate:
    """The fetch:template pulser."""

    @pytest.mark.asyncio
    async def test_template_body(self, registry, transport) -> None:
        handle = install_fetch_template(registry, base_url=BASE, transport=transport)
        assert handle.alias == TEMPLATE_ALIAS
        assert await handle.pulse("modal") == "<dialog></dialog>"

    @pytest.mark.asyncio
    async def test_html_suffix_dropped(self, registry, transport) -> None:
        handle = install_fetch_template(registry, base_url=BASE, transport=transport)
        assert await handle.pulse("modal.html") == "<dialog></dialog>"

    @pytest.mark.asyncio
    async def test_requires_template_block(self, registry, transport, logger) -> None:
        handle = install_fetch_template(registry, base_url=BASE, transport=transport)
        assert await handle.pulse("bare") is None
        assert logger.messages("warn") == [
            "Template 'template.bare' not found or returned empty content."
        ]

    @pytest.mark.asyncio
    async def test_not_found(self, registry, transport) -> None:
        handle = install_fetch_template(registry, base_url=BASE, transport=transport)
        assert await handle.pulse("missing") is None

    @pytest.mark.asyncio
    async def test_transport_error(self, registry, logger) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        handle = install_fetch_template(
            registry, base_url=BASE, transport=httpx.MockTransport(refuse)
        )
        assert await handle.pulse("modal") is None
        assert logger.messages("error")[0].startswith("Error fetching template 'template.modal'")


class TestInstallFetchers:
    """Both fetchers from configuration."""

    @pytest.mark.asyncio
    async def test_uses_config(self, registry) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, text="<template>x</template>")

        config = PulsorConfig(
            fragment_base_url="http://assets.local",
            fragments_path="/f/",
            templates_path="/t/",
        )
        fragment, template = install_fetchers(
            registry, config, transport=httpx.MockTransport(handler)
        )

        assert await fragment.pulse("a") == "x"
        assert await template.pulse("b") == "x"
        assert seen == [
            "http://assets.local/f/a.html",
            "http://assets.local/t/template.b.html",
        ]
        assert registry.exists(FRAGMENT_ALIAS)
        assert registry.exists(TEMPLATE_ALIAS)
