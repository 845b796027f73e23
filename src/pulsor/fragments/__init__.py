"""Fragment loading — HTML fetchers exposed as async pulsers."""

from pulsor.fragments.loader import (
    FRAGMENT_ALIAS,
    TEMPLATE_ALIAS,
    extract_template,
    install_fetch_fragment,
    install_fetch_template,
    install_fetchers,
    is_full_document,
    template_name,
)

__all__ = [
    "FRAGMENT_ALIAS",
    "TEMPLATE_ALIAS",
    "extract_template",
    "install_fetch_fragment",
    "install_fetch_template",
    "install_fetchers",
    "is_full_document",
    "template_name",
]
