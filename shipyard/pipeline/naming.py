"""Slug and resource-name helpers shared by intake, provisioning and deployment."""

import re

SUBDOMAIN_MAX_LENGTH = 30
REPO_SLUG_MAX_LENGTH = 40
VERCEL_NAME_MAX_LENGTH = 50


def derive_subdomain(name: str, subdomain: str | None = None) -> str:
    """Normalize a requested subdomain, or derive one from the project name.

    Either way the result only holds ``[a-z0-9-]`` and is at most
    ``SUBDOMAIN_MAX_LENGTH`` characters long.
    """
    source = subdomain if subdomain and subdomain.strip() else name
    return sanitize_name(re.sub(r"\s+", "-", source.strip()), SUBDOMAIN_MAX_LENGTH)


def sanitize_name(name: str, max_length: int) -> str:
    """Lowercase and replace anything outside ``[a-z0-9-]`` with hyphens."""
    return re.sub(r"[^a-z0-9-]", "-", name.lower())[:max_length]


def project_slug(subdomain: str | None, name: str, max_length: int) -> str:
    return subdomain or sanitize_name(name, max_length)
