from shipyard.pipeline.naming import (
    SUBDOMAIN_MAX_LENGTH,
    derive_subdomain,
    project_slug,
    sanitize_name,
)


def test_derive_subdomain_from_name():
    assert derive_subdomain("My Cool  Site") == "my-cool-site"


def test_derive_subdomain_truncates_derived_value():
    derived = derive_subdomain("a very long project name that keeps going and going")
    assert len(derived) == SUBDOMAIN_MAX_LENGTH


def test_derive_subdomain_prefers_explicit_value():
    assert derive_subdomain("Ignored", " Custom Sub ") == "custom-sub"
    assert derive_subdomain("Fallback Name", "   ") == "fallback-name"


def test_derive_subdomain_keeps_only_hostname_characters():
    assert derive_subdomain("My_App!") == "my-app-"
    assert derive_subdomain("Ignored", "Shop@Home") == "shop-home"


def test_derive_subdomain_caps_explicit_value():
    explicit = derive_subdomain("Ignored", "an-explicit-subdomain-that-is-far-too-long")
    assert explicit == "an-explicit-subdomain-that-is-"
    assert len(explicit) == SUBDOMAIN_MAX_LENGTH


def test_sanitize_name():
    assert sanitize_name("Hello World!_v2", 50) == "hello-world--v2"
    assert sanitize_name("abcdef", 3) == "abc"


def test_project_slug_falls_back_to_sanitized_name():
    assert project_slug("demo", "Ignored", 40) == "demo"
    assert project_slug(None, "My App", 40) == "my-app"
