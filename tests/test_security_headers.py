"""Tests for the Content-Security-Policy builder."""

from snaplink.middleware.security import build_content_security_policy


def test_self_only():
    csp = build_content_security_policy([], [])

    assert "default-src 'self'" in csp
    assert "script-src 'self'" in csp
    assert "connect-src 'self'" in csp
    assert "frame-ancestors 'none'" in csp


def test_allowlisted_origins():
    csp = build_content_security_policy(
        ["https://fonts.googleapis.com"],
        ["https://fonts.gstatic.com"],
        "https://proj.supabase.co",
    )
    directives = dict(part.split(" ", 1) for part in csp.split("; "))

    assert directives["style-src"] == "'self' 'unsafe-inline' https://fonts.googleapis.com"
    assert directives["font-src"] == "'self' https://fonts.gstatic.com"
    assert directives["connect-src"] == "'self' https://proj.supabase.co"
    assert "supabase" not in directives["script-src"]
