"""Classifier unit tests."""

import pytest
from bs4 import BeautifulSoup

from tools.linkmarker.classifier import (
    external_anchors,
    is_external,
    mark_external_links,
    resolve_hostname,
)

PAGE = "https://example.com/blog/post/"


def _anchors(html):
    return BeautifulSoup(html, "html.parser").find_all("a")


# --- is_external ---


def test_other_host_is_external():
    assert is_external("https://other.com/page", "example.com", PAGE)


def test_relative_href_is_internal():
    assert not is_external("/about", "example.com", PAGE)


def test_relative_href_without_page_url_resolves_to_page_host():
    assert not is_external("about/team", "example.com")


def test_fragment_is_internal():
    assert not is_external("#comments", "example.com", PAGE)


@pytest.mark.parametrize(
    "href",
    [
        "mailto:someone@example.com",
        "mailto:someone@other.com",
        "MAILTO:someone@other.com",
        "javascript:void(0)",
        "javascript:window.open('https://other.com')",
        "",
        None,
    ],
)
def test_excluded_hrefs_are_never_external(href):
    assert not is_external(href, "example.com", PAGE)


def test_port_is_ignored():
    assert not is_external("http://example.com:4000/feed.xml", "example.com", PAGE)


def test_scheme_is_ignored():
    assert not is_external("http://example.com/", "example.com", PAGE)


def test_protocol_relative_other_host_is_external():
    assert is_external("//cdn.other.com/lib.js", "example.com", PAGE)


def test_subdomain_is_external():
    assert is_external("https://www.example.com/", "example.com", PAGE)


def test_hostname_comparison_is_exact_by_default():
    assert is_external("https://EXAMPLE.com/", "example.com", PAGE)
    assert is_external("https://example.com./", "example.com", PAGE)


def test_hostname_normalisation_folds_case_and_trailing_dot():
    assert not is_external("https://EXAMPLE.com./", "example.com", PAGE, normalize=True)
    assert is_external("https://Other.com/", "example.com", PAGE, normalize=True)


def test_hostless_scheme_is_not_external():
    assert not is_external("tel:+15555550100", "example.com", PAGE)


def test_malformed_url_is_not_external():
    assert not is_external("http://[not-ipv6/", "example.com", PAGE)


# --- resolve_hostname ---


def test_resolve_hostname_keeps_case_and_drops_port_and_userinfo():
    assert resolve_hostname("https://me@GitHub.com:443/x", PAGE) == "GitHub.com"


def test_resolve_hostname_ipv6():
    assert resolve_hostname("http://[::1]:8080/", PAGE) == "::1"


def test_resolve_hostname_relative():
    assert resolve_hostname("../other/", PAGE) == "example.com"


# --- mark_external_links ---


def test_marks_only_external_anchors():
    anchors = _anchors(
        '<a href="https://other.com/page">A</a>'
        '<a href="/about">B</a>'
        '<a href="mailto:someone@example.com">C</a>'
        '<a href="">D</a>'
        '<a href="javascript:void(0)">E</a>'
        "<a name=\"top\">F</a>"
    )
    assert mark_external_links(anchors, "example.com", PAGE) == 1
    assert anchors[0]["target"] == "_blank"
    for a in anchors[1:]:
        assert "target" not in a.attrs


def test_internal_anchor_keeps_its_own_target():
    anchors = _anchors('<a href="/about" target="_self">About</a>')
    mark_external_links(anchors, "example.com", PAGE)
    assert anchors[0]["target"] == "_self"


def test_external_anchor_other_attributes_untouched():
    anchors = _anchors('<a class="btn" rel="me" href="https://other.com">x</a>')
    mark_external_links(anchors, "example.com", PAGE)
    assert anchors[0].attrs == {
        "class": ["btn"],
        "rel": ["me"],
        "href": "https://other.com",
        "target": "_blank",
    }


def test_marking_is_idempotent():
    anchors = _anchors(
        '<a href="https://other.com">x</a><a href="/y">y</a>'
    )
    mark_external_links(anchors, "example.com", PAGE)
    once = [dict(a.attrs) for a in anchors]
    mark_external_links(anchors, "example.com", PAGE)
    assert [dict(a.attrs) for a in anchors] == once


def test_external_anchors_accepts_plain_dicts():
    anchors = [{"href": "https://other.com"}, {"href": "/x"}, {}]
    assert list(external_anchors(anchors, "example.com")) == [anchors[0]]
    mark_external_links(anchors, "example.com")
    assert anchors[0]["target"] == "_blank"
    assert anchors[1] == {"href": "/x"}
    assert anchors[2] == {}
