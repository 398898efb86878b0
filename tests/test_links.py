"""Tests for policy-link filtering and replay-URL helpers."""

from __future__ import annotations

import pytest

from tosarchive.scraper.links import (
    clean_label,
    document_key,
    filter_links,
    is_relevant_label,
    is_self_link,
    original_url,
    resolve_href,
    site_root,
)
from tosarchive.scraper.models import RawLink, ResolvedLink

_SNAPSHOT = "http://archive.example/web/20180101000000/https://site.com/terms"


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------

class TestOriginalUrl:
    def test_strips_absolute_replay_prefix(self) -> None:
        assert original_url(_SNAPSHOT) == "https://site.com/terms"

    def test_strips_relative_replay_path(self) -> None:
        assert original_url("/web/20180101000000/https://site.com/privacy") == "https://site.com/privacy"

    def test_strips_modifier(self) -> None:
        url = "https://web.archive.org/web/20180101000000id_/https://site.com/terms"
        assert original_url(url) == "https://site.com/terms"

    def test_peels_nested_wrappers(self) -> None:
        url = (
            "https://web.archive.org/web/20180101000000/"
            "https://web.archive.org/web/20170101000000/https://site.com/terms"
        )
        assert original_url(url) == "https://site.com/terms"

    def test_repairs_collapsed_scheme(self) -> None:
        url = "https://web.archive.org/web/20180101000000/https:/site.com/terms"
        assert original_url(url) == "https://site.com/terms"

    def test_plain_url_unchanged(self) -> None:
        assert original_url("https://site.com/web-terms") == "https://site.com/web-terms"


class TestSiteRoot:
    def test_empties_path_query_and_fragment(self) -> None:
        assert site_root("https://site.com/a/b?x=1#y") == "https://site.com"


class TestResolveHref:
    def test_parent_relative_is_rooted_at_original_site(self) -> None:
        assert resolve_href("../cookies", _SNAPSHOT) == "https://site.com/cookies"

    def test_bare_relative_ignores_directory(self) -> None:
        snapshot = "http://archive.example/web/20180101000000/https://site.com/legal/terms"
        assert resolve_href("cookies", snapshot) == "https://site.com/cookies"

    def test_root_relative(self) -> None:
        assert resolve_href("/cookies", _SNAPSHOT) == "https://site.com/cookies"

    def test_archive_relative_is_rooted_at_archive_host(self) -> None:
        href = "/web/20180101000000/https://site.com/privacy"
        assert resolve_href(href, _SNAPSHOT) == "http://archive.example" + href

    def test_absolute_keeps_host_and_drops_query_and_fragment(self) -> None:
        assert resolve_href("https://other.com/p?lang=en#top", _SNAPSHOT) == "https://other.com/p"

    def test_protocol_relative_takes_site_scheme(self) -> None:
        assert resolve_href("//cdn.site.com/legal", _SNAPSHOT) == "https://cdn.site.com/legal"

    @pytest.mark.parametrize("href", ["", "#section2", "?print=1", "mailto:legal@site.com", "javascript:void(0)"])
    def test_unusable_hrefs_give_none(self, href: str) -> None:
        assert resolve_href(href, _SNAPSHOT) is None


class TestIsSelfLink:
    def test_same_replay_url(self) -> None:
        assert is_self_link(_SNAPSHOT, _SNAPSHOT)

    def test_original_form_of_same_document(self) -> None:
        assert is_self_link("https://site.com/terms/", _SNAPSHOT)

    def test_other_document(self) -> None:
        assert not is_self_link("https://site.com/privacy", _SNAPSHOT)

    def test_scheme_and_www_variants_are_the_same_document(self) -> None:
        assert is_self_link("http://www.site.com/terms", _SNAPSHOT)


class TestDocumentKey:
    def test_ignores_scheme_www_and_trailing_slash(self) -> None:
        assert document_key("http://www.Site.com/terms/") == "site.com/terms"

    def test_unwraps_replay_url(self) -> None:
        assert document_key(_SNAPSHOT) == "site.com/terms"

    def test_paths_are_distinct(self) -> None:
        assert document_key("https://site.com/eu/privacy") != document_key("https://site.com/legal/privacy")


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

class TestIsRelevantLabel:
    @pytest.mark.parametrize(
        "label",
        ["Privacy Policy", "Terms of Use", "Community Guidelines", "Cookie Notice",
         "Safety Tips", "click here", "Our Policies", "Complaints Procedure"],
    )
    def test_kept(self, label: str) -> None:
        assert is_relevant_label(label)

    @pytest.mark.parametrize(
        "label",
        ["Printable Terms", "Plain Text version of these Terms", "Contact support",
         "Support policy", "Contact Us about our Policy", "Home", "Careers"],
    )
    def test_dropped(self, label: str) -> None:
        assert not is_relevant_label(label)


class TestCleanLabel:
    def test_trims_and_collapses_whitespace(self) -> None:
        assert clean_label("  Privacy \n Policy ", "https://site.com/privacy") == "Privacy Policy"

    def test_here_label_uses_file_name(self) -> None:
        assert clean_label("click here", "https://site.com/legal/privacy-policy.html") == "privacy-policy"

    def test_here_label_on_replay_url(self) -> None:
        url = "http://archive.example/web/20180101000000/https://site.com/cookies/"
        assert clean_label("here", url) == "cookies"

    def test_word_containing_here_is_not_replaced(self) -> None:
        assert clean_label("Where our Terms apply", "https://site.com/x") == "Where our Terms apply"


# ---------------------------------------------------------------------------
# filter_links
# ---------------------------------------------------------------------------

class TestFilterLinks:
    def test_fragment_variants_collapse(self) -> None:
        links = [
            RawLink("/cookies#section2", "Cookie Policy"),
            RawLink("/cookies", "Cookie Policy"),
        ]
        assert filter_links(links, _SNAPSHOT) == [
            ResolvedLink("https://site.com/cookies", "Cookie Policy")
        ]

    def test_excluded_and_irrelevant_labels_dropped(self) -> None:
        links = [
            RawLink("/terms.txt", "Printable Terms"),
            RawLink("/help", "Contact support"),
            RawLink("/jobs", "Careers"),
            RawLink("/privacy", "Privacy Policy"),
        ]
        assert [l.display_label for l in filter_links(links, _SNAPSHOT)] == ["Privacy Policy"]

    def test_self_links_dropped(self) -> None:
        links = [
            RawLink("#section-3", "Terms section 3"),
            RawLink("/web/20180101000000/https://site.com/terms#s2", "Terms"),
            RawLink("https://site.com/terms?lang=fr", "Terms (French)"),
        ]
        assert filter_links(links, _SNAPSHOT) == []

    def test_here_link_gets_target_name(self) -> None:
        links = [RawLink("/cookies", "here")]
        assert filter_links(links, _SNAPSHOT) == [
            ResolvedLink("https://site.com/cookies", "cookies")
        ]

    def test_order_of_first_appearance(self) -> None:
        links = [
            RawLink("/b", "B Policy"),
            RawLink("/a", "A Policy"),
            RawLink("/b#x", "B Policy again"),
        ]
        assert [l.absolute_url for l in filter_links(links, _SNAPSHOT)] == [
            "https://site.com/b",
            "https://site.com/a",
        ]

    def test_archive_relative_links_stay_on_archive(self) -> None:
        links = [RawLink("/web/20180101000000/https://site.com/privacy", "Privacy Policy")]
        resolved = filter_links(links, _SNAPSHOT)
        assert resolved[0].absolute_url.startswith("http://archive.example/web/")
        assert original_url(resolved[0].absolute_url) == "https://site.com/privacy"
