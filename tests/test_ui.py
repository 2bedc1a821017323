"""
Tests for the comparison page - language selection and rendering.
"""

import pytest

from app.routers.ui import TRANSLATIONS, get_compare_html, resolve_language


class TestResolveLanguage:
    """Tests for resolve_language."""

    @pytest.mark.parametrize(
        "lang, accept_language, expected",
        [
            (None, None, "pt"),
            ("en", None, "en"),
            ("EN", None, "en"),
            ("pt-BR", "en-US", "pt"),
            ("fr", "en-US,en;q=0.9", "en"),
            (None, "fr-FR,pt;q=0.8,en;q=0.5", "pt"),
            (None, "de-DE,fr;q=0.8", "pt"),
            ("", "en", "en"),
        ],
    )
    def test_resolution(self, lang, accept_language, expected):
        assert resolve_language(lang, accept_language) == expected

    def test_translations_share_keys(self):
        assert set(TRANSLATIONS["en"]) == set(TRANSLATIONS["pt"])


class TestComparePage:
    """Tests for GET /."""

    def test_defaults_to_portuguese(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert '<html lang="pt">' in response.text
        assert "Compare respostas de IA lado a lado" in response.text

    def test_query_parameter_selects_english(self, client):
        response = client.get("/", params={"lang": "en"})

        assert '<html lang="en">' in response.text
        assert "Compare AI answers side by side" in response.text

    def test_accept_language_selects_english(self, client):
        response = client.get("/", headers={"Accept-Language": "en-US,en;q=0.9"})

        assert '<html lang="en">' in response.text

    def test_page_posts_to_query_endpoint(self):
        html = get_compare_html("en")

        assert "/models/query" in html
        assert 'maxlength="800"' in html
        for model in ("openai", "gemini", "claude"):
            assert f'"{model}"' in html
