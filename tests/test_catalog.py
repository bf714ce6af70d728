"""Tests for catalog checks."""

import json

import pytest
from pydantic import ValidationError

from resource_health.catalog import CatalogResource, check_catalog, load_catalog, title_matches
from resource_health.errors import ExtractionError
from resource_health.results import HealthCheckFailure, HealthCheckSuccess
from resource_health.strategies import HttpStrategy, PdfStrategy


class FakeHealthCheck:
    """Answers with canned results."""

    def __init__(self, results):
        self.results = results
        self.calls = []

    async def run(self, url, strategy):
        self.calls.append((url, strategy))
        return self.results[url]


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({
        "intro": {
            "url": "https://example.com/intro",
            "title": "Introduction",
            "tags": ["beginner"],
            "healthcheck": {"kind": "http", "titleSelector": "h1"},
        },
        "slides": {
            "url": "https://example.com/slides.pdf",
            "title": "slides.pdf",
            "healthcheck": {"kind": "pdf"},
        },
    }))
    return path


class TestLoadCatalog:
    def test_loads_resources(self, catalog_file):
        """Resources are loaded in file order with parsed strategies."""
        catalog = load_catalog(catalog_file)

        assert list(catalog) == ["intro", "slides"]
        assert catalog["intro"].healthcheck == HttpStrategy(title_selector="h1")
        assert catalog["slides"].healthcheck == PdfStrategy()

    def test_invalid_strategy(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({
            "bad": {"url": "https://example.com", "title": "x", "healthcheck": {"kind": "http"}},
        }))

        with pytest.raises(ValidationError):
            load_catalog(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json")

        with pytest.raises(ValueError):
            load_catalog(path)


class TestTitleMatches:
    def test_contained_title_matches(self):
        result = HealthCheckSuccess(url="https://example.com", title="Introduction | Example")
        assert title_matches("Introduction", result) is True

    def test_different_title(self):
        result = HealthCheckSuccess(url="https://example.com", title="404 Not Found")
        assert title_matches("Introduction", result) is False

    def test_failure_never_matches(self):
        result = HealthCheckFailure(url="https://example.com", error=ExtractionError("x"))
        assert title_matches("Introduction", result) is False


class TestCheckCatalog:
    async def test_checks_every_resource(self, catalog_file):
        """Every resource is checked and paired with its result."""
        catalog = load_catalog(catalog_file)
        healthcheck = FakeHealthCheck({
            "https://example.com/intro": HealthCheckSuccess(
                url="https://example.com/intro", title="Welcome"
            ),
            "https://example.com/slides.pdf": HealthCheckSuccess(
                url="https://example.com/slides.pdf", title="slides.pdf"
            ),
        })

        checks = await check_catalog(catalog, healthcheck)

        assert [check.resource_id for check in checks] == ["intro", "slides"]
        assert checks[0].ok is False
        assert checks[1].ok is True
        assert checks[0].to_dict()["title_matches"] is False
        assert len(healthcheck.calls) == 2

    async def test_empty_catalog(self):
        assert await check_catalog({}, FakeHealthCheck({})) == []


def test_resource_ignores_unknown_fields():
    resource = CatalogResource.model_validate({
        "url": "https://example.com",
        "title": "Example",
        "author": "someone",
        "healthcheck": {"kind": "youtube"},
    })
    assert resource.healthcheck.kind == "youtube"
