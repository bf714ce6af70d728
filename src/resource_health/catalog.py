"""Checking every resource of a catalog export."""

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter

from .healthcheck import HealthCheck
from .results import HealthCheckResult
from .strategies import Strategy


class CatalogResource(BaseModel):
    """A cataloged resource with the strategy used to check it."""

    model_config = ConfigDict(extra="ignore")

    url: str
    title: str
    healthcheck: Strategy


Catalog = dict[str, CatalogResource]

_catalog_adapter: TypeAdapter[Catalog] = TypeAdapter(Catalog)


@dataclass
class CatalogCheck:
    resource_id: str
    resource: CatalogResource
    result: HealthCheckResult

    @property
    def ok(self) -> bool:
        return title_matches(self.resource.title, self.result)

    def to_dict(self) -> dict:
        return {
            "id": self.resource_id,
            "expected_title": self.resource.title,
            "title_matches": self.ok,
            **self.result.to_dict(),
        }


def load_catalog(path: str | Path) -> Catalog:
    """Read a JSON object mapping resource ids to resources."""
    with open(path, encoding="utf-8") as f:
        return _catalog_adapter.validate_python(json.load(f))


def title_matches(expected: str, result: HealthCheckResult) -> bool:
    """True when the check succeeded and found the declared title."""
    return result.success and expected in result.title


async def check_catalog(catalog: Catalog, healthcheck: HealthCheck) -> list[CatalogCheck]:
    """Check every resource concurrently, in catalog order."""
    results = await asyncio.gather(
        *(healthcheck.run(resource.url, resource.healthcheck) for resource in catalog.values())
    )
    return [
        CatalogCheck(resource_id=resource_id, resource=resource, result=result)
        for (resource_id, resource), result in zip(catalog.items(), results)
    ]
