"""Udemy affiliate API runner."""

import re

from pydantic import BaseModel, ValidationError

from ..crawl import CrawlingContext
from ..errors import ConfigurationError, ExtractionError, HttpStatusError
from ..strategies import StrategyKind, UdemyStrategy
from .base import HealthCheckRunner

API_BASE_URL = "https://www.udemy.com/api-2.0/courses"

COURSE_URL = re.compile(r"^https?://www\.udemy\.com/course/(\S+)$")


# https://www.udemy.com/developers/affiliate/models/course/
class UdemyCourse(BaseModel):
    title: str


def get_course_slug(url: str) -> str | None:
    match = COURSE_URL.match(url)
    return match.group(1).strip("/") if match else None


def build_course_url(url: str) -> str | None:
    slug = get_course_slug(url)
    if not slug:
        return None
    return f"{API_BASE_URL}/{slug}?fields[course]=title"


class UdemyRunner(HealthCheckRunner):
    """Reads a course title from the affiliate API with basic auth."""

    kind = StrategyKind.UDEMY
    strategy_type = UdemyStrategy

    def _get_auth(self) -> tuple[str, str]:
        client_id = self.credentials.udemy_affiliate_api_client_id
        client_secret = self.credentials.udemy_affiliate_api_client_secret

        missing = []
        if client_id is None:
            missing.append("Udemy affiliate api client id was not found")
        if client_secret is None:
            missing.append("Udemy affiliate api client secret was not found")
        if missing:
            raise ConfigurationError("; ".join(missing))

        return client_id.get_secret_value(), client_secret.get_secret_value()

    async def request_handler(self, context: CrawlingContext):
        request = context.request
        auth = self._get_auth()

        course_url = build_course_url(request.url)
        if course_url is None:
            raise ConfigurationError(
                f"The resource url {request.url} is not recognizable as a valid Udemy course url"
            )

        response = await context.send_request(course_url, auth=auth)
        if not response.ok:
            raise HttpStatusError(request.url, response.status)

        try:
            course = UdemyCourse.model_validate_json(response.content)
        except ValidationError as error:
            raise ExtractionError(f"Malformed api response for {request.url}: {error}") from error

        self.success(request, course.title)
