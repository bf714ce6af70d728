"""YouTube Data API v3 runner."""

import re
from urllib.parse import urlencode

from pydantic import BaseModel, Field, ValidationError

from ..crawl import CrawlingContext
from ..errors import ConfigurationError, ExtractionError, HttpStatusError
from ..strategies import StrategyKind, YoutubeStrategy
from .base import HealthCheckRunner

API_BASE_URL = "https://youtube.googleapis.com/youtube/v3"

VIDEO_URL = re.compile(r"^https?://www\.youtube\.com/watch\?v=([^&#\s]+)\S*$")
PLAYLIST_URL = re.compile(r"^https?://www\.youtube\.com/playlist\?list=([^&#\s]+)\S*$")
CHANNEL_URL = re.compile(r"^https?://www\.youtube\.com/(?:@|c/)([^/?#\s]+)\S*$")


# Only the fields read from a 'snippet' part response
class Snippet(BaseModel):
    title: str


class Item(BaseModel):
    snippet: Snippet


class PageInfo(BaseModel):
    total_results: int = Field(alias="totalResults")


class YoutubeDataApiResponse(BaseModel):
    items: list[Item] = []
    page_info: PageInfo = Field(alias="pageInfo")


def get_video_id(url: str) -> str | None:
    match = VIDEO_URL.match(url)
    return match.group(1) if match else None


def get_playlist_id(url: str) -> str | None:
    match = PLAYLIST_URL.match(url)
    return match.group(1) if match else None


def get_channel_handle(url: str) -> str | None:
    match = CHANNEL_URL.match(url)
    return match.group(1) if match else None


def build_data_request_url(url: str, api_key: str) -> str | None:
    """API URL returning the resource's snippet, or None for other URLs."""
    params = {"key": api_key, "part": "snippet", "maxResults": 1}

    video_id = get_video_id(url)
    if video_id:
        return f"{API_BASE_URL}/videos?{urlencode({'id': video_id, **params})}"

    playlist_id = get_playlist_id(url)
    if playlist_id:
        return f"{API_BASE_URL}/playlists?{urlencode({'id': playlist_id, **params})}"

    # The API cannot look a channel up by handle, search for it instead
    # https://stackoverflow.com/a/74902789/3162406
    handle = get_channel_handle(url)
    if handle:
        return f"{API_BASE_URL}/search?{urlencode({'q': f'@{handle}', 'type': 'channel', **params})}"

    return None


class YoutubeRunner(HealthCheckRunner):
    """Reads the title of a video, playlist or channel from the Data API."""

    kind = StrategyKind.YOUTUBE
    strategy_type = YoutubeStrategy

    async def request_handler(self, context: CrawlingContext):
        request = context.request

        if self.credentials.youtube_api_key is None:
            raise ConfigurationError("Youtube data api key not found")

        data_request_url = build_data_request_url(
            request.url, self.credentials.youtube_api_key.get_secret_value()
        )
        if data_request_url is None:
            raise ConfigurationError(
                f'The url "{request.url}" is not recognizable as a valid video, playlist or channel youtube url'
            )

        response = await context.send_request(data_request_url)
        if not response.ok:
            raise HttpStatusError(request.url, response.status)

        try:
            body = YoutubeDataApiResponse.model_validate_json(response.content)
        except ValidationError as error:
            raise ExtractionError(f"Malformed api response for {request.url}: {error}") from error

        if body.page_info.total_results < 1 or not body.items:
            raise ExtractionError(f"Api response returned no results: {response.text}")

        self.success(request, body.items[0].snippet.title)
