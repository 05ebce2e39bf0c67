# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Client for the external synthetic face source.

Each call performs one GET against the configured endpoint and returns the
raw encoded image bytes. There is no retry and no caching: every image is a
fresh network round trip.
"""

import httpx
from awslabs.face_generator_mcp_server.consts import (
    DEFAULT_FETCH_TIMEOUT,
    FACE_SOURCE_URL,
    FACE_SOURCE_USER_AGENT,
)
from awslabs.face_generator_mcp_server.errors import FetchError
from loguru import logger
from typing import Optional


class FaceSourceClient:
    """HTTP client returning a new synthetic face image per fetch."""

    def __init__(
        self,
        url: str = FACE_SOURCE_URL,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize FaceSourceClient.

        Args:
            url: Endpoint that returns a fresh image on every GET.
            timeout: Upper bound in seconds for the whole request.
            transport: Optional httpx transport, used to stub the network in tests.
        """
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def fetch(self) -> bytes:
        """Fetch one raw image.

        Returns:
            Encoded image bytes exactly as served by the source.

        Raises:
            FetchError: reason 'not-found' when the host cannot be reached,
                'other' on timeouts, non-2xx statuses or an empty body.
        """
        logger.debug(f'Fetching face image from {self.url}')

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={'User-Agent': FACE_SOURCE_USER_AGENT},
                transport=self._transport,
            ) as client:
                response = await client.get(self.url)
                response.raise_for_status()
        except httpx.ConnectError as e:
            logger.bind(url=self.url).error(f'Face source unreachable: {str(e)}')
            raise FetchError(
                f'Unable to reach face source {self.url}: {str(e)}',
                reason=FetchError.NOT_FOUND,
            ) from e
        except httpx.TimeoutException as e:
            logger.bind(url=self.url).error(f'Face source timed out after {self.timeout}s')
            raise FetchError(
                f'Timed out fetching face image from {self.url} after {self.timeout}s'
            ) from e
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.bind(url=self.url, status_code=status_code).error(
                f'Face source returned HTTP {status_code}'
            )
            raise FetchError(
                f'Face source {self.url} returned HTTP {status_code}'
            ) from e
        except httpx.HTTPError as e:
            logger.bind(url=self.url).error(f'Face source request failed: {str(e)}')
            raise FetchError(
                f'Failed to fetch face image from {self.url}: {str(e)}'
            ) from e

        if not response.content:
            raise FetchError(f'Face source {self.url} returned an empty body')

        logger.bind(content_type=response.headers.get('content-type')).debug(
            f'Received {len(response.content)} bytes from face source'
        )
        return response.content
