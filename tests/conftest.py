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
"""Shared fixtures for the face-generator-mcp-server tests."""

import pytest
from io import BytesIO
from PIL import Image
from unittest.mock import AsyncMock, MagicMock


def create_test_image_bytes(width=300, height=200, format='JPEG', color=(200, 120, 80)):
    """Create an encoded test image, shaped like a face-source response."""
    img = Image.new('RGB', (width, height), color=color)
    buffer = BytesIO()
    img.save(buffer, format=format)
    return buffer.getvalue()


class StubFaceSource:
    """Face source returning canned bytes and counting fetches."""

    def __init__(self, image_data=None, error=None, fail_on_call=None):
        """Initialize the stub.

        Args:
            image_data: Bytes returned by fetch; a JPEG test image by default.
            error: Exception raised by fetch.
            fail_on_call: 1-based call number on which to raise; every call if None.
        """
        self.image_data = image_data if image_data is not None else create_test_image_bytes()
        self.error = error
        self.fail_on_call = fail_on_call
        self.calls = 0

    async def fetch(self):
        """Return the canned image or raise the configured error."""
        self.calls += 1
        if self.error is not None and self.fail_on_call in (None, self.calls):
            raise self.error
        return self.image_data


@pytest.fixture
def sample_image_bytes():
    """Encoded JPEG image used as a raw face-source response."""
    return create_test_image_bytes()


@pytest.fixture
def face_source():
    """Stub face source that always succeeds."""
    return StubFaceSource()


@pytest.fixture
def mock_context():
    """Mock MCP context with async logging methods."""
    context = MagicMock()
    context.error = AsyncMock()
    context.info = AsyncMock()
    return context


@pytest.fixture
def output_dir(tmp_path):
    """Output directory path that does not exist yet."""
    return str(tmp_path / 'faces' / 'nested')


@pytest.fixture
def make_face_source():
    """Factory for stub face sources with custom data or failures."""
    return StubFaceSource


@pytest.fixture
def make_image_bytes():
    """Factory for encoded test images."""
    return create_test_image_bytes
