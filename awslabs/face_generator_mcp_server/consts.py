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
# Server identity
SERVER_NAME = 'face-generator'
SERVER_VERSION = '0.1.0'

# External face source
FACE_SOURCE_URL = 'https://thispersondoesnotexist.com'
DEFAULT_FETCH_TIMEOUT = 30.0  # seconds, covers connect + read
FACE_SOURCE_USER_AGENT = f'{SERVER_NAME}/{SERVER_VERSION}'

# Request defaults
DEFAULT_COUNT = 1
DEFAULT_WIDTH = 256
DEFAULT_HEIGHT = 256
DEFAULT_SHAPE = 'square'
DEFAULT_BORDER_RADIUS = 32
DEFAULT_RETURN_IMAGE_CONTENT = False

# Request bounds
MIN_COUNT = 1
MAX_COUNT = 10
MIN_IMAGE_DIMENSION = 64
MAX_IMAGE_DIMENSION = 1024
MIN_BORDER_RADIUS = 0
MAX_BORDER_RADIUS = 512

# Output
OUTPUT_FORMAT = 'PNG'
OUTPUT_EXTENSION = 'png'
OUTPUT_MIME_TYPE = 'image/png'
STRIPPED_EXTENSIONS = ('.jpg', '.jpeg', '.png')

SERVER_INSTRUCTIONS = """
# Face Generator

This MCP server generates synthetic human face images. Each image is fetched
fresh from thispersondoesnotexist.com, resized to the requested dimensions,
optionally masked to a circle or rounded rectangle, and encoded as PNG.

## Available Tools

- **generate_face**: Generate one or more face images and save them to a directory,
  or return them inline as image content.

## Usage Notes

- Always provide `outputDir`. Use an absolute path inside the user's workspace.
- `count` above 1 produces files named `<fileName>_0.png`, `<fileName>_1.png`, ...
- `shape` is one of `square`, `circle` or `rounded`; `borderRadius` only applies to `rounded`.
- Set `returnImageContent` to true to receive the images inline instead of writing files.
- Images are fetched one at a time, so larger counts take proportionally longer.
"""
