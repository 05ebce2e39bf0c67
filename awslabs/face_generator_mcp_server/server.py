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
"""Face Generator MCP Server implementation."""

import os
import sys
from awslabs.face_generator_mcp_server.consts import (
    DEFAULT_BORDER_RADIUS,
    DEFAULT_COUNT,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_HEIGHT,
    DEFAULT_RETURN_IMAGE_CONTENT,
    DEFAULT_SHAPE,
    DEFAULT_WIDTH,
    FACE_SOURCE_URL,
    MAX_BORDER_RADIUS,
    MAX_COUNT,
    MAX_IMAGE_DIMENSION,
    MIN_BORDER_RADIUS,
    MIN_COUNT,
    MIN_IMAGE_DIMENSION,
    SERVER_INSTRUCTIONS,
    SERVER_NAME,
)
from awslabs.face_generator_mcp_server.errors import ErrorKind, FaceGeneratorError
from awslabs.face_generator_mcp_server.models.common import InlineArtifact, Shape
from awslabs.face_generator_mcp_server.services.face_generator import (
    format_summary,
    generate_faces,
    validate_request,
)
from awslabs.face_generator_mcp_server.services.face_source import FaceSourceClient
from loguru import logger
from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ImageContent, TextContent
from pydantic import Field
from typing import List, Optional, Union


# Logging
logger.remove()
logger.add(sys.stderr, level=os.getenv('FASTMCP_LOG_LEVEL', 'WARNING'))


# Face source client, configurable through the environment
face_source_url: str = os.environ.get('FACE_SOURCE_URL', FACE_SOURCE_URL)

try:
    face_source_timeout = float(os.environ.get('FACE_SOURCE_TIMEOUT', DEFAULT_FETCH_TIMEOUT))
    face_source_client = FaceSourceClient(url=face_source_url, timeout=face_source_timeout)
    logger.bind(timeout=face_source_timeout).info(
        f'Face source client initialized for {face_source_url}'
    )
except ValueError as e:
    logger.error(f'Invalid FACE_SOURCE_TIMEOUT: {str(e)}')
    raise


mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)


@mcp.tool(name='generate_face', structured_output=False)
async def mcp_generate_face(
    ctx: Context,
    outputDir: str = Field(
        description='Directory to save the image. Created, including parents, if it does not exist.',
    ),
    fileName: Optional[str] = Field(
        default=None,
        description='Optional file name (defaults to the current timestamp). Any .jpg/.jpeg/.png extension is replaced with .png.',
    ),
    # Bounds are published in the schema only; GenerationRequest enforces them as InvalidParams.
    count: int = Field(
        default=DEFAULT_COUNT,
        json_schema_extra={'minimum': MIN_COUNT, 'maximum': MAX_COUNT},
        description=f'Number of images to generate (default: {DEFAULT_COUNT})',
    ),
    width: int = Field(
        default=DEFAULT_WIDTH,
        json_schema_extra={'minimum': MIN_IMAGE_DIMENSION, 'maximum': MAX_IMAGE_DIMENSION},
        description=f'Width of the image in pixels (default: {DEFAULT_WIDTH})',
    ),
    height: int = Field(
        default=DEFAULT_HEIGHT,
        json_schema_extra={'minimum': MIN_IMAGE_DIMENSION, 'maximum': MAX_IMAGE_DIMENSION},
        description=f'Height of the image in pixels (default: {DEFAULT_HEIGHT})',
    ),
    shape: str = Field(
        default=DEFAULT_SHAPE,
        json_schema_extra={'enum': [s.value for s in Shape]},
        description=f'Image shape (square|circle|rounded, default: {DEFAULT_SHAPE})',
    ),
    borderRadius: int = Field(
        default=DEFAULT_BORDER_RADIUS,
        json_schema_extra={'minimum': MIN_BORDER_RADIUS, 'maximum': MAX_BORDER_RADIUS},
        description=f'Border radius for rounded shape (default: {DEFAULT_BORDER_RADIUS})',
    ),
    returnImageContent: bool = Field(
        default=DEFAULT_RETURN_IMAGE_CONTENT,
        description='Return the images inline as image content instead of writing files (default: false)',
    ),
) -> List[Union[TextContent, ImageContent]]:
    """Generate and save a human face image.

    Each image is fetched fresh from thispersondoesnotexist.com, resized to
    width x height (aspect ratio is not preserved) and encoded as PNG.

    ## Shapes

    - **square**: the full rectangle, fully opaque
    - **circle**: a circle of radius min(width, height) / 2 centered at (radius, radius);
      everything outside it is transparent
    - **rounded**: the full rectangle with corners rounded by borderRadius

    ## Output

    - Files are written to outputDir. With count > 1 they are named
      `<fileName>_0.png`, `<fileName>_1.png`, ...
    - With returnImageContent=true the images are returned inline and no files
      are written.

    If any image fails, the whole call fails and no partial result is returned.

    Returns:
        A text block listing the generated file paths, or one image content
        block per image when returnImageContent is true.
    """
    logger.debug(
        f'MCP tool generate_face called: count={count}, dims: {width}x{height}, shape={shape}'
    )

    try:
        request = validate_request(
            {
                'outputDir': outputDir,
                'fileName': fileName,
                'count': count,
                'width': width,
                'height': height,
                'shape': shape,
                'borderRadius': borderRadius,
                'returnImageContent': returnImageContent,
            }
        )
        response = await generate_faces(request, face_source_client)
    except FaceGeneratorError as e:
        logger.error(f'Error in mcp_generate_face: {str(e)}')
        await ctx.error(f'Error generating face: {str(e)}')
        raise ToolError(f'Error generating face: {str(e)}') from e
    except Exception as e:
        error = FaceGeneratorError(str(e), error_kind=ErrorKind.INTERNAL_ERROR)
        logger.exception('Unexpected error in mcp_generate_face')
        await ctx.error(f'Error generating face: {str(error)}')
        raise ToolError(f'Error generating face: {str(error)}') from e

    if request.return_image_content:
        return [
            ImageContent(type='image', data=artifact.data, mimeType=artifact.mime_type)
            for artifact in response.artifacts
            if isinstance(artifact, InlineArtifact)
        ]
    return [TextContent(type='text', text=format_summary(response))]


def main():
    """Run the MCP server over stdio."""
    logger.info('Starting face-generator MCP server')
    mcp.run()


if __name__ == '__main__':
    main()
