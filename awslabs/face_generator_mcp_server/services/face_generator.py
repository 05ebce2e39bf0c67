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
"""Face generation orchestrator.

Drives the fetch -> mask -> emit loop for one request. Iterations run strictly
in sequence, and the first failure aborts the whole request without returning
partial output.
"""

from awslabs.face_generator_mcp_server.errors import (
    ErrorKind,
    FaceGeneratorError,
    InvalidParamsError,
)
from awslabs.face_generator_mcp_server.models.common import (
    FaceGenerationResponse,
    GeneratedArtifact,
    GenerationRequest,
)
from awslabs.face_generator_mcp_server.services.face_source import FaceSourceClient
from awslabs.face_generator_mcp_server.services.output_writer import (
    build_file_name,
    emit,
    ensure_output_directory,
)
from awslabs.face_generator_mcp_server.utils.image_utils import apply_shape_mask
from loguru import logger
from pydantic import ValidationError
from typing import Any, Dict, List


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = '.'.join(str(loc) for loc in detail['loc']) or 'request'
        parts.append(f"{location}: {detail['msg']}")
    return '; '.join(parts)


def validate_request(arguments: Dict[str, Any]) -> GenerationRequest:
    """Build a GenerationRequest from raw tool arguments.

    Missing fields take their documented defaults; the default file name is
    computed here, at request time.

    Args:
        arguments: Parameter object as delivered by the tool invocation.

    Returns:
        The validated request.

    Raises:
        InvalidParamsError: If any parameter is missing, malformed or out of bounds.
    """
    try:
        return GenerationRequest.model_validate(arguments)
    except ValidationError as e:
        message = f'Invalid parameters: {_describe_validation_error(e)}'
        logger.error(message)
        raise InvalidParamsError(message) from e


def format_summary(response: FaceGenerationResponse) -> str:
    """Render the human-readable success text listing the generated files."""
    lines = [f'Generated {len(response.artifacts)} face image(s):']
    lines.extend(response.paths)
    return '\n'.join(lines)


async def generate_faces(
    request: GenerationRequest,
    client: FaceSourceClient,
) -> FaceGenerationResponse:
    """Generate request.count face images.

    Each iteration fetches a fresh image, resizes and masks it, then writes it
    to request.output_dir (or packages it inline when
    request.return_image_content is set). Inline mode touches no files and
    does not create the output directory.

    Args:
        request: Validated generation request.
        client: Source of raw face images.

    Returns:
        FaceGenerationResponse with one artifact per image.

    Raises:
        FaceGeneratorError: On any failure; unexpected errors are wrapped as
            ErrorKind.INTERNAL_ERROR with the original message preserved.
    """
    logger.bind(
        dimensions=f'{request.width}x{request.height}',
        shape=request.shape.value,
        border_radius=request.border_radius,
        inline=request.return_image_content,
        output_dir=request.output_dir,
    ).debug(f'Generating {request.count} face image(s)')

    try:
        output_dir = request.output_dir
        if not request.return_image_content:
            output_dir = ensure_output_directory(request.output_dir)

        artifacts: List[GeneratedArtifact] = []
        for i in range(request.count):
            raw_image = await client.fetch()
            image_data = apply_shape_mask(
                raw_image,
                width=request.width,
                height=request.height,
                shape=request.shape,
                border_radius=request.border_radius,
            )
            artifact = emit(
                image_data,
                directory=output_dir,
                file_name=build_file_name(request.file_name, i, request.count),
                inline=request.return_image_content,
            )
            artifacts.append(artifact)
            logger.debug(f'Generated image {i + 1}/{request.count}')

    except FaceGeneratorError as e:
        logger.bind(error_kind=e.error_kind.value, reason=e.reason).error(
            f'Face generation failed: {e.message}'
        )
        raise
    except Exception as e:
        logger.exception('Unexpected error in generate_faces')
        raise FaceGeneratorError(
            f'Unexpected error: {str(e)}',
            error_kind=ErrorKind.INTERNAL_ERROR,
        ) from e

    logger.bind(images_count=len(artifacts), inline=request.return_image_content).info(
        f'Successfully generated {len(artifacts)} face image(s)'
    )
    return FaceGenerationResponse(
        message=f'Generated {len(artifacts)} face image(s)',
        artifacts=artifacts,
    )
