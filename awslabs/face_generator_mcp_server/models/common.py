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
"""Models and enums shared by the face generation pipeline."""

import time
from awslabs.face_generator_mcp_server.consts import (
    DEFAULT_BORDER_RADIUS,
    DEFAULT_COUNT,
    DEFAULT_HEIGHT,
    DEFAULT_RETURN_IMAGE_CONTENT,
    DEFAULT_WIDTH,
    MAX_BORDER_RADIUS,
    MAX_COUNT,
    MAX_IMAGE_DIMENSION,
    MIN_BORDER_RADIUS,
    MIN_COUNT,
    MIN_IMAGE_DIMENSION,
    OUTPUT_EXTENSION,
    OUTPUT_MIME_TYPE,
)
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional, Union


class Shape(str, Enum):
    """Supported output shapes.

    Attributes:
        SQUARE: No mask, the full rectangle stays opaque.
        CIRCLE: Circle of radius min(width, height) / 2 anchored at (radius, radius).
        ROUNDED: Full-size rectangle with rounded corners.
    """
    SQUARE = 'square'
    CIRCLE = 'circle'
    ROUNDED = 'rounded'


def default_file_name() -> str:
    """Return a time-based file name, evaluated per request."""
    return f'{int(time.time() * 1000)}.{OUTPUT_EXTENSION}'


class GenerationRequest(BaseModel):
    """Parameters for one generate_face invocation.

    Fields accept both their snake_case names and the camelCase names used on
    the wire (outputDir, fileName, borderRadius, returnImageContent).

    Attributes:
        output_dir: Directory where images are written.
        file_name: Base file name; any .jpg/.jpeg/.png suffix is replaced with .png.
        count: Number of images to generate (1-10).
        width: Output width in pixels (64-1024).
        height: Output height in pixels (64-1024).
        shape: Output shape mask.
        border_radius: Corner radius for the rounded shape (0-512).
        return_image_content: Return images inline instead of writing files.
    """
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    output_dir: str = Field(..., min_length=1, alias='outputDir')
    file_name: str = Field(default_factory=default_file_name, alias='fileName')
    count: int = Field(default=DEFAULT_COUNT, ge=MIN_COUNT, le=MAX_COUNT)
    width: int = Field(default=DEFAULT_WIDTH, ge=MIN_IMAGE_DIMENSION, le=MAX_IMAGE_DIMENSION)
    height: int = Field(default=DEFAULT_HEIGHT, ge=MIN_IMAGE_DIMENSION, le=MAX_IMAGE_DIMENSION)
    shape: Shape = Shape.SQUARE
    border_radius: int = Field(
        default=DEFAULT_BORDER_RADIUS,
        ge=MIN_BORDER_RADIUS,
        le=MAX_BORDER_RADIUS,
        alias='borderRadius',
    )
    return_image_content: bool = Field(
        default=DEFAULT_RETURN_IMAGE_CONTENT, alias='returnImageContent'
    )

    @field_validator('output_dir')
    @classmethod
    def validate_output_dir(cls, v: str) -> str:
        """Reject blank output directories."""
        if not v.strip():
            raise ValueError('outputDir must not be blank')
        return v

    @field_validator('file_name', mode='before')
    @classmethod
    def default_blank_file_name(cls, v: Optional[str]) -> str:
        """Replace a null or blank file name with the time-based default."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return default_file_name()
        return v


class FilePathArtifact(BaseModel):
    """A generated image written to disk."""
    model_config = ConfigDict(frozen=True)

    kind: Literal['file'] = 'file'
    path: str


class InlineArtifact(BaseModel):
    """A generated image returned inline as base64 text."""
    model_config = ConfigDict(frozen=True)

    kind: Literal['inline'] = 'inline'
    data: str
    mime_type: str = OUTPUT_MIME_TYPE


GeneratedArtifact = Union[FilePathArtifact, InlineArtifact]


class FaceGenerationResponse(BaseModel):
    """Result of a successful generate_faces call.

    Attributes:
        status: Always 'success'; failures are raised, never returned.
        message: Short summary of the result.
        artifacts: One artifact per generated image, all of the same kind.
    """
    status: str = 'success'
    message: str
    artifacts: List[GeneratedArtifact] = Field(default_factory=list)

    @property
    def paths(self) -> List[str]:
        """File paths of written images, empty in inline mode."""
        return [a.path for a in self.artifacts if isinstance(a, FilePathArtifact)]
