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
"""Image utilities for resizing, shape masking and PNG encoding."""

from awslabs.face_generator_mcp_server.consts import (
    MAX_BORDER_RADIUS,
    MIN_BORDER_RADIUS,
    OUTPUT_FORMAT,
)
from awslabs.face_generator_mcp_server.errors import ImageProcessingError
from awslabs.face_generator_mcp_server.models.common import Shape
from io import BytesIO
from loguru import logger
from PIL import Image, ImageChops, ImageDraw, UnidentifiedImageError


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ImageProcessingError(f'Image dimensions must be positive: {width}x{height}')


def create_full_mask(width: int, height: int) -> Image.Image:
    """Create a fully opaque mask covering the entire image.

    Args:
        width: Width of the mask in pixels.
        height: Height of the mask in pixels.

    Returns:
        Grayscale ('L') mask with every pixel set to 255.

    Raises:
        ImageProcessingError: If dimensions are invalid.
    """
    _check_dimensions(width, height)
    return Image.new('L', (width, height), 255)


def create_circle_mask(width: int, height: int) -> Image.Image:
    """Create a circular mask of radius min(width, height) / 2.

    The circle is centered at (radius, radius), so for non-square images it
    hugs the top-left corner rather than the image center.

    Args:
        width: Width of the mask in pixels.
        height: Height of the mask in pixels.

    Returns:
        Grayscale ('L') mask, 255 inside the circle and 0 outside.

    Raises:
        ImageProcessingError: If dimensions are invalid.
    """
    _check_dimensions(width, height)
    radius = min(width, height) / 2

    mask = Image.new('L', (width, height), 0)
    draw = ImageDraw.Draw(mask)
    # Pixel bounding box is inclusive, so the far edge sits one pixel in
    draw.ellipse([0, 0, 2 * radius - 1, 2 * radius - 1], fill=255)
    return mask


def create_rounded_mask(width: int, height: int, border_radius: int) -> Image.Image:
    """Create a full-size rounded rectangle mask.

    Args:
        width: Width of the mask in pixels.
        height: Height of the mask in pixels.
        border_radius: Corner radius in pixels, clamped to [0, 512].

    Returns:
        Grayscale ('L') mask, 255 inside the rounded rectangle and 0 outside.

    Raises:
        ImageProcessingError: If dimensions are invalid.
    """
    _check_dimensions(width, height)
    radius = max(MIN_BORDER_RADIUS, min(border_radius, MAX_BORDER_RADIUS))
    if radius == 0:
        return create_full_mask(width, height)

    mask = Image.new('L', (width, height), 0)
    draw = ImageDraw.Draw(mask)
    draw.rounded_rectangle([0, 0, width - 1, height - 1], radius=radius, fill=255)
    return mask


def create_shape_mask(width: int, height: int, shape: Shape, border_radius: int = 0) -> Image.Image:
    """Build the alpha mask for a shape.

    Args:
        width: Width of the mask in pixels.
        height: Height of the mask in pixels.
        shape: Requested output shape.
        border_radius: Corner radius, only used for Shape.ROUNDED.

    Returns:
        Grayscale ('L') mask sized width x height.
    """
    if shape == Shape.CIRCLE:
        return create_circle_mask(width, height)
    if shape == Shape.ROUNDED:
        return create_rounded_mask(width, height, border_radius)
    return create_full_mask(width, height)


def apply_shape_mask(
    image_data: bytes,
    width: int,
    height: int,
    shape: Shape,
    border_radius: int = 0,
) -> bytes:
    """Decode, resize, mask and re-encode an image as PNG.

    The image is resized to exactly width x height without preserving the
    aspect ratio. The mask is composited so that the output alpha is the
    minimum of the source alpha and the mask alpha: masked-out pixels become
    fully transparent and masked-in pixels keep their original color.

    Args:
        image_data: Encoded source image bytes (JPEG, PNG, ...).
        width: Output width in pixels.
        height: Output height in pixels.
        shape: Output shape mask.
        border_radius: Corner radius for Shape.ROUNDED.

    Returns:
        PNG-encoded RGBA image bytes.

    Raises:
        ImageProcessingError: If the bytes cannot be decoded or the dimensions are invalid.
    """
    _check_dimensions(width, height)
    if not image_data:
        raise ImageProcessingError('Image data is empty')

    try:
        with Image.open(BytesIO(image_data)) as source:
            source_format = source.format
            image = source.convert('RGBA')
    except UnidentifiedImageError as e:
        raise ImageProcessingError(f'Unsupported or corrupt image data: {str(e)}') from e
    except (OSError, ValueError) as e:
        raise ImageProcessingError(f'Failed to decode image data: {str(e)}') from e

    logger.bind(target=f'{width}x{height}', shape=shape.value).debug(
        f'Decoded {source_format} image {image.width}x{image.height}'
    )

    image = image.resize((width, height), Image.Resampling.LANCZOS)

    mask = create_shape_mask(width, height, shape, border_radius)
    image.putalpha(ImageChops.darker(image.getchannel('A'), mask))

    buffer = BytesIO()
    image.save(buffer, format=OUTPUT_FORMAT)
    return buffer.getvalue()
