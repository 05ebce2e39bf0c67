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
"""Output placement for generated images.

Handles directory creation, file naming and writing, or packaging the image
bytes as inline base64 content when no file should be written.
"""

import base64
import os
from awslabs.face_generator_mcp_server.consts import (
    OUTPUT_EXTENSION,
    OUTPUT_MIME_TYPE,
    STRIPPED_EXTENSIONS,
)
from awslabs.face_generator_mcp_server.errors import ErrorKind, OutputWriteError
from awslabs.face_generator_mcp_server.models.common import (
    FilePathArtifact,
    GeneratedArtifact,
    InlineArtifact,
)
from loguru import logger


def ensure_output_directory(directory: str) -> str:
    """Create the output directory and any missing parents.

    Calling this on an existing directory is a no-op.

    Args:
        directory: Directory path, absolute or relative to the working directory.

    Returns:
        Absolute path of the directory.

    Raises:
        OutputWriteError: If the path exists as a non-directory or cannot be created.
    """
    abs_directory = os.path.abspath(directory)
    if os.path.exists(abs_directory) and not os.path.isdir(abs_directory):
        raise OutputWriteError(
            f'Output path {abs_directory} exists and is not a directory',
            error_kind=ErrorKind.FILE_CONFLICT,
        )

    try:
        os.makedirs(abs_directory, exist_ok=True)
    except OSError as e:
        raise OutputWriteError.from_os_error('create output directory', abs_directory, e) from e

    logger.debug(f'Output directory ready: {abs_directory}')
    return abs_directory


def build_file_name(base_name: str, index: int, count: int) -> str:
    """Compute the final file name for one image of a request.

    A trailing .jpg, .jpeg or .png (any case) is stripped from base_name. A
    single-image request yields `<base>.png`; multi-image requests yield
    `<base>_<index>.png` with a 0-based index.

    Args:
        base_name: Requested file name, with or without an image extension.
        index: 0-based position of the image within the request.
        count: Total number of images in the request.

    Returns:
        File name with a .png extension.
    """
    stem = base_name
    for extension in STRIPPED_EXTENSIONS:
        if stem.lower().endswith(extension):
            stem = stem[: -len(extension)]
            break
    if count > 1:
        return f'{stem}_{index}.{OUTPUT_EXTENSION}'
    return f'{stem}.{OUTPUT_EXTENSION}'


def emit(data: bytes, directory: str, file_name: str, inline: bool = False) -> GeneratedArtifact:
    """Deliver one encoded image.

    Args:
        data: PNG-encoded image bytes.
        directory: Destination directory, created if absent (file mode only).
        file_name: Final file name within the directory.
        inline: Return the bytes as base64 content instead of writing a file.

    Returns:
        InlineArtifact when inline, otherwise FilePathArtifact with the absolute path.

    Raises:
        OutputWriteError: If the file cannot be written.
    """
    if inline:
        return InlineArtifact(
            data=base64.b64encode(data).decode('utf-8'),
            mime_type=OUTPUT_MIME_TYPE,
        )

    output_dir = ensure_output_directory(directory)
    image_path = os.path.join(output_dir, file_name)
    try:
        with open(image_path, 'wb') as file:
            file.write(data)
    except OSError as e:
        logger.error(f'Failed to save image {image_path}: {str(e)}')
        raise OutputWriteError.from_os_error('write image', image_path, e) from e

    logger.bind(bytes=len(data)).debug(f'Saved image to: {image_path}')
    return FilePathArtifact(path=image_path)
