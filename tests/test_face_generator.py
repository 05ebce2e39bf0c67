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
"""Tests for the face generation orchestrator."""

import base64
import os
import pytest
from awslabs.face_generator_mcp_server.errors import (
    ErrorKind,
    FaceGeneratorError,
    FetchError,
    InvalidParamsError,
    OutputWriteError,
)
from awslabs.face_generator_mcp_server.models.common import (
    FilePathArtifact,
    GenerationRequest,
    InlineArtifact,
)
from awslabs.face_generator_mcp_server.services.face_generator import (
    format_summary,
    generate_faces,
    validate_request,
)
from io import BytesIO
from loguru import logger
from PIL import Image
from unittest.mock import patch


def make_request(output_dir, **overrides):
    """Build a validated request with a fixed file name."""
    arguments = {'outputDir': output_dir, 'fileName': 'face'}
    arguments.update(overrides)
    return validate_request(arguments)


class TestValidateRequest:
    """Tests for validate_request."""

    @pytest.mark.parametrize(
        'overrides',
        [{'width': 32}, {'height': 2048}, {'count': 0}, {'count': 11}, {'shape': 'hexagon'}, {'borderRadius': 600}],
    )
    def test_invalid_params(self, overrides):
        """Test that validation failures become InvalidParamsError."""
        arguments = {'outputDir': 'out'}
        arguments.update(overrides)

        with pytest.raises(InvalidParamsError) as exc_info:
            validate_request(arguments)

        assert exc_info.value.error_kind == ErrorKind.INVALID_PARAMS
        assert 'Invalid parameters' in exc_info.value.message

    def test_missing_output_dir(self):
        """Test that a missing outputDir is named in the message."""
        with pytest.raises(InvalidParamsError, match='outputDir'):
            validate_request({})

    def test_returns_request(self):
        """Test that valid arguments produce a GenerationRequest."""
        request = validate_request({'outputDir': 'out', 'count': 3})

        assert isinstance(request, GenerationRequest)
        assert request.count == 3


class TestGenerateFaces:
    """Tests for generate_faces."""

    @pytest.mark.asyncio
    async def test_single_image(self, output_dir, face_source):
        """Test that count == 1 writes one un-suffixed file."""
        response = await generate_faces(make_request(output_dir), face_source)

        assert response.status == 'success'
        assert len(response.artifacts) == 1
        assert response.paths == [os.path.join(os.path.abspath(output_dir), 'face.png')]
        assert os.path.exists(response.paths[0])
        assert face_source.calls == 1

    @pytest.mark.asyncio
    async def test_multiple_images_are_indexed(self, output_dir, face_source):
        """Test that count == n writes n distinct, 0-indexed files."""
        response = await generate_faces(make_request(output_dir, count=4), face_source)

        names = [os.path.basename(p) for p in response.paths]
        assert names == ['face_0.png', 'face_1.png', 'face_2.png', 'face_3.png']
        assert len(set(response.paths)) == 4
        assert face_source.calls == 4

    @pytest.mark.asyncio
    async def test_square_example(self, tmp_path, face_source):
        """Test two 128x128 opaque square PNGs are written."""
        out = str(tmp_path / 'out')

        response = await generate_faces(
            make_request(out, count=2, width=128, height=128, shape='square'),
            face_source,
        )

        assert response.paths == [os.path.join(out, 'face_0.png'), os.path.join(out, 'face_1.png')]
        for path in response.paths:
            with Image.open(path) as image:
                assert image.format == 'PNG'
                assert image.size == (128, 128)
                assert image.getchannel('A').getextrema() == (255, 255)

    @pytest.mark.asyncio
    async def test_extension_is_normalized(self, output_dir, face_source):
        """Test that a .jpg file name is saved as .png."""
        response = await generate_faces(
            make_request(output_dir, fileName='portrait.JPG'), face_source
        )

        assert os.path.basename(response.paths[0]) == 'portrait.png'

    @pytest.mark.asyncio
    async def test_default_file_name(self, output_dir, face_source):
        """Test that a missing file name defaults to a timestamp."""
        request = validate_request({'outputDir': output_dir})

        response = await generate_faces(request, face_source)

        stem = os.path.basename(response.paths[0])[: -len('.png')]
        assert stem.isdigit()

    @pytest.mark.asyncio
    async def test_circle_shape_is_applied(self, output_dir, face_source):
        """Test that the circle mask reaches the written file."""
        response = await generate_faces(
            make_request(output_dir, width=200, height=100, shape='circle'), face_source
        )

        with Image.open(response.paths[0]) as image:
            alpha = image.getchannel('A')
            assert alpha.getpixel((50, 50)) == 255
            assert alpha.getpixel((150, 50)) == 0

    @pytest.mark.asyncio
    async def test_repeat_invocation_on_existing_directory(self, output_dir, face_source):
        """Test that an existing output directory is reused without error."""
        await generate_faces(make_request(output_dir, fileName='first'), face_source)
        response = await generate_faces(make_request(output_dir, fileName='second'), face_source)

        assert os.path.exists(response.paths[0])
        assert sorted(os.listdir(output_dir)) == ['first.png', 'second.png']

    @pytest.mark.asyncio
    async def test_inline_mode_writes_nothing(self, output_dir, face_source):
        """Test that inline mode returns PNG data and touches no files."""
        response = await generate_faces(
            make_request(output_dir, count=2, returnImageContent=True), face_source
        )

        assert len(response.artifacts) == 2
        assert all(isinstance(a, InlineArtifact) for a in response.artifacts)
        assert response.paths == []
        assert not os.path.exists(output_dir)

        with Image.open(BytesIO(base64.b64decode(response.artifacts[0].data))) as image:
            assert image.format == 'PNG'
            assert image.size == (256, 256)

    @pytest.mark.asyncio
    async def test_all_artifacts_share_kind(self, output_dir, face_source):
        """Test that file mode yields only file artifacts."""
        response = await generate_faces(make_request(output_dir, count=3), face_source)

        assert all(isinstance(a, FilePathArtifact) for a in response.artifacts)

    @pytest.mark.asyncio
    async def test_connection_failure_produces_no_artifacts(self, output_dir, make_face_source):
        """Test that an unreachable source fails the request."""
        source = make_face_source(error=FetchError('unreachable', reason=FetchError.NOT_FOUND))

        with pytest.raises(FetchError) as exc_info:
            await generate_faces(make_request(output_dir, count=3), source)

        assert exc_info.value.error_kind == ErrorKind.NETWORK_UNREACHABLE
        assert os.listdir(output_dir) == []
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_failure_mid_loop_aborts(self, output_dir, make_face_source):
        """Test that a later failure aborts the whole request."""
        source = make_face_source(error=FetchError('HTTP 502'), fail_on_call=2)

        with pytest.raises(FetchError) as exc_info:
            await generate_faces(make_request(output_dir, count=5), source)

        assert exc_info.value.error_kind == ErrorKind.UPSTREAM_FAILURE
        assert source.calls == 2

    @pytest.mark.asyncio
    async def test_malformed_image_is_invalid_params(self, output_dir, make_face_source):
        """Test that undecodable source bytes surface as INVALID_PARAMS."""
        source = make_face_source(image_data=b'<html>not an image</html>')

        with pytest.raises(FaceGeneratorError) as exc_info:
            await generate_faces(make_request(output_dir), source)

        assert exc_info.value.error_kind == ErrorKind.INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_output_path_conflict(self, tmp_path, face_source):
        """Test that a file in place of outputDir is a FILE_CONFLICT."""
        blocker = tmp_path / 'blocker'
        blocker.write_text('x')

        with pytest.raises(OutputWriteError) as exc_info:
            await generate_faces(make_request(str(blocker)), face_source)

        assert exc_info.value.error_kind == ErrorKind.FILE_CONFLICT
        assert face_source.calls == 0

    @pytest.mark.asyncio
    async def test_output_path_conflict_with_braces_keeps_kind(self, tmp_path, face_source):
        """Test that format braces in outputDir do not change the error kind or message."""
        blocker = tmp_path / '{x}'
        blocker.write_text('x')

        with pytest.raises(OutputWriteError) as exc_info:
            await generate_faces(make_request(str(blocker)), face_source)

        assert exc_info.value.error_kind == ErrorKind.FILE_CONFLICT
        assert '{x}' in exc_info.value.message

    @pytest.mark.asyncio
    async def test_braces_in_paths_are_written(self, tmp_path, face_source):
        """Test that directories and file names with format braces are used verbatim."""
        target = tmp_path / '{x}' / '{0}'
        messages = []
        handler_id = logger.add(messages.append, level='DEBUG', format='{message}')
        try:
            response = await generate_faces(
                make_request(str(target), fileName='{name}', count=2), face_source
            )
        finally:
            logger.remove(handler_id)

        assert [os.path.basename(path) for path in response.paths] == [
            '{name}_0.png',
            '{name}_1.png',
        ]
        assert all(os.path.exists(path) for path in response.paths)
        assert any('Successfully generated 2 face image(s)' in message for message in messages)

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self, output_dir, face_source):
        """Test that unknown exceptions are wrapped with their message preserved."""
        with patch(
            'awslabs.face_generator_mcp_server.services.face_generator.apply_shape_mask',
            side_effect=RuntimeError('decoder exploded'),
        ):
            with pytest.raises(FaceGeneratorError) as exc_info:
                await generate_faces(make_request(output_dir), face_source)

        assert exc_info.value.error_kind == ErrorKind.INTERNAL_ERROR
        assert 'decoder exploded' in exc_info.value.message


class TestFormatSummary:
    """Tests for format_summary."""

    @pytest.mark.asyncio
    async def test_lists_count_and_paths(self, output_dir, face_source):
        """Test the human-readable success text."""
        response = await generate_faces(make_request(output_dir, count=2), face_source)

        summary = format_summary(response)

        lines = summary.split('\n')
        assert lines[0] == 'Generated 2 face image(s):'
        assert lines[1:] == response.paths
