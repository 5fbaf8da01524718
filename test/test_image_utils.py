"""Tests for reference image helpers"""

import base64
from io import BytesIO

import pytest
from PIL import Image

from xeriscape_api.utils.image_utils import (
    decode_base64_image,
    is_image_reference,
    prepare_reference_image,
)


def _image_bytes(fmt):
    buffer = BytesIO()
    Image.new("RGB", (4, 4), (200, 180, 90)).save(buffer, format=fmt)
    return buffer.getvalue()


class TestImageReference:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("https://maps/sat.png", True),
            ("http://maps/sat.png", True),
            ("data:image/jpeg;base64,abcd", True),
            ("300 Laporte Ave, Fort Collins, CO", False),
        ],
    )
    def test_is_image_reference(self, value, expected):
        assert is_image_reference(value) is expected


class TestPrepareReferenceImage:

    def test_bare_base64_png(self):
        encoded = base64.b64encode(_image_bytes("PNG")).decode()
        assert prepare_reference_image(encoded) == f"data:image/png;base64,{encoded}"

    def test_data_url_jpeg(self):
        encoded = base64.b64encode(_image_bytes("JPEG")).decode()
        result = prepare_reference_image(f"data:image/jpeg;base64,{encoded}")
        assert result.startswith("data:image/jpeg;base64,")

    def test_mislabelled_data_url_uses_actual_format(self):
        encoded = base64.b64encode(_image_bytes("PNG")).decode()
        result = prepare_reference_image(f"data:image/jpeg;base64,{encoded}")
        assert result.startswith("data:image/png;base64,")

    def test_not_an_image(self):
        with pytest.raises(ValueError):
            prepare_reference_image(base64.b64encode(b"plain text").decode())

    def test_malformed_data_url(self):
        with pytest.raises(ValueError):
            decode_base64_image("data:image/png,no-base64-marker")

    def test_decompression_bomb_is_rejected(self, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 4)
        encoded = base64.b64encode(_image_bytes("PNG")).decode()
        with pytest.raises(ValueError, match="too large"):
            prepare_reference_image(encoded)
