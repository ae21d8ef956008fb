import io

import pytest
from PIL import Image

from bakery.utils.image_processor import (
    validate_image, compress_with_preset, decode_data_url, is_data_url
)


def test_validate_image(make_image):
    assert validate_image(make_image(10, 10)).valid
    assert validate_image(make_image(10, 10, fmt='JPEG')).valid

    check = validate_image('https://example.com/a.png')
    assert not check.valid
    assert check.error == 'Invalid image format'

    check = validate_image(make_image(400, 400), max_mb=0.0001)
    assert not check.valid
    assert 'exceeds maximum' in check.error


@pytest.mark.parametrize('preset, limit', [('gallery', 1200), ('menu', 800), ('thumbnail', 600)])
def test_presets_bound_dimensions(make_image, preset, limit):
    result = compress_with_preset(make_image(2400, 1200), preset)

    assert result.data_url.startswith('data:image/webp;base64,')
    with Image.open(io.BytesIO(decode_data_url(result.data_url))) as img:
        assert img.format == 'WEBP'
        assert img.size == (limit, limit // 2)
    assert result.savings.endswith('%')


def test_small_images_are_not_enlarged(make_image):
    result = compress_with_preset(make_image(300, 200), 'gallery')
    with Image.open(io.BytesIO(decode_data_url(result.data_url))) as img:
        assert img.size == (300, 200)


def test_decode_rejects_garbage():
    assert not is_data_url('hello')
    with pytest.raises(ValueError):
        decode_data_url('data:image/png;base64,***')
