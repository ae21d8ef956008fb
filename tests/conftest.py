import base64
import io

import cloudinary.uploader
import pytest
from PIL import Image

from bakery import create_app
from bakery.extensions import db as _db
from bakery.utils import cloud_storage

ADMIN_KEY = 'test-admin-key'
ADMIN_HEADERS = {'X-Admin-Key': ADMIN_KEY}


class FakeUploader:
    """替代 cloudinary.uploader，记录上传与删除调用"""

    def __init__(self):
        self.uploads = []
        self.destroyed = []
        self.fail_upload = False
        self.fail_destroy = False

    def upload(self, data, **options):
        if self.fail_upload:
            raise RuntimeError('cloudinary is down')
        self.uploads.append((data, options))
        public_id = f"{options['folder']}/img{len(self.uploads)}"
        return {
            'secure_url': f'https://res.cloudinary.com/demo/image/upload/v1700000000/{public_id}.jpg',
            'public_id': public_id,
            'bytes': 2048,
            'width': 640,
            'height': 480,
        }

    def destroy(self, public_id, resource_type='image'):
        if self.fail_destroy:
            raise RuntimeError('cloudinary is down')
        self.destroyed.append(public_id)
        return {'result': 'ok'}


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture(autouse=True)
def uploader(monkeypatch):
    fake = FakeUploader()
    monkeypatch.setattr(cloud_storage, '_cloudinary_configured', True)
    monkeypatch.setattr(cloudinary.uploader, 'upload', fake.upload)
    monkeypatch.setattr(cloudinary.uploader, 'destroy', fake.destroy)
    return fake


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


def make_data_url(width=1600, height=900, fmt='PNG', color=(200, 80, 90)):
    """生成测试用的 Base64 图片"""
    buf = io.BytesIO()
    Image.new('RGB', (width, height), color).save(buf, format=fmt)
    encoded = base64.b64encode(buf.getvalue()).decode('ascii')
    return f'data:image/{fmt.lower()};base64,{encoded}'


@pytest.fixture
def make_image():
    return make_data_url


@pytest.fixture
def png_data_url():
    return make_data_url()
