import os
from dotenv import load_dotenv

# 加载 .env 环境变量
load_dotenv()
basedir = os.path.abspath(os.path.dirname(__file__))


def _database_url(default):
    url = os.environ.get('DATABASE_URL') or default
    # PostgreSQL URL 修正（部分托管平台使用 postgres://）
    if url and url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    """基础配置类"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'hard-to-guess-string'

    # 管理员共享密钥（所有写操作均需此密钥）
    ADMIN_SECRET_KEY = os.environ.get('ADMIN_SECRET_KEY')
    ADMIN_SESSION_COOKIE = 'admin_session'
    ADMIN_SESSION_TTL = 24 * 60 * 60  # 24 小时

    # 数据库配置
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Cloudinary 云存储
    CLOUDINARY_URL = os.environ.get('CLOUDINARY_URL')
    CLOUDINARY_CLOUD_NAME = os.environ.get('CLOUDINARY_CLOUD_NAME')
    CLOUDINARY_API_KEY = os.environ.get('CLOUDINARY_API_KEY')
    CLOUDINARY_API_SECRET = os.environ.get('CLOUDINARY_API_SECRET')
    CLOUDINARY_FOLDER = os.environ.get('CLOUDINARY_FOLDER', 'cocoa-cherry')
    MAX_IMAGE_MB = 20

    # 站点信息（sitemap / robots 使用）
    SITE_URL = os.environ.get('SITE_URL', 'https://cocoa-cherry.vercel.app').rstrip('/')
    SITE_AUTHOR = os.environ.get('SITE_AUTHOR', 'Cocoa&Cherry Team')

    # 速率限制: (最大请求数, 时间窗口秒)
    REVIEW_RATE_LIMIT = (5, 60 * 60)
    ADMIN_VERIFY_RATE_LIMIT = (5, 15 * 60)
    RATE_LIMIT_SWEEP_PROBABILITY = 0.01

    # 缓存配置 (默认使用 SimpleCache，生产环境可改 Redis)，管理员会话存于此
    CACHE_TYPE = os.environ.get('CACHE_TYPE', 'SimpleCache')
    CACHE_REDIS_URL = os.environ.get('CACHE_REDIS_URL')
    CACHE_DEFAULT_TIMEOUT = 300

    SESSION_COOKIE_SECURE = False

    @staticmethod
    def init_app(app):
        # 确保 SQLite 数据目录存在
        os.makedirs(os.path.join(basedir, 'instance'), exist_ok=True)
        if not app.config.get('ADMIN_SECRET_KEY'):
            app.logger.warning('ADMIN_SECRET_KEY 未配置，所有管理操作将被拒绝')


class DevelopmentConfig(Config):
    """开发环境配置"""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = _database_url(
        'sqlite:///' + os.path.join(basedir, 'instance', 'bakery.db'))


class ProductionConfig(Config):
    """生产环境配置"""
    DEBUG = False

    SQLALCHEMY_DATABASE_URI = _database_url(
        'sqlite:///' + os.path.join(basedir, 'instance', 'bakery_prod.db'))

    # 安全设置
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Strict'

    @classmethod
    def init_app(cls, app):
        Config.init_app(app)
        if not app.config.get('ADMIN_SECRET_KEY'):
            app.logger.error('⚠️ 生产环境未设置 ADMIN_SECRET_KEY！')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    ADMIN_SECRET_KEY = 'test-admin-key'
    CACHE_TYPE = 'SimpleCache'
    RATE_LIMIT_SWEEP_PROBABILITY = 0.0


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
