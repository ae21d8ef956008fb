import logging
import colorlog
from flask import Flask, jsonify
from config import config
from bakery.extensions import db, migrate, cache
from bakery.exceptions import BakeryException
from bakery.utils.auth import SessionStore
from bakery.utils.cloud_storage import init_cloud_storage
from bakery.utils.security import RateLimiter

from bakery import commands


def create_app(config_name='default'):
    """Cocoa & Cherry 应用工厂函数"""
    app = Flask(__name__)

    # 1. 加载配置
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # 2. 初始化扩展
    db.init_app(app)
    migrate.init_app(app, db)
    cache.init_app(app)

    # 进程内限流器与管理员会话存储
    app.extensions['rate_limiter'] = RateLimiter(
        sweep_probability=app.config['RATE_LIMIT_SWEEP_PROBABILITY'])
    app.extensions['admin_sessions'] = SessionStore(cache, ttl=app.config['ADMIN_SESSION_TTL'])

    # 3. 配置日志
    configure_logging(app)

    # 4. 云存储
    init_cloud_storage(app)

    # 5. 注册蓝图 (Blueprints)
    register_blueprints(app)

    # 6. 注册全局错误处理
    register_error_handlers(app)

    # 7. 注册 CLI 命令
    register_commands(app)

    # 8. 自动建表
    auto_init_database(app)

    return app


def auto_init_database(app):
    """启动时检测数据表，缺失则自动创建（测试环境由测试夹具负责）"""
    if app.testing:
        return
    with app.app_context():
        try:
            from sqlalchemy import inspect
            tables = inspect(db.engine).get_table_names()
            if 'blog_posts' not in tables:
                app.logger.info('🚀 首次启动，正在创建数据库表...')
                db.create_all()
                app.logger.info('✅ 数据库初始化完成！')
        except Exception as e:
            app.logger.error(f'❌ 数据库初始化错误: {e}')
            import traceback
            app.logger.error(traceback.format_exc())


def register_blueprints(app):
    """注册所有内容模块蓝图"""
    # 管理员认证
    from bakery.blueprints.admin import admin_bp
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    # 博客
    from bakery.blueprints.blog import blog_bp
    app.register_blueprint(blog_bp, url_prefix='/api/blog')

    # 菜单分类与商品
    from bakery.blueprints.categories import categories_bp
    app.register_blueprint(categories_bp, url_prefix='/api/categories')

    from bakery.blueprints.menu import menu_bp
    app.register_blueprint(menu_bp, url_prefix='/api/menu')

    # 价目表
    from bakery.blueprints.ratelist import ratelist_bp
    app.register_blueprint(ratelist_bp, url_prefix='/api/ratelist')

    # 活动、相册、短视频、横幅
    from bakery.blueprints.events import events_bp
    app.register_blueprint(events_bp, url_prefix='/api/events')

    from bakery.blueprints.gallery import gallery_bp
    app.register_blueprint(gallery_bp, url_prefix='/api/gallery')

    from bakery.blueprints.reels import reels_bp
    app.register_blueprint(reels_bp, url_prefix='/api/reels')

    from bakery.blueprints.hero import hero_bp
    app.register_blueprint(hero_bp, url_prefix='/api/hero')

    # 顾客评价
    from bakery.blueprints.reviews import reviews_bp
    app.register_blueprint(reviews_bp, url_prefix='/api/reviews')

    # sitemap.xml / robots.txt 挂在根路径
    from bakery.blueprints.seo import seo_bp
    app.register_blueprint(seo_bp)


def register_error_handlers(app):
    @app.errorhandler(BakeryException)
    def handle_bakery_exception(e):
        return jsonify(e.to_dict()), e.code

    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify({'success': False, 'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'success': False, 'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_server_error(e):
        return jsonify({'success': False, 'error': 'Internal server error'}), 500


def register_commands(app):
    """注册 Flask CLI 命令"""
    app.cli.add_command(commands.forge)
    app.cli.add_command(commands.status)


def configure_logging(app):
    """配置彩色控制台日志，提升开发体验"""
    if app.debug:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)

        formatter = colorlog.ColoredFormatter(
            "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(blue)s%(message)s",
            datefmt="%H:%M:%S",
            reset=True,
            log_colors={
                'DEBUG':    'cyan',
                'INFO':     'green',
                'WARNING':  'yellow',
                'ERROR':    'red',
                'CRITICAL': 'red,bg_white',
            },
            secondary_log_colors={},
            style='%'
        )
        handler.setFormatter(formatter)
        app.logger.addHandler(handler)
        app.logger.setLevel(logging.INFO)
