import click
import random
from datetime import datetime, timedelta
from flask.cli import with_appcontext
from bakery.extensions import db
from bakery.models import (
    BlogPost, Category, MenuItem, RateListEntry,
    GalleryImage, Event, Reel, HeroImage, Review, PRICE_UNITS
)
from bakery.services.blog_service import BlogService
from bakery.utils.fake_gen import fake, BakeryProvider

# (标签, 模型) 按 status 输出顺序排列
CONTENT_TABLES = [
    ('博客 (Blog posts)', BlogPost),
    ('分类 (Categories)', Category),
    ('菜单 (Menu items)', MenuItem),
    ('价目表 (Rate list)', RateListEntry),
    ('相册 (Gallery)', GalleryImage),
    ('活动 (Events)', Event),
    ('短视频 (Reels)', Reel),
    ('横幅 (Hero images)', HeroImage),
    ('评价 (Reviews)', Review),
]


@click.command('status')
@with_appcontext
def status():
    """
    [验证指令] 查看当前数据库中各内容表的数据统计。
    """
    click.echo(click.style('📊 Cocoa & Cherry 数据库状态:', fg='cyan', bold=True))

    try:
        total = 0
        for label, model in CONTENT_TABLES:
            count = model.query.count()
            total += count
            click.echo(f" - {label}: \t{count}")

        if total > 0:
            click.echo(click.style('✔ 数据库连接正常，数据已存在。', fg='green'))
        else:
            click.echo(click.style('⚠ 数据库为空，请运行 flask forge 生成数据。', fg='yellow'))

    except Exception as e:
        click.echo(click.style(f'✘ 数据库读取失败: {str(e)}', fg='red'))
        click.echo("请检查是否执行了 'flask db upgrade'")


@click.command('forge')
@click.option('--count', default=6, help='每类内容生成的条数 (默认6)')
@with_appcontext
def forge(count):
    """
    [演示数据] 重建数据表并填充演示内容。
    图片使用占位地址，不会上传到云存储。
    警告：这将清除数据库中的现有数据！
    """
    click.echo(click.style(f'⚡ 初始化演示数据 (每类 {count} 条)...', fg='cyan', bold=True))

    # 1. 清除旧数据
    db.drop_all()
    db.create_all()

    click.echo('正在生成菜单...')
    init_catalog(count)

    click.echo('正在生成价目表...')
    init_rate_list(count)

    click.echo('正在生成相册、活动与短视频...')
    init_media(count)

    click.echo('正在发布博客文章...')
    init_blog(count)

    click.echo('正在生成顾客评价...')
    init_reviews(count)

    click.echo(click.style('✔ 演示数据构建完成！', fg='green', bold=True))


def init_catalog(count):
    """初始化分类与菜单商品"""
    categories = []
    for i, name in enumerate(BakeryProvider.rate_categories):
        c = Category(name=name, description=fake.sentence(nb_words=8), order=i)
        db.session.add(c)
        categories.append(c)
    db.session.commit()

    for i in range(count * len(categories)):
        price = float(random.choice([450, 550, 650, 800, 950, 1200]))
        discount = round(price * 0.85) if random.random() < 0.3 else None
        item = MenuItem(
            name=fake.cake_name(),
            description=fake.sentence(nb_words=14),
            image_url=fake.placeholder_image(800, 800),
            badge=fake.menu_badge(),
            price=price,
            discount_price=discount,
            price_unit=random.choice(PRICE_UNITS),
            category_id=random.choice(categories).id,
            order=i,
        )
        db.session.add(item)
    db.session.commit()
    click.echo(f'  ✓ 已创建 {len(categories)} 个分类')


def init_rate_list(count):
    # 每个分类内顺序从 0 开始
    for category in BakeryProvider.rate_categories:
        for order in range(count):
            price = float(random.randint(40, 150) * 10)
            db.session.add(RateListEntry(
                category=category,
                item=fake.cake_name(),
                description=fake.sentence(nb_words=6),
                price=price,
                discount_price=price - 50 if random.random() < 0.2 else None,
                unit=random.choice(PRICE_UNITS),
                order=order,
            ))
    db.session.commit()
    click.echo(f'  ✓ 已创建 {count * len(BakeryProvider.rate_categories)} 条价目')


def init_media(count):
    for i in range(count):
        caption = fake.cake_name()
        db.session.add(GalleryImage(
            image_url=fake.placeholder_image(1200, 900),
            caption=caption,
            alt=caption,
            order=i,
        ))
        # 占位图不在 Cloudinary 上，public_id 逐张填 None 以保持两个列表等长
        images = [fake.placeholder_image(1200, 900) for _ in range(random.randint(0, 3))]
        db.session.add(Event(
            title=f'Baking Workshop at {fake.event_venue()}',
            venue=fake.event_venue(),
            date=datetime.utcnow() - timedelta(days=random.randint(5, 365)),
            description=fake.paragraph(nb_sentences=3),
            images=images,
            image_public_ids=[None] * len(images),
            cover_image=fake.placeholder_image(1200, 630),
            highlights=f'{random.randint(50, 600)}+ students served',
            order=i,
        ))
        db.session.add(Reel(
            video_url=f'https://www.instagram.com/reel/{fake.lexify("???????????")}/',
            thumbnail_url=fake.placeholder_image(600, 1067),
            caption=fake.sentence(nb_words=6),
            order=i,
        ))
    db.session.add(HeroImage(image_url=fake.placeholder_image(1920, 1080), is_active=True))
    db.session.commit()


def init_blog(count):
    for i in range(count):
        title = BakeryProvider.blog_topics[i] if i < len(BakeryProvider.blog_topics) else fake.sentence(nb_words=6).rstrip('.')
        content = ''.join(f'<p>{fake.paragraph(nb_sentences=6)}</p>' for _ in range(4))
        post = BlogPost(
            title=title,
            slug=BlogService.unique_slug(BlogService.generate_slug(title)),
            excerpt=fake.sentence(nb_words=20),
            content=content,
            cover_image=fake.placeholder_image(1200, 630),
            author='Cocoa&Cherry Team',
            published_at=datetime.utcnow() - timedelta(days=random.randint(0, 120)),
            read_time=BlogService.calculate_read_time(content),
            tags=BlogService.process_tags(fake.words(nb=3)),
            category=random.choice(['General', 'Recipes', 'Tips', 'News']),
            views=random.randint(0, 2000),
            order=i,
        )
        # 逐条提交，保证 unique_slug 能看到已写入的 slug
        post.save()
    click.echo(f'  ✓ 已发布 {count} 篇文章')


def init_reviews(count):
    for _ in range(count * 2):
        db.session.add(Review(
            name=fake.name(),
            email=fake.email().lower(),
            cake_type=fake.cake_type(),
            rating=random.choice([4, 5, 5, 5, 3]),
            review=fake.paragraph(nb_sentences=2),
            is_approved=random.random() < 0.7,
            is_featured=random.random() < 0.2,
        ))
    db.session.commit()
