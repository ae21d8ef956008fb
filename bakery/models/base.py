from datetime import datetime
from bakery.extensions import db


class BaseModel(db.Model):
    """
    内容模型基类
    包含：ID主键, 创建时间, 更新时间, 序列化方法
    删除一律为硬删除，不保留软删除标记。
    """
    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def save(self):
        """保存到数据库"""
        db.session.add(self)
        db.session.commit()

    def delete(self):
        """从数据库中物理删除"""
        db.session.delete(self)
        db.session.commit()

    def to_dict(self, exclude=()):
        """
        通用序列化方法：将模型转换为字典，便于 API 返回 JSON。
        过滤掉以 '_' 开头的私有属性以及 exclude 中列出的字段。
        """
        data = {}
        for c in self.__table__.columns:
            if c.name.startswith('_') or c.name in exclude:
                continue
            val = getattr(self, c.name)
            if isinstance(val, datetime):
                data[c.name] = val.isoformat()
            else:
                data[c.name] = val
        return data
