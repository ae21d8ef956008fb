"""展示顺序交换服务"""
from flask import current_app
from bakery.extensions import db


class OrderingService:
    """
    展示顺序交换协议（Reel / Event 全局范围，RateListEntry 按 category 范围）

    目标顺序已被同范围内其它条目占用时，两者交换；
    否则当前条目直接取目标值，允许出现重复顺序。
    两次写入各自提交，不包在同一事务中。
    """

    @staticmethod
    def find_counterpart(item, target_order, scope=()):
        """查找同范围内占用目标顺序的另一个条目"""
        model = type(item)
        query = model.query.filter(model.order == target_order, model.id != item.id)
        for field in scope:
            query = query.filter(getattr(model, field) == getattr(item, field))
        return query.first()

    @staticmethod
    def apply(item, target_order, scope=(), label='title'):
        """
        把 item 的顺序改为 target_order，必要时与占位条目交换。
        item 本身的修改留给调用方提交。

        Returns:
            dict | None: 被交换条目的信息 {'id', label, 'old_order', 'new_order'}
        """
        current_order = item.order
        swapped_with = None

        if current_order != target_order:
            counterpart = OrderingService.find_counterpart(item, target_order, scope)
            if counterpart is not None:
                counterpart.order = current_order
                db.session.commit()

                swapped_with = {
                    'id': counterpart.id,
                    label: getattr(counterpart, label),
                    'old_order': target_order,
                    'new_order': current_order,
                }
                current_app.logger.info(
                    f'🔄 顺序交换: "{getattr(item, label)}" ({current_order}→{target_order}) ↔ '
                    f'"{getattr(counterpart, label)}" ({target_order}→{current_order})'
                )

        item.order = target_order
        return swapped_with

    @staticmethod
    def update_message(swapped_with, label, default):
        if swapped_with:
            return f'Order swapped with "{swapped_with[label]}"'
        return default
