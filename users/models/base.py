from django.db import models


class TimeStampedModel(models.Model):
    """
    【业务说明】所有业务实体都需要记录创建与更新时间，便于审计与排序。
    【用法】继承该抽象类后自动拥有 `created_at` 和 `updated_at` 字段，无需重复定义。
    【使用示例】商家、问卷、反馈链接、优惠码等模型均继承本类。
    """

    created_at = models.DateTimeField(
        "创建时间",
        auto_now_add=True,
        db_index=True,
        help_text="【业务说明】记录数据首次写入时间；【用法】只读字段，自动写入。",
    )
    updated_at = models.DateTimeField(
        "更新时间",
        auto_now=True,
        help_text="【业务说明】记录最新修改时间；【用法】ORM 保存时自动更新。",
    )

    class Meta:
        abstract = True
