from django.apps import AppConfig


class UsersConfig(AppConfig):
    """
    【业务说明】Django App 配置，集中账号与商家模型。
    【用法】自动被 INSTALLED_APPS 引入，无需手动调用。
    【使用示例】settings INSTALLED_APPS 中列出 'users' 即可。
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'users'
    verbose_name = 'Accounts'
