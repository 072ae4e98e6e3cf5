"""
URL configuration for feedback_pro project.

业务路由按应用拆分：
- users/      登录、注册、控制台首页
- surveys/    商家问卷管理
- incentives/ 优惠码管理
- 根路径下的 s/ 与 feedback/ 为顾客公开访问入口
"""
from django.contrib import admin
from django.contrib.auth.views import LogoutView
from django.shortcuts import redirect
from django.urls import include, path

admin.site.logout = LogoutView.as_view(next_page="/admin/")


def home_view(request):
    if request.user.is_authenticated:
        return redirect("users:dashboard")
    return redirect("users:login")


urlpatterns = [
    path("", home_view, name="home"),
    path("admin/", admin.site.urls),
    path("users/", include("users.urls")),
    path("surveys/", include("surveys.urls")),
    path("incentives/", include("incentives.urls")),
    path("", include("feedback.urls")),
]
