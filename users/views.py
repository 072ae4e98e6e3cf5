"""
【业务说明】users 应用视图层，承载登录、注册、退出与控制台首页。
"""

from django.contrib import messages
from django.contrib.auth import logout
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from users.forms import LoginForm, RegisterForm
from users.services import AuthService

auth_service = AuthService()


def login_view(request: HttpRequest) -> HttpResponse:
    """登录入口；已登录且启用的账号直接进入控制台。"""

    if request.user.is_authenticated and request.user.is_active:
        return redirect("users:dashboard")

    form = LoginForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        success, payload = auth_service.pc_login(
            request,
            form.cleaned_data["email"],
            form.cleaned_data["password"],
        )
        if success:
            next_url = request.GET.get("next")
            if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
                return redirect(next_url)
            return redirect("users:dashboard")
        messages.error(request, payload)
    return render(request, "users/login.html", {"form": form})


def register_view(request: HttpRequest) -> HttpResponse:
    """商家注册，成功后跳转登录页。"""

    if request.user.is_authenticated and request.user.is_active:
        return redirect("users:dashboard")

    form = RegisterForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        success, payload = auth_service.register(
            form.cleaned_data["name"],
            form.cleaned_data["email"],
            form.cleaned_data["password"],
        )
        if success:
            messages.success(request, "Account created. Please sign in.")
            return redirect("users:login")
        form.add_error(None, payload)
    return render(request, "users/register.html", {"form": form})


def logout_view(request: HttpRequest) -> HttpResponse:
    """退出登录后回到登录页。"""

    logout(request)
    return redirect("users:login")


@login_required
def dashboard_view(request: HttpRequest) -> HttpResponse:
    """控制台首页：展示账号信息；停用账号直接登出。"""

    if not request.user.is_active:
        logout(request)
        return redirect("users:login")

    business = auth_service.get_business_for_user(request.user)
    return render(
        request,
        "users/dashboard.html",
        {"business": business},
    )
