from django.urls import path

from incentives import views

app_name = "incentives"

urlpatterns = [
    path("", views.incentives_dashboard_view, name="dashboard"),
    path("redeem/", views.redeem_code_view, name="redeem"),
    path("api/codes/", views.list_codes_api, name="api_list"),
    path("api/codes/redeem/", views.redeem_code_api, name="api_redeem"),
    path("api/codes/issue/", views.issue_code_api, name="api_issue"),
]
