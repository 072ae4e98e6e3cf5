from django.urls import path

from surveys import views

app_name = "surveys"

urlpatterns = [
    path("", views.survey_list_view, name="list"),
    path("new/", views.survey_create_view, name="create"),
    path("<uuid:survey_id>/", views.survey_detail_view, name="detail"),
    path("<uuid:survey_id>/delete/", views.survey_delete_view, name="delete"),
    path("<uuid:survey_id>/status/", views.survey_status_view, name="status"),
    path("<uuid:survey_id>/qrcode.png", views.survey_qrcode_view, name="qrcode"),
    path("<uuid:survey_id>/send-sms/", views.survey_send_sms_view, name="send_sms"),
]
