from django.urls import path

from feedback import views

app_name = "feedback"

urlpatterns = [
    path("s/<uuid:survey_id>/", views.public_survey_view, name="public_survey"),
    path("feedback/<uuid:response_entity_id>/", views.feedback_form_view, name="form"),
    path("feedback/<uuid:response_entity_id>/submit/", views.submit_feedback_view, name="submit"),
]
