from django.urls import path

from pricevalidator.validations.api.views import ValidateView

app_name = "validations"
urlpatterns = [
    path("validate/", ValidateView.as_view(), name="validate"),
]
