from django.urls import path  # type: ignore

from .views import ConfirmPaymentView, CreatePaymentIntentView, PaymentDetailView, stripe_webhook

urlpatterns = [
    path("create-payment-intent/", CreatePaymentIntentView.as_view(), name="payment-intent"),
    path("confirm/", ConfirmPaymentView.as_view(), name="payment-confirm"),
    path("webhook/", stripe_webhook, name="payment-webhook"),
    path("<str:booking_id>/", PaymentDetailView.as_view(), name="payment-detail"),
]
