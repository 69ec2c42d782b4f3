from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("booking", "total_amount", "advance_amount", "method", "is_paid", "transaction_id", "payment_date")
    list_filter = ("is_paid", "method")
    search_fields = ("transaction_id", "provider_intent_id")
    readonly_fields = ("is_paid", "transaction_id", "payment_date", "provider_intent_id", "created_at", "updated_at")
