from django.contrib import admin

from .models import NotificationDispatch


@admin.register(NotificationDispatch)
class NotificationDispatchAdmin(admin.ModelAdmin):
    list_display = ("booking", "event_key", "recipients", "emails_delivered", "sms_delivered", "created_at")
    list_filter = ("event",)
    readonly_fields = ("booking", "event", "event_key", "recipients", "emails_delivered", "sms_delivered", "created_at")
