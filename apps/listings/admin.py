from django.contrib import admin

from .models import AvailabilityDay, DecorationCategory, HostMedia, HostReview, MenuItem, OrganizerService, ServiceOffering


@admin.register(ServiceOffering)
class ServiceOfferingAdmin(admin.ModelAdmin):
    list_display = ("code",)


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "host", "price", "is_vegetarian")
    list_filter = ("is_vegetarian",)
    search_fields = ("name", "category", "host__business_name")


@admin.register(DecorationCategory)
class DecorationCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "host", "price_per_sq_ft", "package_price")
    search_fields = ("name", "host__business_name")


@admin.register(OrganizerService)
class OrganizerServiceAdmin(admin.ModelAdmin):
    list_display = ("name", "host", "price_per_guest")
    search_fields = ("name", "host__business_name")


@admin.register(AvailabilityDay)
class AvailabilityDayAdmin(admin.ModelAdmin):
    list_display = ("host", "date", "is_available")
    list_filter = ("is_available",)
    date_hierarchy = "date"


@admin.register(HostMedia)
class HostMediaAdmin(admin.ModelAdmin):
    list_display = ("host", "kind", "file", "size", "uploaded_at")
    list_filter = ("kind",)


@admin.register(HostReview)
class HostReviewAdmin(admin.ModelAdmin):
    list_display = ("host", "user", "rating", "created_at")
    list_filter = ("rating",)
