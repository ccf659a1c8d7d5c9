from django.contrib import admin

from .models import BookingInquiry, BookingResponse


class BookingResponseInline(admin.TabularInline):
    model = BookingResponse
    extra = 0


@admin.register(BookingInquiry)
class BookingInquiryAdmin(admin.ModelAdmin):
    list_display = ('inquirer_name', 'recipient_name', 'direction', 'proposed_date', 'status', 'created_at')
    list_filter = ('status', 'direction')
    search_fields = ('inquirer_name', 'recipient_name', 'message')
    inlines = [BookingResponseInline]
