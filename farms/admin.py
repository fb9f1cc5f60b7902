"""
Django Admin Configuration for Farm Models
"""

from django.contrib import admin

from .models import Farm, FarmMembership


class FarmMembershipInline(admin.TabularInline):
    model = FarmMembership
    extra = 0
    fields = ('user', 'role', 'created_at')
    readonly_fields = ('created_at',)


@admin.register(Farm)
class FarmAdmin(admin.ModelAdmin):
    list_display = ('name', 'farm_type', 'owner', 'location', 'created_at')
    list_filter = ('farm_type',)
    search_fields = ('name', 'location', 'owner__username', 'owner__email')
    inlines = [FarmMembershipInline]


@admin.register(FarmMembership)
class FarmMembershipAdmin(admin.ModelAdmin):
    list_display = ('farm', 'user', 'role', 'created_at')
    list_filter = ('role',)
    search_fields = ('farm__name', 'user__username', 'user__email')
