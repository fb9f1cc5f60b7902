from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models
import uuid


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.

    A user reaches farms through FarmMembership rows; staff users can
    reach every farm.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    email = models.EmailField(unique=True, help_text="Login and contact email")
    phone = models.CharField(max_length=20, blank=True, help_text="Contact phone number")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return self.get_full_name()

    def get_full_name(self):
        """Return the user's full name or username if name is not set."""
        full_name = super().get_full_name()
        return full_name if full_name else self.username


# =============================================================================
# USER SETTINGS - alert thresholds, units, fiscal year
# =============================================================================

class UserSettings(models.Model):
    """
    Per-user preferences.

    The alert thresholds drive the low-stock and mortality alerts, and the
    fiscal year start drives the ``fiscal_year`` report range.
    """

    DATE_FORMAT_CHOICES = [
        ('MM/DD/YYYY', 'MM/DD/YYYY'),
        ('DD/MM/YYYY', 'DD/MM/YYYY'),
        ('YYYY-MM-DD', 'YYYY-MM-DD'),
    ]

    WEIGHT_UNIT_CHOICES = [
        ('kg', 'Kilograms'),
        ('lbs', 'Pounds'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='settings')

    # Currency
    currency_code = models.CharField(max_length=3, default='USD')
    currency_symbol = models.CharField(max_length=5, default='$')
    currency_decimals = models.PositiveSmallIntegerField(default=2)

    # Display
    date_format = models.CharField(max_length=10, choices=DATE_FORMAT_CHOICES, default='YYYY-MM-DD')
    weight_unit = models.CharField(max_length=3, choices=WEIGHT_UNIT_CHOICES, default='kg')

    # Alert thresholds
    low_stock_threshold_percent = models.PositiveSmallIntegerField(
        default=10,
        help_text="Batch is low on stock at or below this percentage of its initial quantity"
    )
    mortality_alert_percent = models.PositiveSmallIntegerField(
        default=5,
        help_text="Deaths in 24h above this percentage of current quantity raise a critical alert"
    )
    mortality_alert_quantity = models.PositiveIntegerField(
        default=10,
        help_text="Deaths in 24h above this count raise a critical alert"
    )

    # Business
    fiscal_year_start_month = models.PositiveSmallIntegerField(default=1)
    default_payment_terms_days = models.IntegerField(default=30)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_settings'
        verbose_name = 'User Settings'
        verbose_name_plural = 'User Settings'

    def __str__(self):
        return f"Settings for {self.user}"

    @classmethod
    def for_user(cls, user):
        """Return the user's settings, creating defaults on first access."""
        settings, _ = cls.objects.get_or_create(user=user)
        return settings

    def clean(self):
        errors = {}

        if not 1 <= self.low_stock_threshold_percent <= 100:
            errors['low_stock_threshold_percent'] = 'Low stock threshold must be between 1 and 100'
        if not 1 <= self.mortality_alert_percent <= 100:
            errors['mortality_alert_percent'] = 'Mortality alert percent must be between 1 and 100'
        if self.mortality_alert_quantity < 1:
            errors['mortality_alert_quantity'] = 'Mortality alert quantity must be at least 1'
        if not 1 <= self.fiscal_year_start_month <= 12:
            errors['fiscal_year_start_month'] = 'Fiscal year start must be between 1 and 12'
        if self.default_payment_terms_days < 0:
            errors['default_payment_terms_days'] = 'Default payment terms must be non-negative'
        if self.currency_decimals > 4:
            errors['currency_decimals'] = 'Currency decimals must be between 0 and 4'
        if self.weight_unit not in dict(self.WEIGHT_UNIT_CHOICES):
            errors['weight_unit'] = 'Weight unit must be "kg" or "lbs"'
        if self.date_format not in dict(self.DATE_FORMAT_CHOICES):
            errors['date_format'] = 'Invalid date format'

        if errors:
            raise ValidationError(errors)
