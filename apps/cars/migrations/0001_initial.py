import django.core.validators
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Car",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("brand", models.CharField(max_length=100, verbose_name="Brand")),
                ("model", models.CharField(max_length=100, verbose_name="Model")),
                ("year", models.PositiveIntegerField(verbose_name="Year")),
                (
                    "type",
                    models.CharField(
                        choices=[("economy", "Economy"), ("business", "Business"), ("premium", "Premium")],
                        default="economy",
                        max_length=20,
                        verbose_name="Type",
                    ),
                ),
                (
                    "price_per_day",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                        verbose_name="Price per day",
                    ),
                ),
                (
                    "deposit",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                        verbose_name="Deposit",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("available", "Available"), ("rented", "Rented"), ("maintenance", "Maintenance")],
                        default="available",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("image_url", models.CharField(blank=True, max_length=500, verbose_name="Main image")),
                ("image_urls", models.TextField(blank=True, default="", verbose_name="Additional images")),
                ("body_type", models.CharField(blank=True, max_length=50, verbose_name="Body type")),
                ("drive_type", models.CharField(blank=True, max_length=50, verbose_name="Drive type")),
                ("transmission", models.CharField(blank=True, max_length=50, verbose_name="Transmission")),
                ("engine", models.CharField(blank=True, max_length=100, verbose_name="Engine")),
                ("fuel_type", models.CharField(blank=True, max_length=50, verbose_name="Fuel type")),
                ("seats", models.PositiveSmallIntegerField(blank=True, null=True, verbose_name="Seats")),
                ("mileage", models.PositiveIntegerField(blank=True, null=True, verbose_name="Mileage")),
                ("color", models.CharField(blank=True, max_length=50, verbose_name="Color")),
                ("features", models.TextField(blank=True, verbose_name="Features")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Car",
                "verbose_name_plural": "Cars",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="car_status_idx"),
                    models.Index(fields=["type"], name="car_type_idx"),
                ],
            },
        ),
    ]
