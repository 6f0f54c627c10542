from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import tinymce.models
from django.conf import settings
from django.db import migrations, models


def base_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("deleted", models.DateTimeField(db_index=True, editable=False, null=True)),
        ("deleted_by_cascade", models.BooleanField(default=False, editable=False)),
        ("created", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
        ("updated", models.DateTimeField(auto_now=True)),
    ]


CURRENCY_CHOICES = [("EUR", "EUR"), ("HUF", "HUF")]

PAYMENT_METHOD_CHOICES = [
    ("bank transfer", "Bank transfer"),
    ("card", "Card"),
    ("cash", "Cash"),
    ("other", "Other"),
]


def finance_entry_fields():
    return [
        ("description", models.TextField(blank=True, null=True)),
        ("currency", models.CharField(choices=CURRENCY_CHOICES, default="EUR", max_length=3)),
        ("payment_method", models.CharField(choices=PAYMENT_METHOD_CHOICES, default="other", max_length=20)),
        ("account", models.CharField(blank=True, max_length=200, null=True)),
        ("notes", models.TextField(blank=True, null=True)),
        (
            "created_by",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
        (
            "updated_by",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="EventGroup",
            fields=[
                *base_fields(),
                ("code", models.CharField(max_length=150, unique=True, verbose_name="Code")),
                ("name", models.CharField(max_length=150, verbose_name="Name")),
            ],
            options={
                "ordering": ["code"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Profile",
            fields=[
                *base_fields(),
                ("email", models.EmailField(max_length=254, unique=True, verbose_name="Email")),
                ("name", models.CharField(blank=True, max_length=100, null=True, verbose_name="Name")),
                ("surname", models.CharField(blank=True, max_length=100, null=True, verbose_name="Surname")),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("admin", "Admin"),
                            ("capogruppo", "Group Leader"),
                            ("partecipante", "Participant"),
                            ("manager", "Manager"),
                            ("alloggi", "Accommodation"),
                        ],
                        default="partecipante",
                        max_length=20,
                        verbose_name="Role",
                    ),
                ),
                ("phone", models.CharField(blank=True, max_length=50, null=True, verbose_name="Phone")),
                ("italy", models.BooleanField(null=True, verbose_name="Based in Italy")),
                ("rome", models.BooleanField(null=True, verbose_name="Based in Rome")),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                ("groups", models.ManyToManyField(blank=True, related_name="leaders", to="gfportal.eventgroup")),
            ],
            options={
                "ordering": ["-created"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Participant",
            fields=[
                *base_fields(),
                ("name", models.CharField(max_length=150, verbose_name="Name")),
                ("surname", models.CharField(max_length=150, verbose_name="Surname")),
                ("email", models.EmailField(db_index=True, max_length=254, verbose_name="Email")),
                (
                    "secondary_email",
                    models.EmailField(blank=True, max_length=254, null=True, verbose_name="Secondary email"),
                ),
                ("phone", models.CharField(blank=True, max_length=50, null=True, verbose_name="Phone")),
                ("nationality", models.CharField(blank=True, max_length=100, null=True, verbose_name="Nationality")),
                (
                    "residence_country",
                    models.CharField(blank=True, max_length=100, null=True, verbose_name="Country of residence"),
                ),
                ("city", models.CharField(blank=True, max_length=100, null=True, verbose_name="City")),
                (
                    "registration_type",
                    models.CharField(blank=True, max_length=100, null=True, verbose_name="Registration type"),
                ),
                ("sex", models.CharField(blank=True, max_length=30, null=True, verbose_name="Sex")),
                ("birth_date", models.DateField(blank=True, null=True, verbose_name="Date of birth")),
                ("arrival_date", models.DateField(blank=True, null=True, verbose_name="Date of arrival")),
                ("departure_date", models.DateField(blank=True, null=True, verbose_name="Date of departure")),
                ("whole_event", models.BooleanField(null=True, verbose_name="Attends the whole event")),
                ("presence_detail", models.JSONField(blank=True, null=True)),
                (
                    "accommodation",
                    models.CharField(blank=True, max_length=250, null=True, verbose_name="Accommodation"),
                ),
                ("accommodation_short", models.CharField(blank=True, editable=False, max_length=50, null=True)),
                ("allergies", models.TextField(blank=True, null=True, verbose_name="Allergies")),
                ("dietary_needs", models.TextField(blank=True, null=True, verbose_name="Dietary requirements")),
                (
                    "accessibility_needs",
                    models.BooleanField(null=True, verbose_name="Accessibility support needed"),
                ),
                (
                    "accessibility_details",
                    models.TextField(blank=True, null=True, verbose_name="Accessibility details"),
                ),
                ("notes", models.TextField(blank=True, null=True, verbose_name="Notes")),
                ("privacy_accepted", models.BooleanField(null=True, verbose_name="Privacy accepted")),
                ("group_label", models.CharField(blank=True, max_length=150, null=True, verbose_name="Group")),
                ("group_leader", models.CharField(blank=True, max_length=150, null=True, verbose_name="Group leader")),
                ("nights", models.IntegerField(blank=True, editable=False, null=True)),
                (
                    "total_fee",
                    models.DecimalField(blank=True, decimal_places=2, editable=False, max_digits=10, null=True),
                ),
                (
                    "fee_paid",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name="Fee paid"),
                ),
                ("age", models.IntegerField(blank=True, editable=False, null=True)),
                ("is_minor", models.BooleanField(editable=False, null=True)),
                ("tally_submission_id", models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ("tally_respondent_id", models.CharField(blank=True, max_length=100, null=True)),
                ("submitted_at", models.DateTimeField(blank=True, null=True)),
                ("tally_payload", models.JSONField(blank=True, null=True)),
                (
                    "group",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="participants",
                        to="gfportal.eventgroup",
                    ),
                ),
            ],
            options={
                "ordering": ["surname", "name"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="WebhookEvent",
            fields=[
                *base_fields(),
                ("source", models.CharField(max_length=50)),
                ("event_type", models.CharField(max_length=100)),
                ("submission_id", models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ("respondent_id", models.CharField(blank=True, max_length=100, null=True)),
                ("email", models.CharField(blank=True, db_index=True, max_length=254, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("processed", "Processed"), ("skipped", "Skipped"), ("error", "Error")],
                        max_length=20,
                    ),
                ),
                ("error_code", models.CharField(blank=True, max_length=50, null=True)),
                ("error_message", models.TextField(blank=True, null=True)),
                ("payload", models.JSONField(default=dict)),
                ("normalized", models.JSONField(blank=True, null=True)),
            ],
            options={
                "ordering": ["-created"],
                "abstract": False,
                "indexes": [models.Index(fields=["source", "-created"], name="gfportal_webhook_src_created")],
            },
        ),
        migrations.CreateModel(
            name="EmailTemplate",
            fields=[
                *base_fields(),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("subject", models.CharField(blank=True, default="", max_length=500, verbose_name="Subject")),
                ("html", tinymce.models.HTMLField(verbose_name="Body")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_email_templates",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="updated_email_templates",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-updated"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="EmailSettings",
            fields=[
                *base_fields(),
                (
                    "sender_email",
                    models.EmailField(blank=True, max_length=254, null=True, verbose_name="Sender email"),
                ),
                (
                    "app_password",
                    models.CharField(blank=True, max_length=200, null=True, verbose_name="Google App Password"),
                ),
            ],
            options={
                "verbose_name_plural": "Email settings",
                "ordering": ["id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="FinanceSettings",
            fields=[
                *base_fields(),
                ("event_name", models.CharField(default="Global Friendship", max_length=200)),
                ("default_currency", models.CharField(choices=CURRENCY_CHOICES, default="EUR", max_length=3)),
                (
                    "huf_to_eur_rate",
                    models.DecimalField(
                        decimal_places=6,
                        default=Decimal("0.0025"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.000001"))],
                    ),
                ),
                ("accounts", models.JSONField(blank=True, default=list)),
                ("notes", models.TextField(blank=True, null=True)),
            ],
            options={
                "verbose_name_plural": "Finance settings",
                "ordering": ["id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="BudgetItem",
            fields=[
                *base_fields(),
                ("category_name", models.CharField(max_length=200)),
                ("macro_category", models.CharField(db_index=True, max_length=200)),
                ("unit_cost_original", models.DecimalField(decimal_places=2, max_digits=14)),
                ("currency", models.CharField(choices=CURRENCY_CHOICES, default="EUR", max_length=3)),
                ("quantity", models.DecimalField(decimal_places=2, default=Decimal("1"), max_digits=14)),
                ("notes", models.TextField(blank=True, null=True)),
            ],
            options={
                "ordering": ["category_name"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                *base_fields(),
                *finance_entry_fields(),
                (
                    "transaction_type",
                    models.CharField(
                        choices=[("INCOME", "Income"), ("EXPENSE", "Expense")], default="EXPENSE", max_length=10
                    ),
                ),
                ("transaction_date", models.DateField()),
                ("party", models.CharField(blank=True, max_length=200, null=True)),
                ("amount_original", models.DecimalField(decimal_places=2, max_digits=14)),
            ],
            options={
                "ordering": ["-transaction_date"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Sponsorship",
            fields=[
                *base_fields(),
                *finance_entry_fields(),
                ("sponsor_name", models.CharField(max_length=200)),
                (
                    "pledged_amount_original",
                    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14),
                ),
                ("paid_amount_original", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pledged", "Pledged"),
                            ("partially_paid", "Partially paid"),
                            ("paid", "Paid"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pledged",
                        max_length=20,
                    ),
                ),
                ("expected_date", models.DateField(blank=True, null=True)),
                ("received_date", models.DateField(blank=True, null=True)),
            ],
            options={
                "ordering": ["-created"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="TransactionAllocation",
            fields=[
                *base_fields(),
                ("amount_original", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "transaction",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="allocations",
                        to="gfportal.transaction",
                    ),
                ),
                (
                    "budget_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transaction_allocations",
                        to="gfportal.budgetitem",
                    ),
                ),
            ],
            options={
                "ordering": ["created"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="SponsorshipAllocation",
            fields=[
                *base_fields(),
                ("amount_original", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "sponsorship",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="allocations",
                        to="gfportal.sponsorship",
                    ),
                ),
                (
                    "budget_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sponsorship_allocations",
                        to="gfportal.budgetitem",
                    ),
                ),
            ],
            options={
                "ordering": ["created"],
                "abstract": False,
            },
        ),
    ]
