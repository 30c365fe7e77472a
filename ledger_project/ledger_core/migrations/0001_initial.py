from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Currency",
            fields=[
                ("code", models.CharField(max_length=3, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=64)),
                ("symbol", models.CharField(blank=True, max_length=8, null=True)),
                ("decimal_places", models.PositiveSmallIntegerField(default=2)),
            ],
            options={
                "verbose_name_plural": "currencies",
            },
        ),
        migrations.CreateModel(
            name="Period",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("year", models.PositiveSmallIntegerField()),
                ("month", models.PositiveSmallIntegerField()),
                ("status", models.CharField(choices=[("open", "Open"), ("locked", "Locked")], default="open", max_length=10)),
                ("fx_rate_locked", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ("year", "month"),
                "indexes": [models.Index(fields=["status"], name="period_status_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("year", "month"), name="uq_period_year_month"),
                    models.CheckConstraint(
                        condition=models.Q(("month__gte", 1), ("month__lte", 12)),
                        name="period_month_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=32, unique=True)),
                ("name", models.CharField(max_length=200)),
                ("account_type", models.CharField(
                    choices=[
                        ("asset", "Asset"),
                        ("liability", "Liability"),
                        ("equity", "Equity"),
                        ("income", "Income"),
                        ("expense", "Expense"),
                        ("other", "Other"),
                    ],
                    max_length=10,
                )),
                ("is_bank", models.BooleanField(default=False)),
                ("is_capital", models.BooleanField(default=False)),
                ("is_payroll_source", models.BooleanField(default=False)),
                ("is_intercompany", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("currency", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="accounts",
                    to="ledger_core.currency",
                )),
                ("parent", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="children",
                    to="ledger_core.account",
                )),
            ],
            options={
                "ordering": ("code",),
                "indexes": [
                    models.Index(fields=["account_type"], name="account_type_idx"),
                    models.Index(fields=["parent"], name="account_parent_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="FxRate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rate", models.DecimalField(decimal_places=6, max_digits=18)),
                ("effective_date", models.DateField()),
                ("is_locked", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("created_by", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="created_fx_rates",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("from_currency", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="fx_rates_from",
                    to="ledger_core.currency",
                )),
                ("to_currency", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="fx_rates_to",
                    to="ledger_core.currency",
                )),
            ],
            options={
                "ordering": ("-effective_date",),
                "indexes": [models.Index(fields=["effective_date"], name="fx_rate_eff_date_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("from_currency", "to_currency", "effective_date"),
                        name="uq_fx_rate_pair_date",
                    ),
                    models.CheckConstraint(condition=models.Q(("rate__gt", 0)), name="fx_rate_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Journal",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("reference", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True, default="")),
                ("journal_date", models.DateField()),
                ("status", models.CharField(choices=[("draft", "Draft"), ("posted", "Posted")], default="draft", max_length=10)),
                ("total_debit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("total_credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="created_journals",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("fx_rate", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="journals",
                    to="ledger_core.fxrate",
                )),
                ("period", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="journals",
                    to="ledger_core.period",
                )),
                ("posted_by", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="posted_journals",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "indexes": [
                    models.Index(fields=["period", "status"], name="journal_period_status_idx"),
                    models.Index(fields=["journal_date"], name="journal_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("period", "reference"), name="uq_journal_period_ref"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("description", models.CharField(blank=True, default="", max_length=400)),
                ("debit_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("credit_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("debit_amount_base", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("credit_amount_base", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("line_number", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("account", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="journal_lines",
                    to="ledger_core.account",
                )),
                ("journal", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="lines",
                    to="ledger_core.journal",
                )),
            ],
            options={
                "ordering": ("journal", "line_number"),
                "indexes": [
                    models.Index(fields=["account"], name="jl_account_idx"),
                    models.Index(fields=["journal", "line_number"], name="jl_journal_line_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("debit_amount__gte", 0), ("credit_amount__gte", 0)),
                        name="jl_non_negative_amounts",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("debit_amount_base__gte", 0), ("credit_amount_base__gte", 0)),
                        name="jl_non_negative_base_amounts",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Partner",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("capital_account", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="partners",
                    to="ledger_core.account",
                )),
            ],
        ),
        migrations.CreateModel(
            name="CapitalMovement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("movement_type", models.CharField(choices=[("contribution", "Contribution"), ("draw", "Draw")], max_length=12)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("amount_base", models.DecimalField(decimal_places=2, max_digits=18)),
                ("description", models.TextField(blank=True, default="")),
                ("movement_date", models.DateField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("currency", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    to="ledger_core.currency",
                )),
                ("journal", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="capital_movements",
                    to="ledger_core.journal",
                )),
                ("partner", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="capital_movements",
                    to="ledger_core.partner",
                )),
            ],
            options={
                "ordering": ("-movement_date", "-id"),
                "indexes": [models.Index(fields=["partner", "movement_date"], name="cm_partner_date_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0), ("amount_base__gt", 0)),
                        name="cm_positive_amounts",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("table_name", models.CharField(max_length=100)),
                ("record_id", models.CharField(max_length=100)),
                ("action", models.CharField(max_length=50)),
                ("old_values", models.JSONField(blank=True, null=True)),
                ("new_values", models.JSONField(blank=True, null=True)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("user", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["table_name", "record_id"], name="audit_table_record_idx"),
                    models.Index(fields=["created_at"], name="audit_created_idx"),
                ],
            },
        ),
    ]
