from django.db import migrations

CURRENCIES = [
    ("USD", "US Dollar", "$"),
    ("PKR", "Pakistani Rupee", "Rs"),
]


def seed_currencies(apps, schema_editor):
    Currency = apps.get_model("ledger_core", "Currency")
    # Loop over the supported currencies and create any that are missing
    for code, name, symbol in CURRENCIES:
        Currency.objects.get_or_create(code=code, defaults={"name": name, "symbol": symbol})


class Migration(migrations.Migration):

    dependencies = [
        ("ledger_core", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_currencies, reverse_code=migrations.RunPython.noop),
    ]
