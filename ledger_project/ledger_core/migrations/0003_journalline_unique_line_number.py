from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("ledger_core", "0002_seed_currencies"),
    ]

    operations = [
        migrations.AddConstraint(
            model_name="journalline",
            constraint=models.UniqueConstraint(
                fields=("journal", "line_number"), name="uq_jl_journal_line_number"
            ),
        ),
    ]
