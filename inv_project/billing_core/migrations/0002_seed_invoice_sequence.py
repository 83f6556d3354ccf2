from django.conf import settings
from django.db import migrations


def seed_invoice_sequence(apps, schema_editor):
    InvoiceSequence = apps.get_model("billing_core", "InvoiceSequence")
    start = getattr(settings, "BILLING_INVOICE_NUMBER_START", 1001)
    # the first allocated number is last_value + 1
    InvoiceSequence.objects.get_or_create(
        name="invoice", defaults={"last_value": start - 1})


class Migration(migrations.Migration):

    dependencies = [
        ("billing_core", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_invoice_sequence, reverse_code=migrations.RunPython.noop),
    ]
