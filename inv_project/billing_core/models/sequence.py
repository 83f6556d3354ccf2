from django.db import models

INVOICE_SEQUENCE = "invoice"


class InvoiceSequence(models.Model):
    """
    Named counter row. Numbers are handed out with a single
    UPDATE ... SET last_value = last_value + 1, never with max()+1.
    """
    name = models.CharField(max_length=50, unique=True)
    last_value = models.PositiveBigIntegerField(default=0)

    def __str__(self):
        return f"{self.name}: {self.last_value}"
