from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from billing_core import services
from billing_core.models import Account, Client, Product

User = get_user_model()


class Command(BaseCommand):
    help = (
        "Create a demo owner with an account, a client, two products, "
        "an invoice and its recorded payment."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--username", default="demo", help="Username for the demo owner."
        )
        parser.add_argument(
            "--password", default="demo123", help="Password for the demo owner."
        )

    @transaction.atomic
    def handle(self, *args, **options):
        # Read arguments from add_arguments()
        username = options["username"]
        password = options["password"]

        # 1. Create user
        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": f"{username}@example.com"},
        )
        if created:  # if user newly created
            user.set_password(password)
            user.save()
        self.stdout.write(
            self.style.SUCCESS(f"Owner: {user.username} (pw={password})")
        )

        # 2. Account (reused when the command runs twice)
        account = Account.objects.for_owner(user).filter(account_no="DEMO-001").first()
        if account is None:
            account = services.create_account(
                user, account_no="DEMO-001", name="Main bank",
                initial_balance=Decimal("500.00"))
        self.stdout.write(self.style.SUCCESS(f"Account: {account} balance {account.balance}"))

        # 3. Client and products
        client = Client.objects.for_owner(user).filter(email="billing@acme.example").first()
        if client is None:
            client = services.create_client(
                user, name="Acme Trading", email="billing@acme.example",
                phone="+1 555 0100")
        self.stdout.write(self.style.SUCCESS(f"Client: {client}"))

        products = []
        for barcode, name, price in (("DEMO-CONS", "Consulting hour", "80.00"),
                                     ("DEMO-LIC", "Software licence", "120.00")):
            product = Product.objects.for_owner(user).filter(barcode=barcode).first()
            if product is None:
                product = services.create_product(
                    user, name=name, barcode=barcode, price=price)
            products.append(product)
        self.stdout.write(self.style.SUCCESS(f"Products: {', '.join(p.name for p in products)}"))

        # 4. Invoice, then pay it into the account
        invoice = services.create_invoice(
            user,
            client_id=client.pk,
            line_items=[
                {"product_id": products[0].pk, "quantity": 3},
                {"product_id": products[1].pk, "quantity": 1, "discount_percent": "10"},
            ],
            vat_percent="18",
            notes="Demo invoice",
        )
        self.stdout.write(self.style.SUCCESS(
            f"Invoice #{invoice.invoice_number}: total {invoice.total}"))

        invoice, tx = services.record_payment(invoice.pk, user, account_id=account.pk)
        account.refresh_from_db()
        self.stdout.write(self.style.SUCCESS(
            f"Payment {tx.amount} recorded; {account} balance now {account.balance}"))
