from .account import Account
from .client import Client
from .invoice import Invoice, InvoiceLine
from .product import Product
from .sequence import InvoiceSequence
from .transaction import Transaction
from .user import User
