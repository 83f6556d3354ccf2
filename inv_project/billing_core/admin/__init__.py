from .account import AccountAdmin, TransactionAdmin
from .actions import mark_inv_as_due, mark_inv_as_not_paid
from .forms import InvoiceLineForm, UserAdminChangeForm, UserAdminCreationForm
from .inlines import InvoiceLineInline, PaymentInline
from .invoice import ClientAdmin, InvoiceAdmin
from .item import ProductAdmin
from .membership import UserAdmin
from .mixins import OwnerAdminMixin
