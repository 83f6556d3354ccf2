from .catalog import (create_client, create_product, delete_client,
                      delete_product, list_clients, list_products,
                      update_client, update_product)
from .invoicing import (compute_line_total, compute_totals, create_invoice,
                        delete_invoice, get_invoice, list_invoices,
                        next_invoice_number, set_status, update_line_items)
from .ledger import (adjust_balance, create_account, delete_account,
                     expected_balance, find_balance_drift, list_accounts,
                     update_account)
from .payment import record_payment
from .transactions import (Reversal, create_transaction, delete_transaction,
                           list_transactions)
