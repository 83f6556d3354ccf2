from django.urls import path

from . import views

urlpatterns = [
    path("accounts/", views.accounts_collection, name="accounts"),
    path("accounts/<int:account_id>/", views.account_detail, name="account-detail"),
    path("transactions/", views.transactions_collection, name="transactions"),
    path("transactions/<int:transaction_id>/", views.transaction_detail, name="transaction-detail"),
    path("invoices/", views.invoices_collection, name="invoices"),
    path("invoices/<int:invoice_id>/", views.invoice_detail, name="invoice-detail"),
    path("invoices/<int:invoice_id>/payments/", views.invoice_payments, name="invoice-payments"),
    path("clients/", views.clients_collection, name="clients"),
    path("clients/<int:client_id>/", views.client_detail, name="client-detail"),
    path("products/", views.products_collection, name="products"),
    path("products/<int:product_id>/", views.product_detail, name="product-detail"),
]
