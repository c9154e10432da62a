"""
Modelos de base de datos
Vendedores, clientes, productos, facturas y sus líneas
"""
from .seller import Seller
from .client import Client
from .product import Product
from .invoice import Invoice
from .invoice_product import InvoiceProduct
from .expense import Expense
from .setting import Setting

__all__ = [
    "Seller",
    "Client",
    "Product",
    "Invoice",
    "InvoiceProduct",
    "Expense",
    "Setting",
]
