"""
Sample Data
===========

Demo catalog used when no database is configured.
"""

from query_wise.models import ColumnDescriptor, TableDescriptor
from query_wise.store.memory import InMemoryStore

SAMPLE_TABLES = [
    TableDescriptor("users", "Stores user information"),
    TableDescriptor("products", "Stores product details"),
    TableDescriptor("orders", "Stores customer orders"),
]

SAMPLE_COLUMNS = {
    "users": [
        ColumnDescriptor("id", "INT", "Unique identifier for the user"),
        ColumnDescriptor("name", "VARCHAR", "Name of the user"),
        ColumnDescriptor("email", "VARCHAR", "Email address of the user"),
        ColumnDescriptor("signup_date", "DATE", "Date the user signed up"),
    ],
    "products": [
        ColumnDescriptor("product_id", "INT", "Unique identifier for the product"),
        ColumnDescriptor("product_name", "VARCHAR", "Name of the product"),
        ColumnDescriptor("price", "DECIMAL", "Price of the product"),
        ColumnDescriptor("stock_quantity", "INT", "Available stock of the product"),
    ],
    "orders": [
        ColumnDescriptor("order_id", "INT", "Unique identifier for the order"),
        ColumnDescriptor("user_id", "INT", "ID of the user who placed the order"),
        ColumnDescriptor("product_id", "INT", "ID of the product ordered"),
        ColumnDescriptor("order_date", "DATE", "Date the order was placed"),
        ColumnDescriptor("quantity", "INT", "Quantity of the product ordered"),
    ],
}

SAMPLE_ROWS = {
    "users": [
        {"id": 1, "name": "Alice Smith", "email": "alice@example.com", "signup_date": "2023-01-15"},
        {"id": 2, "name": "Bob Johnson", "email": "bob@example.com", "signup_date": "2023-02-20"},
        {"id": 3, "name": "Charlie Brown", "email": "charlie@example.com", "signup_date": "2023-03-10"},
        {"id": 4, "name": "Diana Prince", "email": "diana@example.com", "signup_date": "2023-04-05"},
    ],
    "products": [
        {"product_id": 101, "product_name": "Laptop Pro", "price": 1200.00, "stock_quantity": 50},
        {"product_id": 102, "product_name": "Wireless Mouse", "price": 25.50, "stock_quantity": 200},
        {"product_id": 103, "product_name": "Mechanical Keyboard", "price": 75.00, "stock_quantity": 150},
        {"product_id": 104, "product_name": "4K Monitor", "price": 450.00, "stock_quantity": 75},
    ],
    "orders": [
        {"order_id": 1001, "user_id": 1, "product_id": 101, "order_date": "2023-04-01", "quantity": 1},
        {"order_id": 1002, "user_id": 2, "product_id": 102, "order_date": "2023-04-02", "quantity": 2},
        {"order_id": 1003, "user_id": 1, "product_id": 103, "order_date": "2023-04-03", "quantity": 1},
        {"order_id": 1004, "user_id": 3, "product_id": 104, "order_date": "2023-04-05", "quantity": 1},
        {"order_id": 1005, "user_id": 4, "product_id": 101, "order_date": "2023-04-06", "quantity": 1},
    ],
}


def sample_store() -> InMemoryStore:
    """Create an in-memory store loaded with the demo catalog."""
    return InMemoryStore(SAMPLE_TABLES, SAMPLE_COLUMNS, SAMPLE_ROWS)
