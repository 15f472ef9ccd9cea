# fixed development data: the sample customers and the product catalog
from typing import List

from db.models import Address, Customer, Product

SAMPLE_PASSWORD = "password123"

SAMPLE_CUSTOMERS: List[Customer] = [
    Customer(
        email="john.doe@example.com",
        password=SAMPLE_PASSWORD,
        display_name="John Doe",
        phone_number="+1-555-0101",
        shipping_address=Address(
            address1="123 Main St",
            address2="Apt 4B",
            city="New York",
            state="NY",
            zip="10001",
            country="USA",
        ),
    ),
    Customer(
        email="jane.smith@example.com",
        password=SAMPLE_PASSWORD,
        display_name="Jane Smith",
        phone_number="+1-555-0102",
        shipping_address=Address(
            address1="456 Oak Ave",
            address2="",
            city="Los Angeles",
            state="CA",
            zip="90001",
            country="USA",
        ),
    ),
    Customer(
        email="bob.johnson@example.com",
        password=SAMPLE_PASSWORD,
        display_name="Bob Johnson",
        phone_number="+1-555-0103",
        shipping_address=Address(
            address1="789 Pine Rd",
            address2="Suite 200",
            city="Chicago",
            state="IL",
            zip="60601",
            country="USA",
        ),
    ),
    Customer(
        email="alice.williams@example.com",
        password=SAMPLE_PASSWORD,
        display_name="Alice Williams",
        phone_number="+1-555-0104",
        shipping_address=Address(
            address1="321 Elm St",
            address2="",
            city="Houston",
            state="TX",
            zip="77001",
            country="USA",
        ),
    ),
    Customer(
        email="charlie.brown@example.com",
        password=SAMPLE_PASSWORD,
        display_name="Charlie Brown",
        phone_number="+1-555-0105",
        shipping_address=Address(
            address1="654 Maple Dr",
            address2="Unit 12",
            city="Phoenix",
            state="AZ",
            zip="85001",
            country="USA",
        ),
    ),
]

SAMPLE_PRODUCTS: List[Product] = [
    Product(
        id="prod_1",
        name="Wireless Headphones",
        price=79.99,
        image="https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=500",
        category="Electronics",
        stock=50,
    ),
    Product(
        id="prod_2",
        name="Smart Watch",
        price=199.99,
        image="https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=500",
        category="Electronics",
        stock=30,
    ),
    Product(
        id="prod_3",
        name="Laptop Backpack",
        price=49.99,
        image="https://images.unsplash.com/photo-1553062407-98eeb64c6a62?w=500",
        category="Accessories",
        stock=100,
    ),
    Product(
        id="prod_4",
        name="Coffee Maker",
        price=89.99,
        image="https://images.unsplash.com/photo-1517668808822-9ebb02f2a0e6?w=500",
        category="Home",
        stock=25,
    ),
]
