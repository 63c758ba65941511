from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.orders.builder import build_order_draft
from modules.orders.constants import PaymentMethod
from modules.orders.models import Order
from modules.orders.pricing import ResolvedLineItem
from modules.orders.repositories import OrderDjangoRepository
from modules.products.models import Product


class Command(BaseCommand):
    help = "Seed database with development users, catalog and orders."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=10, help="Number of COD orders to create.")

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        products = self._seed_products()
        orders_created = self._seed_orders(users["shopper"], products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> dict:
        User = get_user_model()
        admin = User.objects.filter(email="admin@example.com").first()
        if admin is None:
            admin = User.objects.create_superuser(
                "admin@example.com", password="Admin@1234", name="Store Admin"
            )
        shopper = User.objects.filter(email="shopper@example.com").first()
        if shopper is None:
            shopper = User.objects.create_user(
                "shopper@example.com", password="Shopper@1234", name="Asha Verma"
            )
        return {"admin": admin, "shopper": shopper}

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        catalog = [
            ("Cotton Kurta", "Handloom cotton, regular fit", Decimal("1299.00")),
            ("Silk Saree", "Banarasi silk with zari border", Decimal("7499.00")),
            ("Leather Sandals", "Kolhapuri style", Decimal("899.00")),
            ("Brass Diya Set", "Set of 4", Decimal("549.00")),
            ("Masala Chai Tin", "250 g loose leaf", Decimal("349.00")),
            ("Block Print Dupatta", "Jaipur hand block print", Decimal("699.00")),
            ("Copper Bottle", "1 litre, leak proof", Decimal("799.00")),
            ("Jute Tote Bag", "Reusable, 15 kg load", Decimal("249.00")),
        ]
        for name, description, price in catalog:
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults={"description": description, "price": price, "is_active": True},
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, shopper, products: list[Product], count: int) -> int:
        self.stdout.write("Creating orders...")
        if Order.objects.filter(owner=shopper).exists():
            self.stdout.write(self.style.WARNING("Skipping orders (already seeded)."))
            return 0

        repository = OrderDjangoRepository()
        customer = {
            "name": shopper.name,
            "email": shopper.email,
            "phone": "9876543210",
            "address": {"city": "Pune", "pincode": "411001"},
        }
        for i in range(count):
            lines = [
                ResolvedLineItem(
                    product_ref=str(product.id),
                    name=product.name,
                    unit_price=product.price,
                    quantity=random.randint(1, 3),
                    image_url=product.image_url,
                )
                for product in random.sample(products, k=random.randint(1, 3))
            ]
            draft = build_order_draft(
                customer=customer,
                lines=lines,
                payment_method=PaymentMethod.CASH_ON_DELIVERY,
                shipping=Decimal("49.00"),
                notes=f"Seed order {i + 1}",
            )
            repository.create_from_draft(draft, shopper)

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return count
