from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.accounts.models import Role
from modules.core.exceptions import DomainError
from modules.customers.models import CustomerProfile
from modules.orders.constants import OrderStatus
from modules.orders.dtos import PlaceOrderDTO, PlaceOrderItemDTO
from modules.orders.services import OrderService
from modules.products.constants import ProductCategory
from modules.products.models import Product


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=30)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        customers = self._seed_customers(users["customers"])
        products = self._seed_products(users["farmer"])
        placed = self._seed_orders(customers, products, options["orders"], users)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"customers={len(customers)}, "
                f"products={len(products)}, "
                f"orders={placed}"
            )
        )

    def _seed_users(self) -> dict:
        User = get_user_model()

        def ensure(username: str, role: str, **extra):
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(
                    username, password=f"{username}123", role=role, **extra
                )
            return user

        return {
            "admin": ensure("admin", Role.ADMIN, is_staff=True, is_superuser=True),
            "farmer": ensure("farmer", Role.FARMER),
            "employee": ensure("employee", Role.EMPLOYEE),
            "customers": [
                ensure(f"customer{n}", Role.CUSTOMER) for n in range(1, 6)
            ],
        }

    def _seed_customers(self, users) -> list:
        self.stdout.write("Creating customer profiles...")
        addresses = [
            ("Ana Moreira", "12 Orchard Lane, Springfield"),
            ("Bruno Castro", "48 Mill Road, Riverside"),
            ("Carla Nunes", "7 Barn Street, Hillcrest"),
            ("Daniel Reis", "301 Valley Drive, Greenfield"),
            ("Elisa Prado", "22 Harvest Way, Meadowbrook"),
        ]
        profiles = []
        for user, (name, address) in zip(users, addresses):
            profile, _ = CustomerProfile.objects.get_or_create(
                user=user,
                defaults={
                    "full_name": name,
                    "phone_number": f"555-01{random.randint(10, 99)}",
                    "shipping_address": address,
                    "billing_address": address,
                },
            )
            profiles.append(profile)
        self.stdout.write(self.style.SUCCESS("Creating customer profiles... Done!"))
        return profiles

    def _seed_products(self, farmer) -> list[Product]:
        self.stdout.write("Creating products...")
        catalog = [
            ("Heirloom Tomato Seeds", ProductCategory.SEEDS, Decimal("4.50")),
            ("Organic Compost", ProductCategory.FERTILIZERS, Decimal("12.00")),
            ("Neem Oil Spray", ProductCategory.PESTICIDES, Decimal("9.75")),
            ("Pruning Shears", ProductCategory.TOOLS, Decimal("18.90")),
            ("Drip Irrigation Kit", ProductCategory.IRRIGATION, Decimal("64.00")),
            ("Free-range Eggs (dozen)", ProductCategory.DAIRY, Decimal("5.20")),
            ("Grass-fed Beef", ProductCategory.MEAT, Decimal("15.40")),
            ("Honeycrisp Apples", ProductCategory.PRODUCE, Decimal("2.10")),
        ]
        products: list[Product] = []
        for name, category, price in catalog:
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults={
                    "category": category,
                    "price": price,
                    "stock_quantity": random.randint(20, 150),
                    "farmer": farmer,
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, customers, products, count: int, users) -> int:
        self.stdout.write("Placing orders...")
        if not customers or not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no customers/products)."))
            return 0

        service = OrderService()
        lifecycle = [
            OrderStatus.PENDING,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
        ]
        placed = 0
        for _ in range(count):
            profile = random.choice(customers)
            chosen = random.sample(products, k=random.randint(1, 3))
            dto = PlaceOrderDTO(
                items=[
                    PlaceOrderItemDTO(product_id=p.id, quantity=random.randint(1, 4))
                    for p in chosen
                ]
            )
            try:
                result = service.place_order(profile.user_id, dto)
            except DomainError as exc:
                self.stdout.write(self.style.WARNING(f"Order skipped: {exc.message}"))
                continue
            placed += 1

            target = random.choice(lifecycle + [OrderStatus.CANCELLED])
            if target != OrderStatus.PENDING:
                service.transition(
                    result.order_id, target, changed_by=users["employee"].pk
                )

        self.stdout.write(self.style.SUCCESS("Placing orders... Done!"))
        return placed
