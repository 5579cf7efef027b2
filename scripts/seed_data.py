from __future__ import annotations

import argparse

from services.api.app.db.database import db_session
from services.api.app.db.init_db import init_db
from services.api.app.db.models import Customer, DeliveryAgent, Vendor
from services.api.app.services import catalog, identity
from services.api.app.services.identity import Principal


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed demo marketplace data")
    parser.add_argument("--pincode", default="560001")
    parser.add_argument("--vendor-email", default="pharmacy@example.com")
    parser.add_argument("--vendor-name", default="Dawa Pharmacy")
    parser.add_argument("--agent-email", default="rider@example.com")
    parser.add_argument("--customer-email", default="customer@example.com")
    parser.add_argument("--password", default="secret123")
    args = parser.parse_args()

    init_db()

    db = db_session()
    try:
        vendor = db.query(Vendor).filter(Vendor.email == args.vendor_email).first()
        if vendor is None:
            vendor = catalog.create_vendor(
                db,
                name=args.vendor_name,
                owner_name="Demo Owner",
                product_types=["medicine", "grocery"],
                pincode=args.pincode,
                address="12 MG Road",
                phone="9000000001",
                email=args.vendor_email,
                password=args.password,
                rating=4,
            )
            principal = Principal(id=vendor.id, email=vendor.email)
            catalog.toggle_vendor_service(db, principal)

            for name, category, product_type, minutes, price in (
                ("Paracetamol 500mg", "pain relief", "medicine", 20, 30),
                ("Cough Syrup", "cold and flu", "medicine", 25, 95),
                ("Basmati Rice 1kg", "staples", "grocery", 45, 120),
            ):
                catalog.add_product(
                    db,
                    principal,
                    name=name,
                    description="",
                    category=category,
                    product_type=product_type,
                    delivery_time=minutes,
                    price=price,
                )

        agent = db.query(DeliveryAgent).filter(DeliveryAgent.email == args.agent_email).first()
        if agent is None:
            agent = identity.signup_agent(
                db,
                email=args.agent_email,
                phone="9000000002",
                password=args.password,
                first_name="Demo",
                last_name="Rider",
                address="4 Church Street",
                pincode=args.pincode,
            )
            agent.verified = True
            agent.is_available = True
            db.commit()

        customer = db.query(Customer).filter(Customer.email == args.customer_email).first()
        if customer is None:
            customer = identity.signup_customer(
                db, email=args.customer_email, phone="9000000003", password=args.password
            )

        print(f"Seeded vendor={vendor.id} agent={agent.id} customer={customer.id}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
