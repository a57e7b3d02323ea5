# dataingest.py
"""
Faker-based Data Ingestion for ServiceHub

Usage:
  # (optional) tune volumes and seed via env
  export FAKER_SEED=42
  export NUM_CUSTOMERS=25
  export NUM_REQUESTS=100

  python dataingest.py

Notes:
- Default categories and the admin account come from db.init.init_db
- Passwords are hashed via utils.security.hash_password
  - Customers -> "customer123"
- Roughly a third of the generated requests are marked completed.
"""

import os
import random
from datetime import timedelta
from typing import List

from faker import Faker
from sqlalchemy.orm import Session

from db.init import init_db, SessionLocal
from utils.security import hash_password

from models.user import User, ROLE_CUSTOMER, utcnow
from models.service_category import ServiceCategory
from models.service_request import ServiceRequest


# ----------------------- Config -----------------------
FAKER_SEED = int(os.getenv("FAKER_SEED", "42"))

NUM_CUSTOMERS = int(os.getenv("NUM_CUSTOMERS", "25"))
NUM_REQUESTS = int(os.getenv("NUM_REQUESTS", "100"))

DEFAULT_CUSTOMER_PASSWORD = os.getenv("DEFAULT_CUSTOMER_PASSWORD", "customer123")

COMPLETED_RATIO = 0.33

PROBLEMS = {
    "Electrician": ["Flickering lights in {room}", "Dead outlet in {room}", "Breaker keeps tripping"],
    "Plumber": ["Leaky faucet in {room}", "Clogged drain in {room}", "Low water pressure"],
    "Carpenter": ["Sticking door in {room}", "Broken cabinet hinge", "Loose stair railing"],
    "House Cleaning": ["Deep clean of {room}", "Move-out cleaning", "Weekly cleaning"],
    "Painting": ["Repaint {room}", "Touch up trim", "Exterior fence painting"],
}
ROOMS = ["kitchen", "bathroom", "living room", "bedroom", "garage", "hallway"]


# ----------------------- Faker setup -----------------------
faker = Faker(["en_US", "en_GB"])
random.seed(FAKER_SEED)
Faker.seed(FAKER_SEED)


def _bool_biased(true_prob: float = 0.5) -> bool:
    return random.random() < true_prob


def _describe(category: ServiceCategory) -> str:
    templates = PROBLEMS.get(category.name)
    if not templates:
        return faker.sentence(nb_words=6)
    return random.choice(templates).format(room=random.choice(ROOMS))


# ----------------------- Seeders -----------------------
def seed_customers(db: Session) -> List[User]:
    customers: List[User] = []
    seen = set()
    # one hash for every fake account, pbkdf2 is deliberately slow
    password_hash = hash_password(DEFAULT_CUSTOMER_PASSWORD)
    while len(customers) < max(1, NUM_CUSTOMERS):
        username = faker.user_name()
        if username in seen:
            continue
        seen.add(username)
        exists = User.by_username(db, username)
        if exists:
            customers.append(exists)
            continue
        user = User(username=username, password_hash=password_hash, role=ROLE_CUSTOMER)
        db.add(user)
        customers.append(user)
    db.commit()
    print(f"[seed] customers: {len(customers)}")
    return customers


def seed_requests(db: Session, customers: List[User], categories: List[ServiceCategory]) -> List[ServiceRequest]:
    if not customers or not categories:
        print("[seed] requests: skipped (no customers or categories)")
        return []

    now = utcnow()
    requests: List[ServiceRequest] = []
    for _ in range(NUM_REQUESTS):
        category = random.choice(categories)
        req = ServiceRequest(
            description=_describe(category),
            requested_at=now - timedelta(days=random.randint(0, 60), minutes=random.randint(0, 1439)),
            completed=_bool_biased(COMPLETED_RATIO),
            category_id=category.id,
            user_id=random.choice(customers).id,
        )
        db.add(req)
        requests.append(req)
    db.commit()
    print(f"[seed] requests: {len(requests)}")
    return requests


def run():
    init_db(seed=True)
    db = SessionLocal()
    try:
        categories = db.query(ServiceCategory).all()
        customers = seed_customers(db)
        seed_requests(db, customers, categories)
    finally:
        db.close()


if __name__ == "__main__":
    run()
