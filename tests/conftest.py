"""Pytest fixtures for testing"""

import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from loan_ops.api.main import create_app
from loan_ops.api.dependencies import get_repository
from loan_ops.domain.models import Agent, Application, DirectoryContext, Fillial, Merchant, Payment, Product
from loan_ops.infrastructure.repository import InMemoryRepository


@pytest.fixture
def directory() -> DirectoryContext:
    """Two merchants, three fillials, one agent covering a fillial of each"""
    return DirectoryContext.from_lists(
        merchants=[
            Merchant(id=1, name="Texnomart"),
            Merchant(id=2, name="Mediapark"),
        ],
        fillials=[
            Fillial(id=10, name="Chilonzor", region="TOSHKENT", merchant_id=1),
            Fillial(id=11, name="Sergeli", region="TOSHKENT", merchant_id=1),
            Fillial(id=20, name="Registon", region="SAMARQAND", merchant_id=2),
        ],
        agents=[
            Agent(id=5, name="Aziz Karimov", fillial_ids=frozenset({10, 20})),
        ],
    )


@pytest.fixture
def applications() -> list[Application]:
    """Six applications spanning every category and some unresolvable references"""
    return [
        Application(
            id=1,
            raw_status="CONFIRMED",
            amount=1_000_000,
            payment_amount=1_200_000,
            term_months=12,
            created_at=datetime(2024, 1, 15, 10, 0),
            fillial_id=10,
            fullname="Akmal Rahimov",
            phone="+998901234567",
            passport="AA1234567",
            products=[Product(name="Samsung Galaxy S23", price=1_000_000, count=1)],
        ),
        Application(
            id=2,
            raw_status="FINISHED",
            amount=500_000,
            term_months=6,
            created_at=datetime(2024, 1, 16, 9, 0),
            fillial_id=11,
            paid=True,
            payment_method="Click",
            fullname="Dilshod Karimov",
            phone="+998912345678",
            passport="AB2345678",
            products=[Product(name="Artel TV 55", price=250_000, count=2)],
        ),
        Application(
            id=3,
            raw_status="CANCELED_BY_CLIENT",
            amount=300_000,
            term_months=3,
            created_at=datetime(2024, 2, 3, 12, 0),
            fillial_id=20,
            fullname="Shohruh Tursunov",
        ),
        Application(
            id=4,
            raw_status="WAITING_BANK_CONFIRM",
            amount=2_000_000,
            term_months=6,
            created_at=datetime(2024, 2, 10, 8, 30),
            fillial_id=20,
            fullname="Nodira Azimova",
        ),
        Application(
            id=5,
            raw_status="ACTIVE",
            amount=900_000,
            payment_amount=900_000,
            term_months=3,
            created_at=datetime(2024, 1, 1, 11, 0),
            fillial_id=99,  # not in directory
            paid=False,
            fullname="Jasur Aliev",
            payments=[
                Payment(amount=300_000, occurred_at=datetime(2024, 2, 1, 15, 0), status="COMPLETED"),
                Payment(amount=100_000, occurred_at=datetime(2024, 2, 20, 15, 0), status="FAILED"),
            ],
        ),
        Application(
            id=6,
            raw_status="LIMIT",
            amount=None,
            created_at=datetime(2024, 3, 1, 17, 45),
            fullname="Kamola Yusupova",
        ),
    ]


@pytest.fixture
def repository(applications: list[Application], directory: DirectoryContext) -> InMemoryRepository:
    return InMemoryRepository(applications, directory)


@pytest.fixture
def client(repository: InMemoryRepository) -> TestClient:
    """Create FastAPI test client backed by the in-memory repository"""
    app = create_app()
    app.dependency_overrides[get_repository] = lambda: repository
    return TestClient(app)
