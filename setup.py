"""Setup configuration for the product-service project."""

from setuptools import setup, find_packages

setup(
    name="product-service",
    version="1.0.0",
    description="REST API for a product catalog with FastAPI and SQLAlchemy",
    packages=find_packages(exclude=["tests"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.109.0",
        "uvicorn>=0.27.0",
        "sqlalchemy[asyncio]>=2.0.23",
        "asyncpg>=0.29.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.25.0",
            "aiosqlite>=0.19.0",
        ],
    },
)
