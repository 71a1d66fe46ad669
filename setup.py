from setuptools import setup, find_packages

setup(
    name="salonpro-reminders",
    version="0.1.0",
    packages=find_packages(include=["salonpro", "salonpro.*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "alembic",
        "psycopg2-binary",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
        "celery",
        "apscheduler>=3.10,<4",
        "twilio",
        "requests",
        "prometheus-client",
        "prometheus-fastapi-instrumentator",
        "tzdata",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
