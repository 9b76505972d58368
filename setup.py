"""Setup configuration for TCG Trends package."""

from setuptools import setup, find_packages

setup(
    name="tcg-trends",
    version="1.0.0",
    description="Trading card catalog browser with daily price trends",
    author="Alex",
    author_email="",
    packages=(
        find_packages(where="src")
        + ["api"] + [f"api.{p}" for p in find_packages(where="api")]
        + ["config"]
    ),
    package_dir={"": "src", "api": "api", "config": "config"},
    package_data={"config": ["*.yaml"]},
    python_requires=">=3.11",
    install_requires=[
        "duckdb>=1.0.0",
        "fastapi>=0.110.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "httpx>=0.26.0",
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
        "uvicorn>=0.27.0",
    ],
    extras_require={
        "dev": [
            "pytest>=8.0.0",
            "pytest-cov>=4.1.0",
            "black>=24.1.0",
            "ruff>=0.2.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "tcg-init-db=database.cli:main",
        ],
    },
)
