"""
Setup script to make strategy_core pip-installable
"""

from setuptools import setup, find_packages

setup(
    name="strategy-core",
    version="0.1.0",
    description="TradLyte Strategy Definitions - builder model, validation, storage and execution client",
    author="TradLyte Team",
    packages=find_packages(include=["strategy_core", "strategy_core.*"]),
    install_requires=[
        "pydantic>=2.5.0",
        "aiohttp>=3.9.0",
        "boto3>=1.28.0",
        "psycopg2-binary>=2.9.0",
        "sqlalchemy>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "strategy-core=strategy_core.cli:main",
        ],
    },
    python_requires=">=3.9",
)
