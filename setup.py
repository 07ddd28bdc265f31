from setuptools import setup, find_packages

setup(
    name="stakeview",
    version="0.1.0",
    description="Preload data cache and delegation views for delegated-staking wallets",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2",
        "pydantic-settings",
        "structlog",
        "prometheus-client",
        "redis>=5.0.1"
    ],
    extras_require={
        "test": [
            "pytest"
        ]
    },
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "stakeview=staking.__main__:main",
        ],
    }
)
