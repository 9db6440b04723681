from setuptools import setup, find_packages

setup(
    name="vanguard-rebalancer",
    version="1.0.0",
    author="Vanguard Rebalancer Team",
    description="Stock/bond rebalancing across Vanguard brokerage, traditional and Roth IRA accounts",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "allocation_engine": ["data/*.csv"],
    },
    install_requires=[
        "pydantic==2.11.7",
        "PyYAML==6.0.2",
        "aiohttp==3.12.15",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "vanguard-rebalance=rebalance_cli.main:main",
        ],
    },
    python_requires=">=3.11",
)
