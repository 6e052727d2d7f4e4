# setup.py
from setuptools import setup, find_packages

setup(
    name="domain_scout",
    version="0.1.0",
    description="Асинхронный поиск освободившихся доменов DomainScout",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"domain_scout": ["data/public_suffix_list.dat"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "lxml>=4.9",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "click>=8.1",
        "dnspython>=2.4",
        "playwright>=1.40",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "domain-scout=domain_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
