# setup.py
from setuptools import setup, find_packages

setup(
    name="outbound_checker",
    version="0.1.0",
    description="Асинхронная проверка исходящих ссылок сайта OutboundChecker",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"outbound_checker": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "outbound-checker=outbound_checker.cli:main",
        ],
    },
    python_requires=">=3.11",
)
