# setup.py
from setuptools import setup, find_packages

setup(
    name="webapp_scraper",
    version="0.1.0",
    description="Breadth-first web application crawler driving a headless browser",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"webapp_scraper.report": ["templates/*.j2"]},
    install_requires=[
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.2",
        "beautifulsoup4>=4.12",
        "Jinja2>=3.1",
    ],
    entry_points={
        "console_scripts": ["webapp_scraper=webapp_scraper.cli:cli"],
    },
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    python_requires=">=3.11",
)
