"""
location: setup.py


"""
from setuptools import setup, find_packages

setup(
    name="club-nlq",
    version="0.1.0",
    packages=find_packages(include=["club_nlq", "club_nlq.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.11.3",
        "python-dotenv>=1.1.0",
        "prometheus-client>=0.20.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "mypy>=1.0.0",
            "black>=23.0.0",
            "isort>=5.0.0",
            "invoke>=2.2.0",
            "setuptools>=61.0",
        ]
    },
)
