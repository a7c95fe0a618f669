"""Setup configuration for llm-unify."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="llm-unify",
    version="0.1.0",
    author="LLM Unify Team",
    author_email="team@llm-unify.dev",
    description="Provider detection and response normalization for twelve LLM APIs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/llm-unify/llm-unify",
    packages=find_packages(exclude=("tests", "tests.*")),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "httpx>=0.24.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
            # SDK response objects are accepted as parser input
            "openai>=1.0.0",
            "anthropic>=0.18.0",
        ],
    },
)
