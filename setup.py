"""Setup configuration for tube2tldr package."""
from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="tube2tldr",
    version="0.1.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Grab a YouTube video's transcript from the page and summarise it chunk by chunk",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/tube2tldr",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
    install_requires=[
        "openai>=1.0.0",
        "tiktoken>=0.5.0",
        "python-dotenv>=1.0.0",
        "pytube>=15.0.0",
        "selenium>=4.6.0",
        "webdriver-manager>=4.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "tube2tldr=tube2tldr.main:main",
        ],
    },
)
