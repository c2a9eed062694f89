from setuptools import setup, find_packages

setup(
    name="pedigree-engine",
    version="0.1.0",
    description="Pedigree and breeding-genetics engine for livestock record keeping",
    author="Pedigree Engine Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.24.0",
        "pyyaml>=6.0",
    ],
    python_requires=">=3.10",
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
)
