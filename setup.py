from setuptools import find_packages, setup

setup(
    name="matchy-pairing",
    version="0.1.0",
    description="Matchy Pairing",
    long_description="Pair up members so nobody meets a recent partner again.",
    license="GPL-3.0-or-later",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "networkx>=3.0",
        "httpx>=0.24",
        "python-dateutil>=2.8",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
        "dev": ["black", "isort", "ruff"],
    },
    entry_points={
        "console_scripts": [
            "matchy-pairing=matchypairing.__main__:main",
        ],
    },
)
