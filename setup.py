from setuptools import find_packages, setup


setup(
    name="scram_client",
    description="SCRAM-SHA-1 / SCRAM-SHA-256 client conversation engine (RFC 5802)",
    packages=find_packages(include=["scram_client", "scram_client.*"]),
    license="LGPLv3",
    python_requires=">=3.11",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "scram-client = scram_client.cli:main",
        ],
    },
)
