from setuptools import setup, find_packages


setup(
    name="seedstream",
    version="0.1",
    packages=find_packages(include=["seedstream", "seedstream.*"]),
    description="Deterministic random byte generators and unbiased samplers built from a secret seed.",
    author="vercingetorx",
    install_requires=[
        "pycryptodomex>=3.23.0,<4",
        "blake3>=0.4.1",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "seedstream=seedstream.cli:main",
        ]
    },
)
