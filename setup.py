from setuptools import setup, find_packages


setup(
    name="pngstash",
    version="0.1",
    packages=find_packages(include=["pngstash", "pngstash.*"]),
    description="Hide messages in PNG chunks, with CRC-verified chunk parsing and optional password sealing.",
    install_requires=[
        "pycryptodomex>=3.23.0",
        "argon2-cffi>=23.1.0",
    ],
    entry_points={
        "console_scripts": [
            "pngstash=pngstash.cli:main",
        ]
    },
)
