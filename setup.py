""" ringsig build script for setuptools.

"""

from setuptools import find_packages, setup  # type: ignore

import ringsig

with open("README.md", "r", encoding="ascii") as file_:
    longdescription = file_.read()

setup(
    name=ringsig.name,
    version=ringsig.__version__,
    license=ringsig.__license__,
    author=ringsig.__author__,
    author_email=ringsig.__author_email__,
    description="Linkable ring signatures over elliptic curves",
    long_description=longdescription,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=["btclib>=2023.2,<2026"],
    extras_require={"test": ["pytest"]},
    keywords=(
        "cryptography elliptic-curves ring-signature linkable-ring-signature "
        "key-image anonymity secp256k1"
    ),
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
