"""
xmp_model - XMP metadata model, packet parser and packet encoder
Author: Eric Hiss (GitHub: EricRollei)
Version: 1.0.0
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as f:
    requirements = f.read().splitlines()

setup(
    name="xmp-model",
    version="1.0.0",
    author="Eric Hiss",
    author_email="eric@rollei.us",
    description="In-memory model, parser and encoder for XMP metadata packets",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/EricRollei/Comfy-Metadata-System",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: Other/Proprietary License",
        "Operating System :: OS Independent",
        "Intended Audience :: Developers",
        "Topic :: Multimedia :: Graphics",
        "Topic :: Text Processing :: Markup :: XML",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest",
            "Pillow",
        ],
    },
)
