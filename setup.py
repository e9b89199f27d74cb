from setuptools import setup, find_packages

setup(
    name="seqcache",
    version="0.1.0",
    packages=find_packages(include=["seqcache", "seqcache.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pysam",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
