from setuptools import setup, find_packages

setup(
    name="IPDI2",
    version="0.1.0",
    packages=find_packages(include=["ipdi2", "ipdi2.*"]),
    install_requires=[
        "numpy",
        "pandas",
        "scipy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
    description="I-squared estimation for one-stage IPD meta-analysis of binary outcomes",
)
