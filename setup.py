from setuptools import find_packages, setup

setup(
    name="curvekit",
    version="0.3.0",
    description="Bezier and elliptical arc geometry with adaptive flattening and stroking",
    packages=find_packages(include=["curvekit", "curvekit.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
