from setuptools import setup, find_namespace_packages

setup(
    name="dpdgeom",
    version="0.1",
    packages=find_namespace_packages(include=["dpdgeom", "dpdgeom.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "matplotlib",
        "plotly",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
