from setuptools import setup, find_packages

setup(
    name="running-stats",
    version="0.1.0",
    description="Single-pass, mergeable running statistics",
    author="adamfilli",
    packages=find_packages(include=["runningstats", "runningstats.*"]),
    install_requires=[
        "pandas"
    ],
    extras_require={
        "test": [
            "pytest",
            "numpy"
        ]
    },
    include_package_data=True,
    python_requires=">=3.13",
)
