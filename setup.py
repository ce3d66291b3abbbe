from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="lineq",
    version="0.1.0",
    packages=find_packages(where="src"),  # Tells setuptools to look for packages in the 'src' directory
    package_dir={"": "src"},  # Sets the root of packages to 'src'
    description="Parses an equation & reduces it to canonical linear form",
    long_description=long_description,
    long_description_content_type="text/markdown",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "dev": [
            "pytest>=5.2",  # Dependencies for testing
            "matplotlib",  # Logger.plot
        ],
    },
    python_requires=">=3.8",
)
