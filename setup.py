from setuptools import find_packages, setup

# Read the long description from README.md
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

if __name__ == "__main__":
    setup(
        name="opmodel",
        version="0.1.0",
        description="Optimization modeling layer backed by OR-Tools",
        long_description=long_description,
        long_description_content_type="text/markdown",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        python_requires=">=3.9",
        install_requires=[
            "ortools>=9.15,<9.16",
            "absl-py",
        ],
        include_package_data=True,
    )
