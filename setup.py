from setuptools import find_packages, setup


setup(
    name="place-macro",
    version="0.2.0",
    description="Reverse-order expansion of __directive__(...) calls in token streams",
    author="GAHEOS",
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_packages("src", include=["placemacro", "placemacro.*"]),
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["placemacro=placemacro.cli:main"]},
)
