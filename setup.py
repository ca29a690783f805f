from setuptools import find_packages, setup

setup(
    name="ahmad-shell",
    version="0.1.0",
    description="Shape function, Jacobian and strain-displacement kernel for Ahmad degenerated shell elements",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["numpy", "pyyaml"],
    extras_require={
        "dev": ["pytest"],
    },
    python_requires=">=3.9",
)
