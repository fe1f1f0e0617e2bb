from setuptools import find_packages, setup

setup(
    name="fem-kernel",
    version="0.1.0",
    description="Isoparametric finite element kernel: shape function gradients, "
    "mapping Jacobians and nodal stiffness blocks",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
