from setuptools import setup, find_packages

setup(
    name="pegrid",
    version="0.1.0",
    description="Potential energy grids of an adsorbate in a periodic framework",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "numpy",
        "pyyaml",
        "tqdm",
        "ovito"
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'pegrid=pegrid.cli:main',
        ],
    },
    python_requires=">=3.8",
)
