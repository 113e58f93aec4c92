from setuptools import setup, find_packages

setup(
    name="terrain_wfc",
    version="0.1.0",
    author="Your Name",
    description="Pattern-learning Wave Function Collapse with backtracking for tile grids",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["enhanced_wfc"],
    install_requires=[
        "numpy",
        "pyyaml",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["enhanced-wfc=enhanced_wfc:main"],
    },
    python_requires=">=3.9",
)
