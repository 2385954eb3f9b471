from setuptools import setup, find_packages

setup(
    name="cycle6502",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.20.0",
        "matplotlib>=3.4.0",
        "pyyaml>=5.4",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "cycle6502=cycle6502.main:main",
        ],
    },
    description="A cycle-stepped MOS 6502 CPU emulator with trace analysis",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Topic :: System :: Emulators",
    ],
    python_requires=">=3.9",
)
