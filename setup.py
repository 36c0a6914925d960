from setuptools import setup, find_packages

setup(
    name="stocksim",
    version="1.0.0",
    packages=find_packages(include=["stocksim", "stocksim.*"]),
    py_modules=["run_simulation"],
    install_requires=[
        "pandas>=2.2.0",
        "numpy>=2.0.2",
        "scipy>=1.13.0",
        "pyyaml>=6.0",
        "typeguard>=4.3.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    author="Your Name",
    description="Seeded demand generation and ROP/EOQ inventory simulation",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Topic :: Scientific/Engineering :: Information Analysis",
    ],
    entry_points={
        'console_scripts': [
            'run-simulation=run_simulation:main',
        ],
    },
    include_package_data=True,
)
