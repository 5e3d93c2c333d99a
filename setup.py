import os
from setuptools import setup


def read(fname):
    try:
        with open(os.path.join(os.path.dirname(__file__), fname)) as f:
            return f.read()
    except IOError:
        return ""


setup(
    name="mixidr",
    version="0.2.0",

    description="Expectation-Maximization (EM) fitting of two-component Gaussian mixtures with IDR-style reproducibility scores",
    long_description=read("README.rst"),

    license="MIT",
    keywords="numeric em expectation maximization gaussian mixture idr reproducibility statistics",

    packages=['mixidr', 'mixidr.distribution'],
    python_requires=">=3.7",

    install_requires=[
        "numpy>=1.17.0",
        "scipy>=1.0.0",
        "pandas>=1.0.0",
    ],

    extras_require={
        "test": [
            "pytest",
            "scikit-learn",
        ],
    },

    entry_points={
        "console_scripts": [
            "mixidr=mixidr.cli:main",
        ],
    },

    classifiers=[
        "Development Status :: 3 - Alpha",
        "Operating System :: OS Independent",
        "License :: OSI Approved :: MIT License",

        "Intended Audience :: Science/Research",
        "Intended Audience :: Education",

        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
)
