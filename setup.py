#!/usr/bin/env python3
"""
Setup script for the sign language recognition core
"""

from setuptools import setup, find_packages

setup(
    name="handsign",
    version="0.1.0",
    description="ASL letter and gesture recognition from hand landmarks",
    packages=find_packages(include=["handsign", "handsign.*"]),
    package_data={"handsign": ["config.default.yaml"]},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "PyYAML",
    ],
    extras_require={
        # webcam application and landmark tracking
        "camera": [
            "opencv-python",
            "mediapipe",
        ],
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "handsign=handsign.main:cli",
        ],
    },
)
